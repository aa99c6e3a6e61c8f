"""HTML report writer using Jinja2 templates."""

from pathlib import Path
from typing import Optional
import logging
from datetime import datetime

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from ..gate.result import GateResult

logger = logging.getLogger(__name__)


# Inline template used when no template directory is configured
DEFAULT_HTML_TEMPLATE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Security Gate {{ verdict.status }} - {{ run.id[:8] }}</title>
    <style>
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; background: #f5f5f5; }
        .container { max-width: 1200px; margin: 0 auto; padding: 20px; }
        header { color: white; padding: 30px 0; margin-bottom: 30px; }
        header.passed { background: #2e7d32; }
        header.failed { background: #c62828; }
        header h1 { text-align: center; }
        .summary { display: grid; grid-template-columns: repeat(auto-fit, minmax(160px, 1fr)); gap: 20px; margin-bottom: 30px; }
        .card { background: white; border-radius: 8px; padding: 20px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
        .card h3 { margin-bottom: 10px; color: #666; font-size: 0.9em; text-transform: uppercase; }
        .card .value { font-size: 2em; font-weight: bold; }
        .fail { color: #d32f2f; }
        .warn { color: #f57c00; }
        section { margin-top: 30px; }
        table { width: 100%; border-collapse: collapse; background: white; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
        th, td { text-align: left; padding: 10px 14px; border-bottom: 1px solid #eee; }
        th { background: #1a1a2e; color: white; font-size: 0.85em; text-transform: uppercase; }
        .badge { padding: 2px 10px; border-radius: 20px; font-size: 0.8em; font-weight: bold; color: white; }
        .badge.CRITICAL { background: #d32f2f; }
        .badge.HIGH { background: #f57c00; }
        .badge.MEDIUM { background: #fbc02d; color: #333; }
        .badge.LOW { background: #388e3c; }
        .badge.INFO { background: #1976d2; }
        footer { text-align: center; padding: 30px; color: #666; font-size: 0.9em; }
    </style>
</head>
<body>
    <header class="{{ verdict.status|lower }}">
        <div class="container">
            <h1>Security Gate {{ verdict.status }}</h1>
            <p style="text-align:center; opacity:0.8; margin-top:10px;">
                Generated: {{ generated_at }} | Policy: {{ run.policy_source or 'none' }} ({{ run.policy_rule_count }} rules)
            </p>
        </div>
    </header>

    <div class="container">
        <div class="summary">
            <div class="card"><h3>Findings</h3><div class="value">{{ summary.total_findings }}</div></div>
            <div class="card"><h3>Failures</h3><div class="value fail">{{ summary.failures }}</div></div>
            <div class="card"><h3>Warnings</h3><div class="value warn">{{ summary.warnings }}</div></div>
            <div class="card"><h3>Ignored</h3><div class="value">{{ summary.ignored }}</div></div>
            <div class="card"><h3>Duration</h3><div class="value" style="font-size:1.5em;">{{ summary.duration }}</div></div>
        </div>

        {% for title, findings in sections %}
        <section>
            <h2 style="margin-bottom: 15px;">{{ title }}</h2>
            {% if findings %}
            <table>
                <tr><th>Rule</th><th>Category</th><th>Severity</th><th>Description</th><th>Location</th></tr>
                {% for f in findings %}
                <tr>
                    <td><code>{{ f.rule_id }}</code></td>
                    <td>{{ f.category.name }}</td>
                    <td><span class="badge {{ f.severity.name }}">{{ f.severity.name }}</span></td>
                    <td>{{ f.description }}</td>
                    <td><code>{{ f.location }}</code></td>
                </tr>
                {% endfor %}
            </table>
            {% else %}
            <div class="card" style="text-align:center;">No {{ title|lower }}</div>
            {% endif %}
        </section>
        {% endfor %}
    </div>

    <footer>
        <p>Generated by secgate | run {{ run.id }}</p>
    </footer>
</body>
</html>
'''


class HTMLWriter:
    """Writes gate results to HTML format."""

    def __init__(
        self,
        template_dir: Optional[str] = None,
        template_name: str = "report.html.jinja2",
        include_ignored: bool = False
    ):
        self.template_dir = template_dir
        self.template_name = template_name
        self.include_ignored = include_ignored

    def write(self, result: GateResult, output_path: str) -> str:
        """
        Write gate result to HTML file.

        Args:
            result: Gate result to write
            output_path: Output file path

        Returns:
            Path to written file
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            f.write(self._render(result))

        return str(path)

    def _get_template(self):
        if self.template_dir:
            env = Environment(
                loader=FileSystemLoader(self.template_dir),
                autoescape=select_autoescape(["html", "xml", "jinja2"])
            )
            try:
                return env.get_template(self.template_name)
            except TemplateNotFound:
                logger.warning(
                    f"Template {self.template_name} not found in {self.template_dir}, using default"
                )

        env = Environment(autoescape=True)
        return env.from_string(DEFAULT_HTML_TEMPLATE)

    def _render(self, result: GateResult) -> str:
        template = self._get_template()

        sections = [
            ("Failures", result.verdict.failures),
            ("Warnings", result.verdict.warnings),
        ]
        if self.include_ignored:
            sections.append(("Ignored", result.ignored))

        return template.render(
            run=result,
            verdict=result.verdict,
            summary=result.get_summary(),
            sections=sections,
            generated_at=datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S UTC"),
        )

    def to_string(self, result: GateResult) -> str:
        """Render gate result to HTML string."""
        return self._render(result)
