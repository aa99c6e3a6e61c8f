"""Markdown report writer."""

from pathlib import Path
from typing import List
from datetime import datetime

from ..gate.result import GateResult
from ..results.finding import Finding


class MarkdownWriter:
    """Writes gate results to Markdown format."""

    def __init__(self, include_ignored: bool = False):
        self.include_ignored = include_ignored

    def write(self, result: GateResult, output_path: str) -> str:
        """
        Write gate result to Markdown file.

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

    def _render(self, result: GateResult) -> str:
        lines = []
        summary = result.get_summary()
        verdict = result.verdict

        lines.append(f"# Security Gate: {verdict.status}")
        lines.append("")
        lines.append(f"**Generated:** {datetime.utcnow().strftime('%Y-%m-%d %H:%M:%S UTC')}")
        lines.append(f"**Run ID:** `{result.id[:8]}`")
        lines.append(f"**Policy:** {result.policy_source or 'none'} ({result.policy_rule_count} rules)")
        lines.append("")

        lines.append("## Summary")
        lines.append("")
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| Total Findings | {summary['total_findings']} |")
        lines.append(f"| Failures | {summary['failures']} |")
        lines.append(f"| Warnings | {summary['warnings']} |")
        lines.append(f"| Ignored | {summary['ignored']} |")
        for severity, count in summary["by_severity"].items():
            lines.append(f"| {severity.title()} | {count} |")
        lines.append(f"| Duration | {summary['duration']} |")
        lines.append("")

        if result.sources:
            lines.append("## Sources")
            lines.append("")
            for source in result.sources:
                lines.append(f"- {source['name']}: {source['findings']} finding(s)")
            lines.append("")

        lines.extend(self._section("Failures", verdict.failures))
        lines.extend(self._section("Warnings", verdict.warnings))
        if self.include_ignored:
            lines.extend(self._section("Ignored", result.ignored))

        lines.append("---")
        lines.append("*Report generated by secgate*")

        return "\n".join(lines)

    def _section(self, title: str, findings: List[Finding]) -> List[str]:
        lines = [f"## {title}", ""]

        if not findings:
            lines.append(f"No {title.lower()}.")
            lines.append("")
            return lines

        lines.append("| Rule | Category | Severity | Description | Location |")
        lines.append("|------|----------|----------|-------------|----------|")
        for f in findings:
            lines.append(
                f"| `{f.rule_id}` | {f.category.name} | {f.severity.name} "
                f"| {self._cell(f.description)} | {self._cell(f.location)} |"
            )
        lines.append("")
        return lines

    def _cell(self, text: str) -> str:
        return text.replace("|", "\\|").replace("\n", " ")

    def to_string(self, result: GateResult) -> str:
        """Render gate result to Markdown string."""
        return self._render(result)
