"""Multi-format report generator."""

from pathlib import Path
from typing import Dict, List, Optional
from datetime import datetime

from .json_writer import JSONWriter
from .html_writer import HTMLWriter
from .markdown_writer import MarkdownWriter
from ..gate.result import GateResult


class ReportGenerator:
    """
    Generates gate reports in multiple formats.

    Supported formats:
    - JSON: Machine-readable with full details
    - HTML: Styled report for email attachment or CI artifact
    - Markdown: Human-readable, suits PR comments
    """

    def __init__(
        self,
        output_dir: str = "./reports",
        template_dir: Optional[str] = None
    ):
        self.output_dir = Path(output_dir)
        self.template_dir = template_dir

        self._json_writer = JSONWriter()
        self._html_writer = HTMLWriter(template_dir=template_dir)
        self._markdown_writer = MarkdownWriter()

    def generate(
        self,
        result: GateResult,
        formats: Optional[List[str]] = None,
        base_name: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Generate reports in specified formats.

        Args:
            result: Gate result to report on
            formats: List of formats (json, html, markdown)
            base_name: Base filename (default: run ID and timestamp)

        Returns:
            Dict mapping format to output path
        """
        if formats is None:
            formats = ["json", "html", "markdown"]

        base_name = base_name or f"gate_{result.id[:8]}_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}"

        self.output_dir.mkdir(parents=True, exist_ok=True)

        paths = {}

        for fmt in formats:
            fmt = fmt.lower()

            if fmt == "json":
                path = self.output_dir / f"{base_name}.json"
                paths["json"] = self._json_writer.write(result, str(path))

            elif fmt == "html":
                path = self.output_dir / f"{base_name}.html"
                paths["html"] = self._html_writer.write(result, str(path))

            elif fmt in ("markdown", "md"):
                path = self.output_dir / f"{base_name}.md"
                paths["markdown"] = self._markdown_writer.write(result, str(path))

            else:
                raise ValueError(f"Unsupported report format: {fmt}")

        return paths

    def to_string(self, result: GateResult, format: str = "json") -> str:
        """Convert result to string in specified format."""
        format = format.lower()

        if format == "json":
            return self._json_writer.to_string(result)
        elif format == "html":
            return self._html_writer.to_string(result)
        elif format in ("markdown", "md"):
            return self._markdown_writer.to_string(result)
        else:
            raise ValueError(f"Unsupported string format: {format}")
