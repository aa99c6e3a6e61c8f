"""Report generation components."""

from .report_generator import ReportGenerator
from .json_writer import JSONWriter
from .html_writer import HTMLWriter
from .markdown_writer import MarkdownWriter

__all__ = [
    "ReportGenerator",
    "JSONWriter",
    "HTMLWriter",
    "MarkdownWriter",
]
