"""Already-normalized findings, e.g. from a custom pipeline step."""

from typing import Any, List

from .base import register_parser, require
from ..results.finding import Finding


@register_parser("generic")
def parse_generic_report(data: Any) -> List[Finding]:
    """Parse ``{"findings": [...]}`` or a bare list of finding objects."""
    if isinstance(data, dict):
        data = data.get("findings", [])
    entries = require(data, list, "Findings")
    return [Finding.from_dict(entry) for entry in entries]
