"""Report loading and parser registry."""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List

from ..errors import ReportParseError
from ..results.finding import Finding

logger = logging.getLogger(__name__)

ReportParser = Callable[[Any], List[Finding]]

_PARSERS: Dict[str, ReportParser] = {}


def register_parser(fmt: str) -> Callable[[ReportParser], ReportParser]:
    """Register a parser function under a report format name."""
    def decorator(func: ReportParser) -> ReportParser:
        _PARSERS[fmt] = func
        return func
    return decorator


def get_parser(fmt: str) -> ReportParser:
    try:
        return _PARSERS[fmt.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported report format: {fmt} (expected one of {', '.join(sorted(_PARSERS))})"
        ) from None


def available_formats() -> List[str]:
    return sorted(_PARSERS)


def read_json(path: Path) -> Any:
    """Read a JSON report; None when the file is missing or empty."""
    if not path.exists():
        logger.warning(f"Report not found, treating as no findings: {path}")
        return None

    text = path.read_text(encoding="utf-8")
    if not text.strip():
        logger.warning(f"Report is empty, treating as no findings: {path}")
        return None

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ReportParseError(f"Invalid JSON in {path}: {e}") from e


def load_report(filepath: str, fmt: str) -> List[Finding]:
    """
    Load findings from a scanner report.

    Args:
        filepath: Path to the report file
        fmt: Report format (zap, trivy, sonarqube, generic)

    Returns:
        Findings in report order
    """
    parser = get_parser(fmt)
    data = read_json(Path(filepath))
    if data is None:
        return []

    findings = parser(data)
    logger.info(f"Parsed {len(findings)} findings from {fmt} report {filepath}")
    return findings


def require(data: Any, kind: type, what: str) -> Any:
    """Check the type of a report node."""
    if not isinstance(data, kind):
        raise ReportParseError(f"{what} must be {kind.__name__}, got {type(data).__name__}")
    return data
