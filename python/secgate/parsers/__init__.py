"""Scanner report parsers."""

from .base import available_formats, get_parser, load_report, register_parser
from .zap import parse_zap_report, api_alert_to_finding
from .trivy import parse_trivy_report
from .sonarqube import parse_sonarqube_report, quality_gate_finding, QUALITY_GATE_RULE
from .generic import parse_generic_report

__all__ = [
    "available_formats",
    "get_parser",
    "load_report",
    "register_parser",
    "parse_zap_report",
    "api_alert_to_finding",
    "parse_trivy_report",
    "parse_sonarqube_report",
    "quality_gate_finding",
    "QUALITY_GATE_RULE",
    "parse_generic_report",
]
