"""OWASP ZAP report parsing.

Handles both the traditional JSON report written by the packaged scans
(``zap-baseline.py -J``), which nests alerts under ``site``, and the flat
``alerts`` list returned by the ``/JSON/core/view/alerts/`` API.
"""

from typing import Any, Dict, List

from .base import register_parser, require
from ..errors import MalformedFinding
from ..results.finding import Category, Finding, Severity

RISKCODE_SEVERITY = {
    "0": Severity.INFO,
    "1": Severity.LOW,
    "2": Severity.MEDIUM,
    "3": Severity.HIGH,
}

RISK_NAME_SEVERITY = {
    "informational": Severity.INFO,
    "info": Severity.INFO,
    "low": Severity.LOW,
    "medium": Severity.MEDIUM,
    "high": Severity.HIGH,
}


def _riskcode_severity(value: Any) -> Severity:
    severity = RISKCODE_SEVERITY.get(str(value).strip())
    if severity is None:
        raise MalformedFinding(f"Unrecognized ZAP riskcode: {value!r}")
    return severity


def _risk_name_severity(value: Any) -> Severity:
    severity = RISK_NAME_SEVERITY.get(str(value).strip().lower())
    if severity is None:
        raise MalformedFinding(f"Unrecognized ZAP risk: {value!r}")
    return severity


def report_alert_to_finding(alert: Dict[str, Any], site: str = "") -> Finding:
    """Convert an alert from the traditional JSON report."""
    instances = alert.get("instances") or []
    location = site
    if instances and isinstance(instances[0], dict):
        location = instances[0].get("uri", site)

    return Finding(
        rule_id=str(alert.get("pluginid", "")),
        category=Category.DAST,
        severity=_riskcode_severity(alert.get("riskcode")),
        description=alert.get("alert") or alert.get("name", ""),
        location=location,
        source="zap",
    )


def api_alert_to_finding(alert: Dict[str, Any]) -> Finding:
    """Convert an alert from the ZAP REST API."""
    return Finding(
        rule_id=str(alert.get("pluginId", "")),
        category=Category.DAST,
        severity=_risk_name_severity(alert.get("risk")),
        description=alert.get("alert") or alert.get("name", ""),
        location=alert.get("url", ""),
        source="zap",
    )


@register_parser("zap")
def parse_zap_report(data: Any) -> List[Finding]:
    """Parse a ZAP JSON report or API alert list."""
    require(data, dict, "ZAP report")

    if "alerts" in data and "site" not in data:
        alerts = require(data["alerts"], list, "ZAP 'alerts'")
        return [api_alert_to_finding(require(a, dict, "ZAP alert")) for a in alerts]

    sites = data.get("site", [])
    # Single-site reports from older ZAP versions are not wrapped in a list
    if isinstance(sites, dict):
        sites = [sites]
    require(sites, list, "ZAP 'site'")

    findings = []
    for site in sites:
        require(site, dict, "ZAP site")
        name = site.get("@name", "")
        for alert in require(site.get("alerts", []), list, "ZAP site 'alerts'"):
            findings.append(report_alert_to_finding(require(alert, dict, "ZAP alert"), name))

    return findings
