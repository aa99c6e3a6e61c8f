"""SonarQube issue parsing (``/api/issues/search`` responses)."""

from typing import Any, Dict, List

from .base import register_parser, require
from ..errors import MalformedFinding
from ..results.finding import Category, Finding, Severity

QUALITY_GATE_RULE = "sonar:quality-gate"

# Legacy issue severities
SONAR_SEVERITY = {
    "BLOCKER": Severity.CRITICAL,
    "CRITICAL": Severity.HIGH,
    "MAJOR": Severity.MEDIUM,
    "MINOR": Severity.LOW,
    "INFO": Severity.INFO,
}

# Clean Code impact severities (SonarQube 10.2+)
IMPACT_SEVERITY = {
    "BLOCKER": Severity.CRITICAL,
    "HIGH": Severity.HIGH,
    "MEDIUM": Severity.MEDIUM,
    "LOW": Severity.LOW,
    "INFO": Severity.INFO,
}


def _issue_severity(issue: Dict[str, Any]) -> Severity:
    if issue.get("severity"):
        severity = SONAR_SEVERITY.get(str(issue["severity"]).upper())
        if severity is None:
            raise MalformedFinding(f"Unrecognized SonarQube severity: {issue['severity']!r}")
        return severity

    impacts = issue.get("impacts") or []
    severities = []
    for impact in impacts:
        value = str(impact.get("severity", "")).upper() if isinstance(impact, dict) else ""
        if value not in IMPACT_SEVERITY:
            raise MalformedFinding(f"Unrecognized SonarQube impact severity: {value!r}")
        severities.append(IMPACT_SEVERITY[value])

    if not severities:
        raise MalformedFinding(f"SonarQube issue {issue.get('key', '?')} has no severity")
    return max(severities, key=lambda s: s.rank)


def _component_path(component: str) -> str:
    # Components are "<projectKey>:<path>"
    return component.split(":", 1)[1] if ":" in component else component


def issue_to_finding(issue: Dict[str, Any]) -> Finding:
    location = _component_path(str(issue.get("component", "")))
    if issue.get("line"):
        location = f"{location}:{issue['line']}"

    return Finding(
        rule_id=str(issue.get("rule", "")),
        category=Category.SAST,
        severity=_issue_severity(issue),
        description=issue.get("message", ""),
        location=location,
        source="sonarqube",
    )


def quality_gate_finding(project_key: str, status: Dict[str, Any]) -> Finding:
    """Represent a failed SonarQube quality gate as a finding."""
    failed = [
        c.get("metricKey", "?")
        for c in status.get("conditions", [])
        if isinstance(c, dict) and c.get("status") == "ERROR"
    ]
    description = "SonarQube quality gate failed"
    if failed:
        description += f" ({', '.join(failed)})"

    return Finding(
        rule_id=QUALITY_GATE_RULE,
        category=Category.SAST,
        severity=Severity.HIGH,
        description=description,
        location=project_key,
        source="sonarqube",
    )


@register_parser("sonarqube")
def parse_sonarqube_report(data: Any) -> List[Finding]:
    """Parse a saved issues search response."""
    if isinstance(data, list):
        issues = data
    else:
        issues = require(require(data, dict, "SonarQube report").get("issues", []), list, "SonarQube 'issues'")

    findings = []
    for issue in issues:
        require(issue, dict, "SonarQube issue")
        if issue.get("status") in ("CLOSED", "RESOLVED"):
            continue
        findings.append(issue_to_finding(issue))

    return findings
