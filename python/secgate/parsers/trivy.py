"""Trivy JSON report parsing (schema version 2)."""

from typing import Any, Dict, List

from .base import register_parser, require
from ..errors import MalformedFinding
from ..results.finding import Category, Finding, Severity

TRIVY_SEVERITY = {
    "UNKNOWN": Severity.INFO,
    "LOW": Severity.LOW,
    "MEDIUM": Severity.MEDIUM,
    "HIGH": Severity.HIGH,
    "CRITICAL": Severity.CRITICAL,
}

IMAGE_ARTIFACT_TYPES = ("container_image",)


def _severity(value: Any) -> Severity:
    severity = TRIVY_SEVERITY.get(str(value).strip().upper())
    if severity is None:
        raise MalformedFinding(f"Unrecognized Trivy severity: {value!r}")
    return severity


def _vulnerability(vuln: Dict[str, Any], category: Category, target: str) -> Finding:
    package = vuln.get("PkgName", "")
    version = vuln.get("InstalledVersion", "")
    location = f"{target}: {package}@{version}" if package else target
    return Finding(
        rule_id=str(vuln.get("VulnerabilityID", "")),
        category=category,
        severity=_severity(vuln.get("Severity")),
        description=vuln.get("Title", ""),
        location=location,
        source="trivy",
    )


def _misconfiguration(misconf: Dict[str, Any], category: Category, target: str) -> Finding:
    return Finding(
        rule_id=str(misconf.get("ID") or misconf.get("AVDID", "")),
        category=category,
        severity=_severity(misconf.get("Severity")),
        description=misconf.get("Title", ""),
        location=target,
        source="trivy",
    )


def _secret(secret: Dict[str, Any], category: Category, target: str) -> Finding:
    line = secret.get("StartLine")
    return Finding(
        rule_id=str(secret.get("RuleID", "")),
        category=category,
        severity=_severity(secret.get("Severity")),
        description=secret.get("Title", ""),
        location=f"{target}:{line}" if line else target,
        source="trivy",
    )


@register_parser("trivy")
def parse_trivy_report(data: Any) -> List[Finding]:
    """Parse a Trivy ``--format json`` report."""
    require(data, dict, "Trivy report")

    artifact_type = str(data.get("ArtifactType", "")).lower()
    category = Category.IMAGE if artifact_type in IMAGE_ARTIFACT_TYPES else Category.DEPENDENCY

    findings = []
    for result in require(data.get("Results") or [], list, "Trivy 'Results'"):
        require(result, dict, "Trivy result")
        target = result.get("Target", "")

        for vuln in result.get("Vulnerabilities") or []:
            findings.append(_vulnerability(require(vuln, dict, "Trivy vulnerability"), category, target))

        for misconf in result.get("Misconfigurations") or []:
            require(misconf, dict, "Trivy misconfiguration")
            if str(misconf.get("Status", "FAIL")).upper() != "FAIL":
                continue
            findings.append(_misconfiguration(misconf, category, target))

        for secret in result.get("Secrets") or []:
            findings.append(_secret(require(secret, dict, "Trivy secret"), category, target))

    return findings
