"""Pytest configuration and fixtures."""

import json
import pytest
import sys
from pathlib import Path

# Add python source to path
sys.path.insert(0, str(Path(__file__).parent.parent / "python"))


@pytest.fixture
def make_finding():
    """Factory for findings with sensible defaults."""
    from secgate.results import Finding

    def _make(rule_id="40012", category="DAST", severity="HIGH", description="", location="", source=""):
        return Finding(
            rule_id=rule_id,
            category=category,
            severity=severity,
            description=description,
            location=location,
            source=source,
        )

    return _make


@pytest.fixture
def sample_policy():
    """The two-rule policy used in the gate examples."""
    from secgate.policy import PolicyRule

    return [
        PolicyRule("40012", "FAIL"),
        PolicyRule("10020", "IGNORE"),
    ]


@pytest.fixture
def zap_report():
    """Traditional ZAP JSON report with two alerts."""
    return {
        "@version": "2.14.0",
        "site": [
            {
                "@name": "http://app:8080",
                "alerts": [
                    {
                        "pluginid": "40012",
                        "alertRef": "40012",
                        "alert": "Cross Site Scripting (Reflected)",
                        "name": "Cross Site Scripting (Reflected)",
                        "riskcode": "3",
                        "confidence": "2",
                        "instances": [{"uri": "http://app:8080/search?q=x", "method": "GET"}],
                    },
                    {
                        "pluginid": "10020",
                        "alertRef": "10020-1",
                        "alert": "Missing Anti-clickjacking Header",
                        "riskcode": "2",
                        "confidence": "2",
                        "instances": [],
                    },
                ],
            }
        ],
    }


@pytest.fixture
def trivy_image_report():
    """Trivy image scan with a vulnerability, a failing misconfig and a secret."""
    return {
        "SchemaVersion": 2,
        "ArtifactName": "registry.local/app:1.2.3",
        "ArtifactType": "container_image",
        "Results": [
            {
                "Target": "registry.local/app:1.2.3 (alpine 3.18.4)",
                "Class": "os-pkgs",
                "Vulnerabilities": [
                    {
                        "VulnerabilityID": "CVE-2023-5363",
                        "PkgName": "libssl3",
                        "InstalledVersion": "3.1.3-r0",
                        "Severity": "HIGH",
                        "Title": "openssl: Incorrect cipher key and IV length processing",
                    }
                ],
            },
            {
                "Target": "Dockerfile",
                "Class": "config",
                "Misconfigurations": [
                    {"ID": "DS002", "Title": "Image user should not be 'root'", "Severity": "HIGH", "Status": "FAIL"},
                    {"ID": "DS001", "Title": "':latest' tag used", "Severity": "MEDIUM", "Status": "PASS"},
                ],
            },
            {
                "Target": "/app/.env",
                "Class": "secret",
                "Secrets": [
                    {"RuleID": "aws-access-key-id", "Severity": "CRITICAL", "Title": "AWS Access Key ID", "StartLine": 3}
                ],
            },
        ],
    }


@pytest.fixture
def sonar_report():
    """SonarQube issues search response."""
    return {
        "total": 3,
        "paging": {"pageIndex": 1, "pageSize": 100, "total": 3},
        "issues": [
            {
                "key": "AY1",
                "rule": "python:S2077",
                "severity": "CRITICAL",
                "component": "my-app:src/db.py",
                "line": 42,
                "message": "Make sure using a dynamically formatted SQL query is safe here.",
                "status": "OPEN",
            },
            {
                "key": "AY2",
                "rule": "python:S1481",
                "severity": "MINOR",
                "component": "my-app:src/util.py",
                "message": "Remove the unused local variable \"x\".",
                "status": "OPEN",
            },
            {
                "key": "AY3",
                "rule": "python:S5332",
                "severity": "MAJOR",
                "component": "my-app:src/client.py",
                "message": "Using http protocol is insecure.",
                "status": "CLOSED",
            },
        ],
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document to a temp file and return its path."""
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write
