"""Tests for scanner report parsers."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

from secgate.errors import MalformedFinding, ReportParseError
from secgate.parsers import (
    QUALITY_GATE_RULE,
    available_formats,
    load_report,
    parse_generic_report,
    parse_sonarqube_report,
    parse_trivy_report,
    parse_zap_report,
    quality_gate_finding,
)
from secgate.results import Category, Severity


class TestZapParser:
    """Tests for ZAP reports."""

    def test_traditional_report(self, zap_report):
        findings = parse_zap_report(zap_report)

        assert [f.rule_id for f in findings] == ["40012", "10020"]
        assert findings[0].severity is Severity.HIGH
        assert findings[0].category is Category.DAST
        assert findings[0].location == "http://app:8080/search?q=x"
        assert findings[0].description == "Cross Site Scripting (Reflected)"
        # No instances: falls back to the site name
        assert findings[1].location == "http://app:8080"
        assert findings[1].severity is Severity.MEDIUM

    def test_single_site_object(self, zap_report):
        zap_report["site"] = zap_report["site"][0]
        assert len(parse_zap_report(zap_report)) == 2

    def test_api_alerts(self):
        data = {"alerts": [
            {"pluginId": "10038", "alert": "CSP Header Not Set", "risk": "Medium", "url": "http://app/"},
            {"pluginId": "10096", "alert": "Timestamp Disclosure", "risk": "Informational", "url": "http://app/js"},
        ]}

        findings = parse_zap_report(data)

        assert [f.severity for f in findings] == [Severity.MEDIUM, Severity.INFO]
        assert findings[1].location == "http://app/js"

    def test_unknown_riskcode(self, zap_report):
        zap_report["site"][0]["alerts"][0]["riskcode"] = "7"
        with pytest.raises(MalformedFinding):
            parse_zap_report(zap_report)

    def test_wrong_shape(self):
        with pytest.raises(ReportParseError):
            parse_zap_report({"site": "nope"})


class TestTrivyParser:
    """Tests for Trivy reports."""

    def test_image_report(self, trivy_image_report):
        findings = parse_trivy_report(trivy_image_report)

        assert [f.rule_id for f in findings] == ["CVE-2023-5363", "DS002", "aws-access-key-id"]
        assert all(f.category is Category.IMAGE for f in findings)
        assert findings[0].location.endswith("libssl3@3.1.3-r0")
        assert findings[2].severity is Severity.CRITICAL
        assert findings[2].location == "/app/.env:3"

    def test_filesystem_is_dependency(self):
        data = {
            "ArtifactType": "filesystem",
            "Results": [{
                "Target": "requirements.txt",
                "Vulnerabilities": [
                    {"VulnerabilityID": "CVE-2023-32681", "PkgName": "requests", "InstalledVersion": "2.30.0",
                     "Severity": "MEDIUM"},
                    {"VulnerabilityID": "CVE-2020-0001", "PkgName": "x", "InstalledVersion": "1", "Severity": "UNKNOWN"},
                ],
            }],
        }

        findings = parse_trivy_report(data)

        assert findings[0].category is Category.DEPENDENCY
        assert findings[1].severity is Severity.INFO

    def test_clean_report(self):
        assert parse_trivy_report({"ArtifactType": "container_image", "Results": [{"Target": "x"}]}) == []
        assert parse_trivy_report({"SchemaVersion": 2}) == []

    def test_unknown_severity(self, trivy_image_report):
        trivy_image_report["Results"][0]["Vulnerabilities"][0]["Severity"] = "URGENT"
        with pytest.raises(MalformedFinding):
            parse_trivy_report(trivy_image_report)


class TestSonarQubeParser:
    """Tests for SonarQube issue exports."""

    def test_legacy_severities(self, sonar_report):
        findings = parse_sonarqube_report(sonar_report)

        # Closed issue is skipped
        assert [f.rule_id for f in findings] == ["python:S2077", "python:S1481"]
        assert findings[0].severity is Severity.HIGH
        assert findings[0].location == "src/db.py:42"
        assert findings[1].severity is Severity.LOW
        assert findings[1].category is Category.SAST

    def test_impacts_use_highest(self):
        data = {"issues": [{
            "key": "AY9",
            "rule": "java:S3649",
            "component": "proj:Main.java",
            "message": "SQL injection",
            "impacts": [
                {"softwareQuality": "MAINTAINABILITY", "severity": "LOW"},
                {"softwareQuality": "SECURITY", "severity": "HIGH"},
            ],
        }]}

        assert parse_sonarqube_report(data)[0].severity is Severity.HIGH

    def test_blocker_is_critical(self):
        data = [{"rule": "r", "severity": "BLOCKER", "component": "p:f"}]
        assert parse_sonarqube_report(data)[0].severity is Severity.CRITICAL

    def test_missing_severity(self):
        with pytest.raises(MalformedFinding):
            parse_sonarqube_report({"issues": [{"rule": "r", "component": "p:f"}]})

    def test_quality_gate_finding(self):
        status = {"status": "ERROR", "conditions": [
            {"metricKey": "new_security_rating", "status": "ERROR"},
            {"metricKey": "new_coverage", "status": "OK"},
        ]}

        finding = quality_gate_finding("my-app", status)

        assert finding.rule_id == QUALITY_GATE_RULE
        assert finding.severity is Severity.HIGH
        assert "new_security_rating" in finding.description
        assert "new_coverage" not in finding.description


class TestGenericParser:
    """Tests for normalized findings."""

    def test_wrapped_and_bare(self):
        entry = {"rule_id": "custom-1", "category": "SAST", "severity": "LOW", "description": "d"}

        assert parse_generic_report({"findings": [entry]}) == parse_generic_report([entry])

    def test_bad_category(self):
        with pytest.raises(MalformedFinding):
            parse_generic_report([{"rule_id": "1", "category": "PENTEST", "severity": "LOW"}])


class TestLoadReport:
    """Tests for report file loading."""

    def test_formats_registered(self):
        assert available_formats() == ["generic", "sonarqube", "trivy", "zap"]

    def test_load_file(self, zap_report, write_json):
        path = write_json("zap.json", zap_report)
        assert len(load_report(path, "ZAP")) == 2

    def test_missing_file_is_no_findings(self, tmp_path):
        assert load_report(str(tmp_path / "absent.json"), "trivy") == []

    def test_empty_file_is_no_findings(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("  \n")
        assert load_report(str(path), "zap") == []

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ReportParseError):
            load_report(str(path), "zap")

    def test_parse_error_is_malformed_finding(self):
        assert issubclass(ReportParseError, MalformedFinding)

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError):
            load_report(str(tmp_path / "x.json"), "nessus")
