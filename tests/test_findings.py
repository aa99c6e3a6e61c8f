"""Tests for finding models and aggregation."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

from secgate.errors import MalformedFinding
from secgate.results import Category, Finding, FindingAggregator, Severity


class TestFinding:
    """Tests for the finding model."""

    def test_string_values_normalized(self):
        finding = Finding("40012", "dast", "High")

        assert finding.category is Category.DAST
        assert finding.severity is Severity.HIGH

    def test_immutable(self, make_finding):
        finding = make_finding()
        with pytest.raises(AttributeError):
            finding.rule_id = "other"

    def test_severity_rank_order(self):
        ranks = [s.rank for s in (Severity.INFO, Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL)]
        assert ranks == sorted(ranks)

    def test_from_dict(self):
        finding = Finding.from_dict({
            "rule_id": "CVE-2021-44228",
            "category": "DEPENDENCY",
            "severity": "CRITICAL",
            "description": "Log4Shell",
        })

        assert finding.category is Category.DEPENDENCY
        assert finding.location == ""
        assert finding.to_dict()["severity"] == "CRITICAL"

    def test_from_dict_missing_field(self):
        with pytest.raises(MalformedFinding):
            Finding.from_dict({"rule_id": "1", "category": "SAST"})

    def test_from_dict_not_a_mapping(self):
        with pytest.raises(MalformedFinding):
            Finding.from_dict(["1", "SAST", "LOW"])

    def test_empty_rule_id(self):
        with pytest.raises(MalformedFinding):
            Finding("", "SAST", "LOW")


class TestFindingAggregator:
    """Tests for cross-source aggregation."""

    def test_deduplicates_and_keeps_order(self, make_finding):
        aggregator = FindingAggregator()
        a = make_finding("1", location="x")
        b = make_finding("2", location="x")

        assert aggregator.add_findings([a, b], source="zap") == 2
        assert aggregator.add_findings([make_finding("1", location="x")], source="zap-api") == 0

        assert aggregator.get_all_findings() == [a, b]
        summary = aggregator.get_summary()
        assert summary["duplicates_filtered"] == 1
        assert summary["by_source"] == {"zap": 2}

    def test_same_rule_different_location_kept(self, make_finding):
        aggregator = FindingAggregator()
        aggregator.add_findings([make_finding("1", location="/a"), make_finding("1", location="/b")])

        assert len(aggregator.get_all_findings()) == 2

    def test_separator_in_fields_not_merged(self, make_finding):
        """Field contents that line up when joined stay distinct findings."""
        aggregator = FindingAggregator()
        added = aggregator.add_findings([
            make_finding("a|b", location="c"),
            make_finding("a", location="b|c"),
        ])

        assert added == 2
        assert len(aggregator.get_all_findings()) == 2

    def test_category_is_part_of_identity(self, make_finding):
        aggregator = FindingAggregator()
        aggregator.add_finding(make_finding("CVE-1", "IMAGE"))
        aggregator.add_finding(make_finding("CVE-1", "DEPENDENCY"))

        assert aggregator.get_summary()["by_category"] == {"IMAGE": 1, "DEPENDENCY": 1}

    def test_ranked_findings(self, make_finding):
        aggregator = FindingAggregator()
        aggregator.add_findings([
            make_finding("low", severity="LOW"),
            make_finding("crit", severity="CRITICAL"),
            make_finding("med", severity="MEDIUM"),
        ])

        assert [f.rule_id for f in aggregator.get_ranked_findings()] == ["crit", "med", "low"]

    def test_clear(self, make_finding):
        aggregator = FindingAggregator()
        aggregator.add_finding(make_finding())
        aggregator.clear()

        assert aggregator.get_all_findings() == []
        assert aggregator.add_finding(make_finding())
