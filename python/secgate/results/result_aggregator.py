"""Finding aggregation and deduplication across scanners."""

from typing import Any, Dict, Iterable, List, Set, Tuple

from .finding import Finding, Severity


class FindingAggregator:
    """
    Collects findings from several reports with deduplication.

    Features:
    - Deduplication on category + rule id + location + description
    - First-seen order is kept, so gate output is stable
    - Per-source accounting
    """

    def __init__(self):
        self._findings: List[Finding] = []
        self._seen_keys: Set[Tuple[str, str, str, str]] = set()
        self._by_source: Dict[str, int] = {}
        self._duplicates = 0

    def add_finding(self, finding: Finding, source: str = "") -> bool:
        """
        Add a finding with deduplication.

        Args:
            finding: Finding to add
            source: Name of the report or client it came from

        Returns:
            True if finding was added (not duplicate)
        """
        dedup_key = self._dedup_key(finding)

        if dedup_key in self._seen_keys:
            self._duplicates += 1
            return False

        self._seen_keys.add(dedup_key)
        self._findings.append(finding)

        key = source or finding.source or "unknown"
        self._by_source[key] = self._by_source.get(key, 0) + 1
        return True

    def add_findings(self, findings: Iterable[Finding], source: str = "") -> int:
        """Add multiple findings, returning count of new findings."""
        return sum(1 for f in findings if self.add_finding(f, source))

    def _dedup_key(self, finding: Finding) -> Tuple[str, str, str, str]:
        return (finding.category.value, finding.rule_id, finding.location, finding.description)

    def get_all_findings(self) -> List[Finding]:
        """Get all unique findings in first-seen order."""
        return list(self._findings)

    def get_findings_by_severity(self, severity: Severity) -> List[Finding]:
        return [f for f in self._findings if f.severity == severity]

    def get_ranked_findings(self) -> List[Finding]:
        """Get findings sorted most severe first."""
        return sorted(self._findings, key=lambda f: -f.severity.rank)

    def get_summary(self) -> Dict[str, Any]:
        by_severity: Dict[str, int] = {}
        by_category: Dict[str, int] = {}

        for f in self._findings:
            by_severity[f.severity.name] = by_severity.get(f.severity.name, 0) + 1
            by_category[f.category.name] = by_category.get(f.category.name, 0) + 1

        return {
            "total_findings": len(self._findings),
            "by_severity": by_severity,
            "by_category": by_category,
            "by_source": dict(self._by_source),
            "duplicates_filtered": self._duplicates,
        }

    def clear(self) -> None:
        self._findings.clear()
        self._seen_keys.clear()
        self._by_source.clear()
        self._duplicates = 0
