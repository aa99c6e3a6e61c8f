"""Result of one gate run, as consumed by reports and notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid

from .verdict import Decision, Verdict
from ..policy.rule import Action
from ..results.finding import Category, Finding, Severity


@dataclass
class GateResult:
    """Everything known about a single gate evaluation."""
    verdict: Verdict
    findings: List[Finding] = field(default_factory=list)
    decisions: List[Decision] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    start_time: datetime = field(default_factory=datetime.utcnow)
    end_time: Optional[datetime] = None
    sources: List[Dict[str, Any]] = field(default_factory=list)
    policy_source: str = ""
    policy_rule_count: int = 0
    duplicates_filtered: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def complete(self) -> None:
        """Mark the run as complete."""
        self.end_time = datetime.utcnow()

    @property
    def duration_seconds(self) -> float:
        if not self.end_time:
            return (datetime.utcnow() - self.start_time).total_seconds()
        return (self.end_time - self.start_time).total_seconds()

    @property
    def passed(self) -> bool:
        return self.verdict.passed

    @property
    def ignored(self) -> List[Finding]:
        return [d.finding for d in self.decisions if d.action == Action.IGNORE]

    def count_by_severity(self) -> Dict[str, int]:
        counts = {s.name: 0 for s in sorted(Severity, key=lambda s: -s.rank)}
        for f in self.findings:
            counts[f.severity.name] += 1
        return counts

    def count_by_category(self) -> Dict[str, int]:
        counts = {c.name: 0 for c in Category}
        for f in self.findings:
            counts[f.category.name] += 1
        return counts

    def get_summary(self) -> Dict[str, Any]:
        """Get run summary."""
        return {
            "status": self.verdict.status,
            "passed": self.passed,
            "duration": f"{self.duration_seconds:.2f}s",
            "total_findings": len(self.findings),
            "failures": len(self.verdict.failures),
            "warnings": len(self.verdict.warnings),
            "ignored": len(self.ignored),
            "by_severity": self.count_by_severity(),
            "by_category": self.count_by_category(),
            "policy_rules": self.policy_rule_count,
            "sources": len(self.sources),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": self.duration_seconds,
            "policy_source": self.policy_source,
            "policy_rule_count": self.policy_rule_count,
            "sources": self.sources,
            "verdict": self.verdict.to_dict(),
            "decisions": [d.to_dict() for d in self.decisions],
            "duplicates_filtered": self.duplicates_filtered,
            "metadata": self.metadata,
        }
