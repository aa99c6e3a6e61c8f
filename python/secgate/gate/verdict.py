"""Verdict and per-finding decision models."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..policy.rule import Action, PolicyRule
from ..results.finding import Finding


@dataclass(frozen=True)
class Decision:
    """The action applied to one finding and the rule that chose it."""
    finding: Finding
    action: Action
    rule: Optional[PolicyRule] = None

    @property
    def is_default(self) -> bool:
        """True when no rule matched and the implicit IGNORE applied."""
        return self.rule is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finding": self.finding.to_dict(),
            "action": self.action.value,
            "rule": self.rule.to_dict() if self.rule else None,
        }


@dataclass(frozen=True)
class Verdict:
    """Outcome of a gate evaluation."""
    passed: bool
    failures: Tuple[Finding, ...] = ()
    warnings: Tuple[Finding, ...] = ()

    @property
    def status(self) -> str:
        return "PASSED" if self.passed else "FAILED"

    def summary(self) -> str:
        """Human-readable summary, one line per failure and warning."""
        lines = [
            f"Security gate {self.status}: "
            f"{len(self.failures)} failure(s), {len(self.warnings)} warning(s)"
        ]
        for label, findings in (("FAIL", self.failures), ("WARN", self.warnings)):
            for f in findings:
                line = f"  [{label}] {f.rule_id} ({f.category.name}/{f.severity.name})"
                if f.description:
                    line += f" {f.description}"
                if f.location:
                    line += f" @ {f.location}"
                lines.append(line)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "status": self.status,
            "failures": [f.to_dict() for f in self.failures],
            "warnings": [f.to_dict() for f in self.warnings],
        }
