"""Gate evaluation components."""

from .verdict import Decision, Verdict
from .result import GateResult
from .evaluator import DEFAULT_ACTION, decide, evaluate, match_rule, verdict_from_decisions
from ..errors import (
    SecGateError,
    MalformedPolicy,
    MalformedFinding,
    ReportParseError,
    SourceUnavailable,
    NotificationError,
)

__all__ = [
    "Decision",
    "Verdict",
    "GateResult",
    "DEFAULT_ACTION",
    "decide",
    "evaluate",
    "match_rule",
    "verdict_from_decisions",
    "SecGateError",
    "MalformedPolicy",
    "MalformedFinding",
    "ReportParseError",
    "SourceUnavailable",
    "NotificationError",
]
