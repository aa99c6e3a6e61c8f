"""Policy rule model."""

from dataclasses import dataclass
from enum import Enum
from fnmatch import fnmatchcase
from typing import Any, Dict

from ..errors import MalformedPolicy


GLOB_CHARS = ("*", "?", "[")


class Action(Enum):
    """What the gate does with a finding matched by a rule."""
    FAIL = "FAIL"
    WARN = "WARN"
    IGNORE = "IGNORE"

    @classmethod
    def parse(cls, value: Any, line: int = 0) -> "Action":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise MalformedPolicy(f"Unrecognized action: {value!r}", line=line) from None


@dataclass(frozen=True)
class PolicyRule:
    """Maps a rule id (or glob pattern) to an action."""
    rule_id: str
    action: Action
    comment: str = ""
    line: int = 0

    def __post_init__(self):
        if not isinstance(self.rule_id, str) or not self.rule_id.strip():
            raise MalformedPolicy("Rule id must be a non-empty string", line=self.line)
        object.__setattr__(self, "action", Action.parse(self.action, line=self.line))

    @property
    def is_pattern(self) -> bool:
        return any(c in self.rule_id for c in GLOB_CHARS)

    def matches(self, rule_id: str) -> bool:
        """Check whether a finding's rule id is covered by this rule."""
        if self.is_pattern:
            return fnmatchcase(rule_id, self.rule_id)
        return rule_id == self.rule_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.rule_id,
            "action": self.action.value,
            "comment": self.comment,
        }
