"""Finding data model shared by parsers, the gate and reports."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from ..errors import MalformedFinding


class Severity(Enum):
    """Finding severity, ordered from least to most severe."""
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Parse a severity name case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise MalformedFinding(f"Unrecognized severity: {value!r}") from None


_SEVERITY_RANK = {
    Severity.INFO: 0,
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


class Category(Enum):
    """Which kind of scan produced a finding."""
    SAST = "sast"
    DEPENDENCY = "dependency"
    IMAGE = "image"
    DAST = "dast"

    @classmethod
    def parse(cls, value: Any) -> "Category":
        """Parse a category name case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise MalformedFinding(f"Unrecognized category: {value!r}") from None


@dataclass(frozen=True)
class Finding:
    """A single issue reported by a scanner."""
    rule_id: str
    category: Category
    severity: Severity
    description: str = ""
    location: str = ""
    source: str = ""

    def __post_init__(self):
        if not isinstance(self.rule_id, str) or not self.rule_id:
            raise MalformedFinding(f"Finding rule_id must be a non-empty string: {self.rule_id!r}")
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "category", Category.parse(self.category))
        object.__setattr__(self, "severity", Severity.parse(self.severity))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Finding":
        """Build a finding from its dictionary form."""
        if not isinstance(data, dict):
            raise MalformedFinding(f"Finding must be an object, got {type(data).__name__}")
        for key in ("rule_id", "category", "severity"):
            if key not in data:
                raise MalformedFinding(f"Finding is missing '{key}'")
        return cls(
            rule_id=str(data["rule_id"]),
            category=data["category"],
            severity=data["severity"],
            description=str(data.get("description", "")),
            location=str(data.get("location", "")),
            source=str(data.get("source", "")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "category": self.category.name,
            "severity": self.severity.name,
            "description": self.description,
            "location": self.location,
            "source": self.source,
        }
