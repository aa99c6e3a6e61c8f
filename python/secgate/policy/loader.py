"""Policy file loading.

Two formats are understood:

- Plain text, compatible with ZAP's rules file: one rule per line,
  ``<rule_id> <ACTION> [comment]`` separated by tabs or spaces.
  Blank lines and ``#`` comments are skipped.
- YAML (``.yaml`` / ``.yml``)::

    rules:
      - id: "40012"
        action: FAIL
        comment: Cross Site Scripting (Reflected)
"""

from pathlib import Path
from typing import Any, List
import logging

import yaml

from .rule import PolicyRule
from ..errors import MalformedPolicy

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def parse_policy_text(text: str) -> List[PolicyRule]:
    """Parse a rules table in the line-oriented text format."""
    rules = []

    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(None, 2)
        if len(parts) < 2:
            raise MalformedPolicy(f"Expected '<rule_id> <ACTION>', got {line!r}", line=lineno)

        comment = parts[2].strip() if len(parts) > 2 else ""
        # ZAP writes the rule name in parentheses
        if comment.startswith("(") and comment.endswith(")"):
            comment = comment[1:-1]

        rules.append(PolicyRule(rule_id=parts[0], action=parts[1], comment=comment, line=lineno))

    return rules


def parse_policy_yaml(text: str) -> List[PolicyRule]:
    """Parse a rules table from YAML."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise MalformedPolicy(f"Invalid YAML policy: {e}") from e

    if data is None:
        return []

    if isinstance(data, dict):
        unknown = sorted(str(k) for k in data if k != "rules")
        if unknown:
            raise MalformedPolicy(f"Unknown policy keys: {', '.join(unknown)}")
        if "rules" not in data:
            raise MalformedPolicy("Policy must define 'rules'")
        entries: Any = data["rules"]
    else:
        entries = data

    if not isinstance(entries, list):
        raise MalformedPolicy("Policy 'rules' must be a list")

    rules = []
    for index, entry in enumerate(entries, 1):
        if not isinstance(entry, dict) or "id" not in entry or "action" not in entry:
            raise MalformedPolicy(f"Rule #{index} must be a mapping with 'id' and 'action'")
        rules.append(PolicyRule(
            rule_id=str(entry["id"]),
            action=entry["action"],
            comment=str(entry.get("comment", "")),
            line=index,
        ))

    return rules


def load_policy(filepath: str) -> List[PolicyRule]:
    """
    Load policy rules from a file.

    Args:
        filepath: Path to a text or YAML rules file

    Returns:
        Rules in declaration order
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Policy file not found: {filepath}")

    text = path.read_text(encoding="utf-8")

    if path.suffix.lower() in YAML_SUFFIXES:
        rules = parse_policy_yaml(text)
    else:
        rules = parse_policy_text(text)

    logger.debug(f"Loaded {len(rules)} policy rules from {path}")
    return rules
