"""Policy rules and loading."""

from .rule import Action, PolicyRule
from .loader import load_policy, parse_policy_text, parse_policy_yaml

__all__ = [
    "Action",
    "PolicyRule",
    "load_policy",
    "parse_policy_text",
    "parse_policy_yaml",
]
