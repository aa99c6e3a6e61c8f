"""Gate evaluation: findings + policy -> verdict.

Every function here is pure. Rules are tried in declaration order and the
first one whose rule id matches decides the action; a finding no rule
covers is ignored.
"""

from typing import List, Optional, Sequence

from .verdict import Decision, Verdict
from ..errors import MalformedFinding, MalformedPolicy
from ..policy.rule import Action, PolicyRule
from ..results.finding import Category, Finding, Severity

DEFAULT_ACTION = Action.IGNORE


def _check_policy(policy: Sequence[PolicyRule]) -> None:
    for rule in policy:
        if not isinstance(rule, PolicyRule):
            raise MalformedPolicy(f"Expected PolicyRule, got {type(rule).__name__}")
        if not isinstance(rule.action, Action):
            raise MalformedPolicy(f"Unrecognized action: {rule.action!r}", line=rule.line)


def _check_finding(finding: Finding) -> None:
    if not isinstance(finding, Finding):
        raise MalformedFinding(f"Expected Finding, got {type(finding).__name__}")
    if not isinstance(finding.severity, Severity):
        raise MalformedFinding(f"Unrecognized severity: {finding.severity!r}")
    if not isinstance(finding.category, Category):
        raise MalformedFinding(f"Unrecognized category: {finding.category!r}")


def match_rule(finding: Finding, policy: Sequence[PolicyRule]) -> Optional[PolicyRule]:
    """Return the first rule covering the finding, or None."""
    for rule in policy:
        if rule.matches(finding.rule_id):
            return rule
    return None


def decide(findings: Sequence[Finding], policy: Sequence[PolicyRule]) -> List[Decision]:
    """Decide the action for every finding, in input order."""
    _check_policy(policy)

    decisions = []
    for finding in findings:
        _check_finding(finding)
        rule = match_rule(finding, policy)
        action = rule.action if rule else DEFAULT_ACTION
        decisions.append(Decision(finding=finding, action=action, rule=rule))

    return decisions


def verdict_from_decisions(decisions: Sequence[Decision]) -> Verdict:
    """Fold decisions into a verdict, keeping input order."""
    failures = tuple(d.finding for d in decisions if d.action == Action.FAIL)
    warnings = tuple(d.finding for d in decisions if d.action == Action.WARN)
    return Verdict(passed=not failures, failures=failures, warnings=warnings)


def evaluate(findings: Sequence[Finding], policy: Sequence[PolicyRule]) -> Verdict:
    """
    Evaluate findings against a policy.

    Args:
        findings: Normalized scanner findings (may be empty)
        policy: Rules in declaration order

    Returns:
        Verdict that fails iff some finding matched a FAIL rule

    Raises:
        MalformedPolicy: a rule has an unrecognized action
        MalformedFinding: a finding has an unrecognized severity or category
    """
    return verdict_from_decisions(decide(findings, policy))
