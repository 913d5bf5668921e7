"""
Pattern classifier.

Recognizes which usage-control pattern a policy follows. Only the first
rule of a document is inspected.
"""

from __future__ import annotations

import logging
from typing import Callable

from usagecontrol.policy.models import (
    Action,
    Constraint,
    Operand,
    Operator,
    Pattern,
    Policy,
    Rule,
)


logger = logging.getLogger(__name__)


def _is(constraint: Constraint, operand: Operand, operator: Operator) -> bool:
    return constraint.operand is operand and constraint.operator is operator


def _single_constraint(rule: Rule, operand: Operand, operator: Operator) -> bool:
    return (
        rule.is_permission
        and len(rule.constraints) == 1
        and _is(rule.constraints[0], operand, operator)
    )


def _has_interval(rule: Rule) -> bool:
    """Two policy-evaluation-time constraints, one AFTER and one BEFORE."""
    if not rule.is_permission or len(rule.constraints) != 2:
        return False
    if any(c.operand is not Operand.POLICY_EVALUATION_TIME for c in rule.constraints):
        return False
    return {c.operator for c in rule.constraints} == {Operator.AFTER, Operator.BEFORE}


def _single_duty(rule: Rule, action: Action) -> bool:
    return (
        rule.is_permission
        and not rule.constraints
        and len(rule.post_duties) == 1
        and rule.post_duties[0].action is action
    )


def is_prohibit_access(rule: Rule) -> bool:
    return rule.is_prohibition and not rule.constraints and not rule.post_duties


def is_n_times_usage(rule: Rule) -> bool:
    return _single_constraint(rule, Operand.COUNT, Operator.LTEQ)


def is_duration_usage(rule: Rule) -> bool:
    return _single_constraint(rule, Operand.ELAPSED_TIME, Operator.SHORTER_EQ)


def is_usage_until_deletion(rule: Rule) -> bool:
    # The delete duty must be the only post-duty.
    if not _has_interval(rule) or len(rule.post_duties) != 1:
        return False
    duty = rule.post_duties[0]
    return (
        duty.action is Action.DELETE
        and len(duty.constraints) == 1
        and _is(duty.constraints[0], Operand.POLICY_EVALUATION_TIME, Operator.TEMPORAL_EQUALS)
    )


def is_usage_during_interval(rule: Rule) -> bool:
    return _has_interval(rule) and not rule.post_duties


def is_usage_logging(rule: Rule) -> bool:
    return _single_duty(rule, Action.LOG) and not rule.post_duties[0].constraints


def is_usage_notification(rule: Rule) -> bool:
    if not _single_duty(rule, Action.NOTIFY):
        return False
    constraints = rule.post_duties[0].constraints
    return len(constraints) == 1 and _is(constraints[0], Operand.ENDPOINT, Operator.DEFINES_AS)


def is_provide_access(rule: Rule) -> bool:
    return rule.is_permission and not rule.constraints and not rule.post_duties


# Evaluated in order; first match wins. Deletion must precede the plain
# interval check since both share the two-constraint shape.
SIGNATURES: tuple[tuple[Pattern, Callable[[Rule], bool]], ...] = (
    (Pattern.PROHIBIT_ACCESS, is_prohibit_access),
    (Pattern.N_TIMES_USAGE, is_n_times_usage),
    (Pattern.DURATION_USAGE, is_duration_usage),
    (Pattern.USAGE_UNTIL_DELETION, is_usage_until_deletion),
    (Pattern.USAGE_DURING_INTERVAL, is_usage_during_interval),
    (Pattern.USAGE_LOGGING, is_usage_logging),
    (Pattern.USAGE_NOTIFICATION, is_usage_notification),
    (Pattern.PROVIDE_ACCESS, is_provide_access),
)


def classify_rule(rule: Rule) -> Pattern:
    """
    Match a single rule against the known pattern signatures.

    Args:
        rule: Rule to classify

    Returns:
        The first matching Pattern, or NOT_RECOGNIZED
    """
    for pattern, matches in SIGNATURES:
        if matches(rule):
            return pattern
    return Pattern.NOT_RECOGNIZED


def classify(policy: Policy) -> Pattern:
    """
    Classify a policy into exactly one known pattern.

    Never raises for a constructed Policy; documents without rules, or
    whose first rule has no known shape, yield NOT_RECOGNIZED.

    Args:
        policy: Parsed policy document

    Returns:
        Pattern of the policy's first rule
    """
    rule = policy.first_rule
    if rule is None:
        logger.debug("Policy has no rules")
        return Pattern.NOT_RECOGNIZED

    pattern = classify_rule(rule)
    logger.debug(
        "Classified %s rule (%d constraints, %d duties) as %s",
        rule.kind.value, len(rule.constraints), len(rule.post_duties), pattern.value,
    )
    return pattern
