"""
Pattern synthesizer.

Builds the canonical example policy for each known pattern. Examples are
constructed once at import; policies are immutable, so the same instance is
handed to every caller.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from usagecontrol.policy.models import (
    DEFAULT_DOCUMENT_TYPE,
    Action,
    Constraint,
    Datatype,
    Duty,
    Operand,
    Operator,
    Pattern,
    Policy,
    Rule,
    RuleKind,
    Value,
)


class UnknownPatternError(ValueError):
    """Requested pattern has no canonical example."""

    pass


EXAMPLE_TITLE = "Example Usage Policy"
EXAMPLE_COUNT = "5"
EXAMPLE_DURATION = "PT4H"
EXAMPLE_INSTANT = "2020-07-11T00:00:00Z"
EXAMPLE_PIP_ENDPOINT = "https://localhost:8080/admin/api/resources/"
EXAMPLE_NOTIFY_ENDPOINT = "https://localhost:8000/api/ids/data"


def _instant(operator: Operator) -> Constraint:
    return Constraint(
        operand=Operand.POLICY_EVALUATION_TIME,
        operator=operator,
        value=Value(EXAMPLE_INSTANT, Datatype.TIMESTAMP),
    )


def _example(
    pattern: Pattern,
    kind: RuleKind = RuleKind.PERMISSION,
    constraints: tuple[Constraint, ...] = (),
    post_duties: tuple[Duty, ...] = (),
    document_type: str = DEFAULT_DOCUMENT_TYPE,
) -> Policy:
    rule = Rule(
        kind=kind,
        action=Action.USE,
        constraints=constraints,
        post_duties=post_duties,
        title=EXAMPLE_TITLE,
        description=pattern.slug,
    )
    return Policy(rules=(rule,), document_type=document_type)


def _build_examples() -> Mapping[Pattern, Policy]:
    interval = (_instant(Operator.AFTER), _instant(Operator.BEFORE))
    examples = {
        Pattern.PROVIDE_ACCESS: _example(Pattern.PROVIDE_ACCESS),
        Pattern.PROHIBIT_ACCESS: _example(
            Pattern.PROHIBIT_ACCESS, kind=RuleKind.PROHIBITION,
        ),
        Pattern.N_TIMES_USAGE: _example(
            Pattern.N_TIMES_USAGE,
            constraints=(
                Constraint(
                    operand=Operand.COUNT,
                    operator=Operator.LTEQ,
                    value=Value(EXAMPLE_COUNT, Datatype.INTEGER),
                    pip_endpoint=EXAMPLE_PIP_ENDPOINT,
                ),
            ),
            document_type="ids:NotMoreThanNOffer",
        ),
        Pattern.DURATION_USAGE: _example(
            Pattern.DURATION_USAGE,
            constraints=(
                Constraint(
                    operand=Operand.ELAPSED_TIME,
                    operator=Operator.SHORTER_EQ,
                    value=Value(EXAMPLE_DURATION, Datatype.DURATION),
                ),
            ),
        ),
        Pattern.USAGE_DURING_INTERVAL: _example(
            Pattern.USAGE_DURING_INTERVAL, constraints=interval,
        ),
        Pattern.USAGE_UNTIL_DELETION: _example(
            Pattern.USAGE_UNTIL_DELETION,
            constraints=interval,
            post_duties=(
                Duty(Action.DELETE, (_instant(Operator.TEMPORAL_EQUALS),)),
            ),
        ),
        Pattern.USAGE_LOGGING: _example(
            Pattern.USAGE_LOGGING, post_duties=(Duty(Action.LOG),),
        ),
        Pattern.USAGE_NOTIFICATION: _example(
            Pattern.USAGE_NOTIFICATION,
            post_duties=(
                Duty(
                    Action.NOTIFY,
                    (
                        Constraint(
                            operand=Operand.ENDPOINT,
                            operator=Operator.DEFINES_AS,
                            value=Value(EXAMPLE_NOTIFY_ENDPOINT, Datatype.URI),
                        ),
                    ),
                ),
            ),
        ),
    }
    return MappingProxyType(examples)


EXAMPLES: Mapping[Pattern, Policy] = _build_examples()


def synthesize(pattern: Pattern) -> Policy:
    """
    Get the canonical example policy for a pattern.

    Args:
        pattern: One of the concrete patterns

    Returns:
        Single-rule Policy that classifies back to ``pattern``

    Raises:
        UnknownPatternError: For NOT_RECOGNIZED or any non-pattern value
    """
    try:
        return EXAMPLES[pattern]
    except (KeyError, TypeError):
        raise UnknownPatternError(f"Unsupported pattern: {pattern}") from None
