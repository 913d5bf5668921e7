"""
Usage-control policy patterns.

Recognizes which known pattern a contract document follows and builds
canonical example documents for each pattern.
"""

from usagecontrol.policy.classifier import classify, classify_rule
from usagecontrol.policy.engine import (
    classify_document,
    classify_file,
    load_document,
    example_document,
    example_policy,
    resolve_pattern,
)
from usagecontrol.policy.models import (
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
from usagecontrol.policy.parser import (
    PolicyParseError,
    dump_policy,
    load_policy,
    parse_policy,
    parse_policy_text,
    serialize_policy,
    validate_policy,
)
from usagecontrol.policy.synthesizer import UnknownPatternError, synthesize

__all__ = [
    # Models
    "Action",
    "Constraint",
    "Datatype",
    "Duty",
    "Operand",
    "Operator",
    "Pattern",
    "Policy",
    "Rule",
    "RuleKind",
    "Value",
    # Classification and synthesis
    "classify",
    "classify_rule",
    "synthesize",
    "UnknownPatternError",
    # Parser
    "PolicyParseError",
    "dump_policy",
    "load_policy",
    "parse_policy",
    "parse_policy_text",
    "serialize_policy",
    "validate_policy",
    # Engine
    "classify_document",
    "classify_file",
    "load_document",
    "example_document",
    "example_policy",
    "resolve_pattern",
]
