"""
Policy data models.

Defines the in-memory tree of a usage-control contract: rules, constraints,
duties and the enumerated operands, operators and actions they carry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


def local_name(iri: str) -> str:
    """Strip a JSON-LD prefix or namespace from an identifier."""
    for separator in ("#", "/", ":"):
        if separator in iri:
            iri = iri.rsplit(separator, 1)[1]
    return iri


class _IRIEnum(Enum):
    """Enum whose members are addressed by IDS code identifiers."""

    def __str__(self) -> str:
        return self.value

    @property
    def iri(self) -> str:
        """Prefixed identifier used in serialized documents."""
        return f"idsc:{self.value}"

    @classmethod
    def from_iri(cls, iri: str | None):
        """Resolve an identifier to a member, falling back to OTHER."""
        if not iri:
            return cls.OTHER
        name = local_name(str(iri)).upper()
        for member in cls:
            if member.value == name:
                return member
        return cls.OTHER


class Operand(_IRIEnum):
    """Left-hand operand of a constraint."""

    COUNT = "COUNT"
    ELAPSED_TIME = "ELAPSED_TIME"
    POLICY_EVALUATION_TIME = "POLICY_EVALUATION_TIME"
    ENDPOINT = "ENDPOINT"
    OTHER = "OTHER"


class Operator(_IRIEnum):
    """Relation between a constraint's operand and its value."""

    LTEQ = "LTEQ"
    SHORTER_EQ = "SHORTER_EQ"
    AFTER = "AFTER"
    BEFORE = "BEFORE"
    TEMPORAL_EQUALS = "TEMPORAL_EQUALS"
    DEFINES_AS = "DEFINES_AS"
    OTHER = "OTHER"


class Action(_IRIEnum):
    """Action governed by a rule or required by a duty."""

    USE = "USE"
    DELETE = "DELETE"
    LOG = "LOG"
    NOTIFY = "NOTIFY"
    OTHER = "OTHER"


class Datatype(Enum):
    """XML schema datatype of a constraint value."""

    INTEGER = "xsd:integer"
    DOUBLE = "xsd:double"
    DURATION = "xsd:duration"
    TIMESTAMP = "xsd:dateTimeStamp"
    URI = "xsd:anyURI"
    STRING = "xsd:string"
    OTHER = "xsd:anySimpleType"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_iri(cls, iri: str | None) -> Datatype:
        """Resolve a datatype identifier such as xsd:integer or a full XSD IRI."""
        if not iri:
            return cls.STRING
        name = local_name(str(iri))
        for member in cls:
            if local_name(member.value) == name:
                return member
        return cls.OTHER


class RuleKind(Enum):
    """Whether a rule grants or denies its action."""

    PERMISSION = "permission"
    PROHIBITION = "prohibition"

    def __str__(self) -> str:
        return self.value


class Pattern(Enum):
    """Known usage-control policy patterns."""

    PROVIDE_ACCESS = "PROVIDE_ACCESS"
    PROHIBIT_ACCESS = "PROHIBIT_ACCESS"
    N_TIMES_USAGE = "N_TIMES_USAGE"
    DURATION_USAGE = "DURATION_USAGE"
    USAGE_DURING_INTERVAL = "USAGE_DURING_INTERVAL"
    USAGE_UNTIL_DELETION = "USAGE_UNTIL_DELETION"
    USAGE_LOGGING = "USAGE_LOGGING"
    USAGE_NOTIFICATION = "USAGE_NOTIFICATION"
    NOT_RECOGNIZED = "NOT_RECOGNIZED"

    def __str__(self) -> str:
        return self.value

    @property
    def slug(self) -> str:
        """Hyphenated lower-case name, e.g. 'n-times-usage'."""
        return self.value.lower().replace("_", "-")

    @classmethod
    def concrete(cls) -> list[Pattern]:
        """Patterns that have a canonical example document."""
        return [p for p in cls if p is not cls.NOT_RECOGNIZED]


@dataclass(frozen=True)
class Value:
    """Typed literal on the right-hand side of a constraint."""

    value: str
    datatype: Datatype = Datatype.STRING

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "datatype": str(self.datatype)}


@dataclass(frozen=True)
class Constraint:
    """
    A condition limiting when a rule or duty applies.

    Operand/operator compatibility is not checked here; pairings no
    pattern uses simply fail to classify.
    """

    operand: Operand
    operator: Operator
    value: Value
    pip_endpoint: str | None = None  # Policy information point

    def to_dict(self) -> dict[str, Any]:
        result = {
            "operand": str(self.operand),
            "operator": str(self.operator),
            "value": self.value.to_dict(),
        }
        if self.pip_endpoint is not None:
            result["pip_endpoint"] = self.pip_endpoint
        return result


def _as_tuple(items: Iterable[Any] | None) -> tuple:
    return tuple(items) if items is not None else ()


@dataclass(frozen=True)
class Duty:
    """An obligation attached to a rule, fulfilled after the permitted action."""

    action: Action
    constraints: tuple[Constraint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", _as_tuple(self.constraints))

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": str(self.action),
            "constraints": [c.to_dict() for c in self.constraints],
        }


@dataclass(frozen=True)
class Rule:
    """
    A single permission or prohibition.

    Title and description are descriptive only; classification ignores them.
    """

    kind: RuleKind
    action: Action = Action.USE
    constraints: tuple[Constraint, ...] = ()
    post_duties: tuple[Duty, ...] = ()
    title: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", _as_tuple(self.constraints))
        object.__setattr__(self, "post_duties", _as_tuple(self.post_duties))

    @property
    def is_permission(self) -> bool:
        return self.kind is RuleKind.PERMISSION

    @property
    def is_prohibition(self) -> bool:
        return self.kind is RuleKind.PROHIBITION

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for display."""
        result: dict[str, Any] = {
            "kind": str(self.kind),
            "action": str(self.action),
            "constraints": [c.to_dict() for c in self.constraints],
            "post_duties": [d.to_dict() for d in self.post_duties],
        }
        if self.title:
            result["title"] = self.title
        if self.description:
            result["description"] = self.description
        return result


DEFAULT_DOCUMENT_TYPE = "ids:ContractOffer"


@dataclass(frozen=True)
class Policy:
    """
    Complete usage-control document.

    Immutable once constructed; rules keep their document order.
    """

    rules: tuple[Rule, ...] = field(default_factory=tuple)
    document_type: str = DEFAULT_DOCUMENT_TYPE

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", _as_tuple(self.rules))

    @property
    def first_rule(self) -> Rule | None:
        return self.rules[0] if self.rules else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for display."""
        return {
            "document_type": self.document_type,
            "rules": [rule.to_dict() for rule in self.rules],
        }
