"""
Policy document parser.

Parses IDS contract documents (JSON-LD) into Policy objects and serializes
them back to the same format.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from usagecontrol.policy.models import (
    DEFAULT_DOCUMENT_TYPE,
    Action,
    Constraint,
    Datatype,
    Duty,
    Operand,
    Operator,
    Policy,
    Rule,
    RuleKind,
    Value,
)


class PolicyParseError(Exception):
    """Error parsing policy document."""

    pass


CONTEXT = {
    "ids": "https://w3id.org/idsa/core/",
    "idsc": "https://w3id.org/idsa/code/",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
}

RULE_KEYS = {
    "ids:permission": RuleKind.PERMISSION,
    "permission": RuleKind.PERMISSION,
    "ids:prohibition": RuleKind.PROHIBITION,
    "prohibition": RuleKind.PROHIBITION,
}


def _get(data: dict[str, Any], key: str, default: Any = None) -> Any:
    """Look up a property with or without its ids: prefix."""
    if key in data:
        return data[key]
    return data.get(f"ids:{key}", default)


def _as_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if not isinstance(value, list):
        raise PolicyParseError(f"'{what}' must be a list")
    return value


def _identifier(value: Any) -> str | None:
    """Read a JSON-LD node reference given as {'@id': ...} or a plain string."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get("@id")
    return str(value) if value is not None else None


def _literal(value: Any) -> str:
    if isinstance(value, list):
        value = value[0] if value else ""
    if isinstance(value, dict):
        value = value.get("@value", "")
    return str(value)


def load_policy(path: str | Path) -> Policy:
    """
    Load policy from a document file.

    Args:
        path: Path to JSON-LD (or YAML) policy document

    Returns:
        Policy object with parsed rules

    Raises:
        FileNotFoundError: If file doesn't exist
        PolicyParseError: If file contains invalid policy
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Policy file not found: {path}")

    return parse_policy_text(path.read_text())


def parse_policy_text(text: str) -> Policy:
    """
    Parse policy from document text.

    JSON is a subset of YAML, so both formats are accepted.

    Raises:
        PolicyParseError: If the text is not a valid policy document
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise PolicyParseError(f"Invalid policy document: {e}") from e

    if data is None:
        raise PolicyParseError("Policy document is empty")

    return parse_policy(data)


def parse_policy(data: dict[str, Any]) -> Policy:
    """
    Parse policy from dictionary.

    Rules are read from the permission and prohibition lists in the order
    those keys appear in the document.

    Args:
        data: Dictionary with contract data

    Returns:
        Policy object
    """
    if not isinstance(data, dict):
        raise PolicyParseError("Policy must be a dictionary")

    rules = []
    for key, value in data.items():
        kind = RULE_KEYS.get(key)
        if kind is None:
            continue
        for i, rule_data in enumerate(_as_list(value, key)):
            try:
                rules.append(parse_rule(rule_data, kind))
            except Exception as e:
                raise PolicyParseError(f"Error parsing {kind.value} {i}: {e}") from e

    document_type = data.get("@type") or DEFAULT_DOCUMENT_TYPE
    return Policy(rules=tuple(rules), document_type=str(document_type))


def parse_rule(data: dict[str, Any], kind: RuleKind) -> Rule:
    """
    Parse a single permission or prohibition.

    Args:
        data: Dictionary with rule data
        kind: Which list the rule came from

    Returns:
        Rule object
    """
    if not isinstance(data, dict):
        raise PolicyParseError("Rule must be a dictionary")

    action_id = _identifier(_get(data, "action"))
    action = Action.from_iri(action_id) if action_id else Action.USE

    constraints = tuple(
        parse_constraint(c) for c in _as_list(_get(data, "constraint"), "constraint")
    )

    post_duties = []
    for i, duty_data in enumerate(_as_list(_get(data, "postDuty"), "postDuty")):
        try:
            post_duties.append(parse_duty(duty_data))
        except PolicyParseError as e:
            raise PolicyParseError(f"duty {i}: {e}") from e

    return Rule(
        kind=kind,
        action=action,
        constraints=constraints,
        post_duties=tuple(post_duties),
        title=_literal(_get(data, "title", "")),
        description=_literal(_get(data, "description", "")),
    )


def parse_duty(data: dict[str, Any]) -> Duty:
    """Parse a post-duty attached to a rule."""
    if not isinstance(data, dict):
        raise PolicyParseError("Duty must be a dictionary")

    action_id = _identifier(_get(data, "action"))
    if action_id is None:
        raise PolicyParseError("Duty must have 'action' field")

    return Duty(
        action=Action.from_iri(action_id),
        constraints=tuple(
            parse_constraint(c) for c in _as_list(_get(data, "constraint"), "constraint")
        ),
    )


def parse_constraint(data: dict[str, Any]) -> Constraint:
    """
    Parse a constraint.

    Unknown operands and operators map to OTHER so that classification
    stays total.
    """
    if not isinstance(data, dict):
        raise PolicyParseError("Constraint must be a dictionary")

    operand_id = _identifier(_get(data, "leftOperand"))
    if operand_id is None:
        raise PolicyParseError("Constraint must have 'leftOperand' field")

    operator_id = _identifier(_get(data, "operator"))
    if operator_id is None:
        raise PolicyParseError("Constraint must have 'operator' field")

    right = _get(data, "rightOperand")
    if right is None:
        raise PolicyParseError("Constraint must have 'rightOperand' field")
    if isinstance(right, list):
        right = right[0] if right else {}
    if isinstance(right, dict):
        if "@value" not in right:
            raise PolicyParseError("Right operand must have '@value'")
        value = Value(str(right["@value"]), Datatype.from_iri(right.get("@type")))
    else:
        value = Value(str(right), Datatype.STRING)

    return Constraint(
        operand=Operand.from_iri(operand_id),
        operator=Operator.from_iri(operator_id),
        value=value,
        pip_endpoint=_identifier(_get(data, "pipEndpoint")),
    )


def _typed(text: str) -> list[dict[str, str]]:
    return [{"@value": text, "@type": str(Datatype.STRING)}]


def serialize_constraint(constraint: Constraint) -> dict[str, Any]:
    node: dict[str, Any] = {
        "@type": "ids:Constraint",
        "ids:leftOperand": {"@id": constraint.operand.iri},
        "ids:operator": {"@id": constraint.operator.iri},
        "ids:rightOperand": {
            "@value": constraint.value.value,
            "@type": str(constraint.value.datatype),
        },
    }
    if constraint.pip_endpoint is not None:
        node["ids:pipEndpoint"] = {"@id": constraint.pip_endpoint}
    return node


def serialize_rule(rule: Rule) -> dict[str, Any]:
    node: dict[str, Any] = {
        "@type": "ids:Permission" if rule.is_permission else "ids:Prohibition",
    }
    if rule.title:
        node["ids:title"] = _typed(rule.title)
    if rule.description:
        node["ids:description"] = _typed(rule.description)
    node["ids:action"] = [{"@id": rule.action.iri}]
    if rule.constraints:
        node["ids:constraint"] = [serialize_constraint(c) for c in rule.constraints]
    if rule.post_duties:
        node["ids:postDuty"] = [
            {
                "@type": "ids:Duty",
                "ids:action": [{"@id": duty.action.iri}],
                "ids:constraint": [serialize_constraint(c) for c in duty.constraints],
            }
            for duty in rule.post_duties
        ]
    return node


def serialize_policy(policy: Policy) -> dict[str, Any]:
    """
    Convert a policy to its JSON-LD document structure.

    Rules are grouped by kind; each group keeps document order. The group
    holding the first rule is written first so it parses back as the first
    rule.
    """
    document: dict[str, Any] = {
        "@context": dict(CONTEXT),
        "@type": policy.document_type,
    }
    kinds = [RuleKind.PERMISSION, RuleKind.PROHIBITION]
    first = policy.first_rule
    if first is not None and first.kind is RuleKind.PROHIBITION:
        kinds.reverse()

    for kind in kinds:
        rules = [serialize_rule(r) for r in policy.rules if r.kind is kind]
        if rules:
            document[f"ids:{kind.value}"] = rules
    return document


def dump_policy(policy: Policy, indent: int | None = 2) -> str:
    """Serialize a policy to JSON-LD text."""
    return json.dumps(serialize_policy(policy), indent=indent)


# Operand/operator pairings used by at least one known pattern
_KNOWN_PAIRINGS = {
    (Operand.COUNT, Operator.LTEQ),
    (Operand.ELAPSED_TIME, Operator.SHORTER_EQ),
    (Operand.POLICY_EVALUATION_TIME, Operator.AFTER),
    (Operand.POLICY_EVALUATION_TIME, Operator.BEFORE),
    (Operand.POLICY_EVALUATION_TIME, Operator.TEMPORAL_EQUALS),
    (Operand.ENDPOINT, Operator.DEFINES_AS),
}


def validate_policy(policy: Policy) -> list[str]:
    """
    Validate a policy and return list of warnings.

    Args:
        policy: Policy to validate

    Returns:
        List of warning messages
    """
    warnings: list[str] = []

    if not policy.rules:
        warnings.append("Warning: Policy has no rules")
        return warnings

    if len(policy.rules) > 1:
        warnings.append(
            f"Warning: Only the first of {len(policy.rules)} rules is used for classification"
        )

    for i, rule in enumerate(policy.rules):
        constraints = list(rule.constraints)
        for duty in rule.post_duties:
            constraints.extend(duty.constraints)
        for constraint in constraints:
            pairing = (constraint.operand, constraint.operator)
            if pairing not in _KNOWN_PAIRINGS:
                warnings.append(
                    f"Warning: Rule {i} pairs {constraint.operand} with "
                    f"{constraint.operator}, which no known pattern uses"
                )

    return warnings
