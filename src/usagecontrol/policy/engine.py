"""
Pattern engine.

Text-level entry points used by the API and CLI: classify a policy
document, or produce the example document for a named pattern.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from usagecontrol.policy.classifier import classify
from usagecontrol.policy.models import Pattern, Policy
from usagecontrol.policy.parser import dump_policy, load_policy, parse_policy_text
from usagecontrol.policy.synthesizer import UnknownPatternError, synthesize


logger = logging.getLogger(__name__)


def resolve_pattern(name: str | Pattern) -> Pattern:
    """
    Resolve a pattern name to a concrete Pattern.

    Accepts canonical names in any case ('N_TIMES_USAGE') and slugs
    ('n-times-usage').

    Raises:
        UnknownPatternError: If the name is unknown or NOT_RECOGNIZED
    """
    if isinstance(name, Pattern):
        pattern = name
    else:
        key = str(name).strip().upper().replace("-", "_").replace(" ", "_")
        try:
            pattern = Pattern(key)
        except ValueError:
            raise UnknownPatternError(f"Unknown pattern: {name}") from None

    if pattern is Pattern.NOT_RECOGNIZED:
        raise UnknownPatternError(f"Unknown pattern: {name}")
    return pattern


def classify_document(text: str) -> Pattern:
    """
    Parse a policy document and classify it.

    Raises:
        PolicyParseError: If the text is not a policy document
    """
    return classify(parse_policy_text(text))


def load_document(source: str | Path) -> Policy:
    """
    Load a policy document from a file, or from stdin when source is '-'.

    Raises:
        FileNotFoundError: If the file does not exist
        PolicyParseError: If the content is not a policy document
    """
    if str(source) == "-":
        return parse_policy_text(sys.stdin.read())
    return load_policy(source)


def classify_file(source: str | Path) -> Pattern:
    """Load a policy document (file path or '-') and classify it."""
    return classify(load_document(source))


def example_policy(name: str | Pattern) -> Policy:
    """Get the example Policy for a pattern name."""
    return synthesize(resolve_pattern(name))


def example_document(name: str | Pattern, indent: int | None = 2) -> str:
    """
    Get the example document for a pattern name.

    The output uses the same format classify_document accepts.

    Raises:
        UnknownPatternError: If the name is not a concrete pattern
    """
    pattern = resolve_pattern(name)
    logger.debug("Synthesizing example for %s", pattern.value)
    return dump_policy(synthesize(pattern), indent=indent)
