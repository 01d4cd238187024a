"""
Validation failure translator.

Turns validator output such as

    The field ShippedReferencevvvV94SDR must be a string or array type with a maximum length of '8'.

into

    Error code 2025-11-02T22:09:44.047.
    The field code 'ShippedReference ◙ V94SDR' with value '123456789' should be text with a maximum length of '8'.

Only messages carrying a "must" clause can be rephrased; anything else is left to the
caller's generic fallback.
"""

from typing import Any, Iterable

from ..exceptions.failures import EntityValidationGroup
from .normalizer import normalize_field_code

MUST = "must"
SHOULD = "should"
STRING_OR_ARRAY = " a string or array type "
TEXT = " text "


def rephrase_requirement(message: str | None) -> str | None:
    """
    Rephrase the requirement clause of a validator message as a suggestion.

    Returns the tail of `message` starting at the first "must", with "must" -> "should"
    and " a string or array type " -> " text " applied in that order, or None when
    the message is blank or has no "must" clause.
    """
    if not message or not message.strip():
        return None

    start = message.find(MUST)
    if start == -1:
        return None

    return message[start:].replace(MUST, SHOULD).replace(STRING_OR_ARRAY, TEXT)


def _render_value(value: Any) -> str:
    return "" if value is None else str(value)


def translate_validation_failure(groups: Iterable[EntityValidationGroup], timestamp: str) -> str | None:
    """
    Build the clarified message for a validation failure.

    Args:
        groups: failing entities in discovery order, each with its field errors.
        timestamp: the error code captured when the failure was caught.

    Returns:
        `Error code <timestamp>.` followed by a newline and one sentence per
        translatable field error (joined by a single space), or None when no error
        could be rephrased.
    """
    messages = []
    for group in groups:
        for error in group.errors:
            suggestion = rephrase_requirement(error.message)
            if suggestion is None:
                continue

            field_code = normalize_field_code(error.property_name)
            value = _render_value(group.entry.current_value(error.property_name))
            messages.append(f"The field code '{field_code}' with value '{value}' {suggestion}")

    if not messages:
        return None

    return f"Error code {timestamp}.\n{' '.join(messages)}"


__all__ = ["rephrase_requirement", "translate_validation_failure"]
