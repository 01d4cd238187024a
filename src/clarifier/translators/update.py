"""
Update failure translator.

When the store rejects a write because of an invalid argument, its message almost
always echoes the offending value verbatim, e.g.

    Parameter value '16.9166666667' is out of range.

Matching that quoted value back to the changed field that carries it is how the
field gets named, without parsing store-specific grammar:

    Error code 2025-11-02T22:09:44.047 ◙ CubicMeasurement ◙ V93CUB. Parameter value '16.9166666667' is out of range.
"""

import re
from typing import Iterable

from ..exceptions.failures import CauseKind, UpdateFailureChain
from ..tracking.snapshots import EntitySnapshot, build_changed_field_snapshot
from .normalizer import ERROR_CODE_SEPARATOR, normalize_field_code

_TRAILING_ZEROS = re.compile(r"\.0+")


def strip_trailing_zero_sequences(message: str) -> str:
    """
    Remove every decimal point immediately followed by one or more zeros.

    Note this is not limited to a whole fractional part: '16.05' becomes '165'.
    """
    return _TRAILING_ZEROS.sub("", message)


def translate_update_failure(
    chain: UpdateFailureChain,
    changed_entries: Iterable[EntitySnapshot],
    timestamp: str,
) -> str | None:
    """
    Build the clarified message for an update failure.

    Args:
        chain: causes of the failure, outermost first.
        changed_entries: snapshots of tracked entities; only ADDED and MODIFIED ones count.
        timestamp: the error code captured when the failure was caught.

    Returns:
        `Error code <timestamp><sep><field code>. <raw cause message>` for the first
        argument-invalid cause whose message quotes one of the changed values, or None.
    """
    changed_fields = build_changed_field_snapshot(changed_entries)

    for cause in chain:
        basic_message = f"Error code {timestamp}. {strip_trailing_zero_sequences(cause.message)}"

        if cause.kind is not CauseKind.ARGUMENT_INVALID:
            continue

        haystack = basic_message.lower()
        for field_name, value in changed_fields.items():
            if f"'{value.lower()}'" in haystack:
                return (
                    f"Error code {timestamp}{ERROR_CODE_SEPARATOR}"
                    f"{normalize_field_code(field_name)}. {cause.message}"
                )

    return None


__all__ = ["strip_trailing_zero_sequences", "translate_update_failure"]


r"""
-------------------------------------------------
Why the trailing-zero stripping looks the way it does
-------------------------------------------------
Some stores print whole numbers with a zero fraction (`'12.0'`, `'12.000'`) while the
stringified Python value is `'12'`. Stripping `\.0+` from the store message makes
such values line up.

Known quirk: the pattern is not anchored to the
end of the fractional part, so `'16.05'` turns into `'165'` and a value like
`Decimal("12.00")` (stringified `'12.00'`) will never match. Only the comparison text
is stripped; the message shown to the user is always the raw cause message.
"""
