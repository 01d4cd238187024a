"""
Field-code normalization.

Mapped property names may embed a business code after an internal marker, e.g.
`ShippedReferencevvvV94SDR`. Anything shown to a human (or written to a support log)
uses the error-code separator instead, e.g. `ShippedReference ◙ V94SDR`.
"""

# Delimiter between a timestamp and a field code, and between a field name and its business code.
ERROR_CODE_SEPARATOR = " ◙ "

# Marker embedded in composite property identifiers.
COMPOSITE_MARKER = "vvv"


def normalize_field_code(identifier: str) -> str:
    """
    Replace every occurrence of the composite marker with the error-code separator.

    Pure and total: identifiers without the marker come back unchanged.
    """
    return identifier.replace(COMPOSITE_MARKER, ERROR_CODE_SEPARATOR)
