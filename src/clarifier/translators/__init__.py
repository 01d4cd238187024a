from .error_code import format_error_code
from .normalizer import COMPOSITE_MARKER, ERROR_CODE_SEPARATOR, normalize_field_code
from .update import strip_trailing_zero_sequences, translate_update_failure
from .validation import rephrase_requirement, translate_validation_failure

__all__ = [
    "format_error_code",
    "COMPOSITE_MARKER",
    "ERROR_CODE_SEPARATOR",
    "normalize_field_code",
    "strip_trailing_zero_sequences",
    "translate_update_failure",
    "rephrase_requirement",
    "translate_validation_failure",
]
