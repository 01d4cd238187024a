"""
clarifier: clearer error messages for failed SQLAlchemy commits.

Usage:
    from clarifier import commit_with_clarified_errors, SaveChangesError
"""

from .db.commit import commit_with_clarified_errors
from .exceptions.base import PersistenceError, SaveChangesError
from .exceptions.mapper import save_with_clarified_errors
from .translators import normalize_field_code, translate_update_failure, translate_validation_failure

__all__ = [
    "commit_with_clarified_errors",
    "save_with_clarified_errors",
    "PersistenceError",
    "SaveChangesError",
    "normalize_field_code",
    "translate_update_failure",
    "translate_validation_failure",
]
