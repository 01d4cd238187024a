# clarifier/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py        # Caller-facing errors (PersistenceError, SaveChangesError)
# │   ├── failures.py    # Raw failure records + failure-kind classification
# │   └── mapper.py      # Save orchestrator: commit -> translate -> log -> raise

from .base import PersistenceError, SaveChangesError
from .failures import (
    CauseKind,
    EntityValidationError,
    EntityValidationGroup,
    FailureCause,
    FailureKind,
    FieldValidationError,
    UpdateFailureChain,
    classify_failure,
)

__all__ = [
    "PersistenceError",
    "SaveChangesError",
    "CauseKind",
    "EntityValidationError",
    "EntityValidationGroup",
    "FailureCause",
    "FailureKind",
    "FieldValidationError",
    "UpdateFailureChain",
    "classify_failure",
]
