"""
Raw failure records and failure-kind classification.

A commit can fail in two ways the clarifier understands:

  - validation: one or more fields were rejected before anything was written
    (carried by `EntityValidationError`, one `EntityValidationGroup` per entity)
  - update: the store rejected the write (carried by SQLAlchemy's `StatementError`
    family, whose wrapped driver error chain becomes an `UpdateFailureChain`)

Everything else is "other" and is never touched by the clarifier.
The kind is decided once, here, at the boundary where the commit was awaited.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from sqlalchemy import exc as sa_exc

from ..tracking.snapshots import EntitySnapshot

logger = logging.getLogger(__name__)


# =================================================================================================================
# Validation failure records
# =================================================================================================================

@dataclass(frozen=True)
class FieldValidationError:
    """One failing field: the mapped property name and the validator's raw message."""
    property_name: str
    message: str


@dataclass(frozen=True)
class EntityValidationGroup:
    """All failing fields of one entity, in discovery order, plus a snapshot of that entity."""
    entry: EntitySnapshot
    errors: tuple[FieldValidationError, ...]


class EntityValidationError(Exception):
    """
    Raised when one or more entities fail validation before the commit is attempted.

    The exception text is the raw validator output (one line per failing field). It is
    what a caller would see without clarification, and it names internal property
    identifiers.
    """

    def __init__(self, groups: Iterable[EntityValidationGroup]):
        self.groups = list(groups)
        raw = "\n".join(error.message for group in self.groups for error in group.errors)
        super().__init__(raw or "Entity validation failed.")


# =================================================================================================================
# Update failure records
# =================================================================================================================

class CauseKind(str, Enum):
    GENERIC = "generic"
    ARGUMENT_INVALID = "argument_invalid"


@dataclass(frozen=True)
class FailureCause:
    kind: CauseKind
    message: str


def _is_argument_invalid(cause: BaseException, wrapper: BaseException) -> bool:
    # ValueError/TypeError: a bind parameter was rejected while being processed.
    if isinstance(cause, (ValueError, TypeError)):
        return True
    # sqlalchemy.exc.DataError wraps the PEP 249 "invalid data" driver error.
    return isinstance(wrapper, sa_exc.DataError) and cause is getattr(wrapper, "orig", None)


@dataclass(frozen=True)
class UpdateFailureChain:
    """Causes of an update failure, outermost first."""
    causes: tuple[FailureCause, ...] = ()

    def __iter__(self):
        return iter(self.causes)

    def __len__(self) -> int:
        return len(self.causes)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "UpdateFailureChain":
        """
        Build the chain under `exc`.

        The wrapper itself is not part of the chain. The walk starts at the wrapped
        driver error (`exc.orig`, or `exc.__cause__` when there is none) and follows
        `__cause__`, or `__context__` unless context was suppressed.
        """
        causes: list[FailureCause] = []
        seen: set[int] = set()

        current = getattr(exc, "orig", None) or exc.__cause__
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            kind = CauseKind.ARGUMENT_INVALID if _is_argument_invalid(current, exc) else CauseKind.GENERIC
            causes.append(FailureCause(kind=kind, message=str(current)))

            if current.__cause__ is not None:
                current = current.__cause__
            elif not current.__suppress_context__:
                current = current.__context__
            else:
                current = None

        return cls(causes=tuple(causes))


# =================================================================================================================
# Failure kind
# =================================================================================================================

class FailureKind(str, Enum):
    VALIDATION = "validation"
    UPDATE = "update"
    OTHER = "other"


def classify_failure(exc: BaseException) -> FailureKind:
    """
    Decide which failure kind `exc` is.

    `StatementError` is the common base of SQLAlchemy's execution errors: `DBAPIError`
    and its PEP 249 subclasses (`IntegrityError`, `DataError`, ...), plus errors
    raised while preparing parameters for a statement.
    """
    if isinstance(exc, EntityValidationError):
        return FailureKind.VALIDATION
    if isinstance(exc, sa_exc.StatementError):
        return FailureKind.UPDATE
    return FailureKind.OTHER


__all__ = [
    "FieldValidationError",
    "EntityValidationGroup",
    "EntityValidationError",
    "CauseKind",
    "FailureCause",
    "UpdateFailureChain",
    "FailureKind",
    "classify_failure",
]
