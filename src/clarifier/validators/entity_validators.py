"""
Pre-commit entity validation.

Checks pending and modified mapped instances against their column metadata before
the commit is attempted, and reports failures the way the validation translator
expects them: one `EntityValidationGroup` per entity, one `FieldValidationError` per
field, using the mapped property name (not the column name).

Only two rules are checked; everything else is left to the store:
  - string length: String(n) columns receiving a longer str value
  - required: NOT NULL columns without any default receiving None on insert
"""

import logging

from sqlalchemy import Integer, String
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from ..exceptions.failures import EntityValidationError, EntityValidationGroup, FieldValidationError
from ..tracking.session_tracker import snapshot_instance
from ..tracking.snapshots import EntitySnapshot, EntityState

logger = logging.getLogger(__name__)


def max_length_message(property_name: str, length: int) -> str:
    return f"The field {property_name} must be a string or array type with a maximum length of '{length}'."


def required_message(property_name: str) -> str:
    return f"The {property_name} field is required."


def _is_auto_pk(column) -> bool:
    """
    Whether the store generates this primary key: either flagged `autoincrement=True`,
    or left on "auto" as the single integer primary key column of its table.
    """
    if not column.primary_key:
        return False
    if column.autoincrement is True:
        return True
    return (
        column.autoincrement == "auto"
        and isinstance(column.type, Integer)
        and len(column.table.primary_key.columns) == 1
    )


def _is_required(column) -> bool:
    """
    NOT NULL columns that have no server/client default and are not store-generated PKs.
    """
    has_default = column.default is not None or column.server_default is not None
    is_auto_pk = _is_auto_pk(column)
    return not column.nullable and not has_default and not is_auto_pk


def validate_instance(instance: object, snapshot: EntitySnapshot) -> list[FieldValidationError]:
    """
    Validate one mapped instance against its columns. Values come from `snapshot`.

    Property-level order follows the mapper's column attribute order.
    """
    errors: list[FieldValidationError] = []
    mapper = sa_inspect(instance).mapper

    for column_attr in mapper.column_attrs:
        key = column_attr.key
        # composite column properties are not validated
        if len(column_attr.columns) != 1:
            continue
        column = column_attr.columns[0]
        value = snapshot.current_value(key)

        if value is None:
            if snapshot.state is EntityState.ADDED and _is_required(column):
                errors.append(FieldValidationError(key, required_message(key)))
            continue

        length = getattr(column.type, "length", None)
        if isinstance(column.type, String) and length and isinstance(value, str) and len(value) > length:
            errors.append(FieldValidationError(key, max_length_message(key, length)))

    return errors


def validate_session(session: Session) -> list[EntityValidationGroup]:
    """
    Validate every ADDED or MODIFIED instance tracked by `session`.

    Returns one group per failing entity, in session order (modified first, then new).
    """
    groups: list[EntityValidationGroup] = []
    candidates = [*session.dirty, *session.new]

    for instance in candidates:
        snapshot = snapshot_instance(session, instance)
        if snapshot.state not in (EntityState.ADDED, EntityState.MODIFIED):
            continue
        errors = validate_instance(instance, snapshot)
        if errors:
            groups.append(EntityValidationGroup(entry=snapshot, errors=tuple(errors)))

    if groups:
        logger.info(
            "validator.entities_invalid",
            extra={
                "entities": [getattr(group.entry, "entity_name", None) for group in groups],
                "invalid_fields": [error.property_name for group in groups for error in group.errors],
            },
        )
    return groups


def ensure_valid(session: Session) -> None:
    """
    Raise EntityValidationError if any tracked ADDED/MODIFIED instance fails validation.
    """
    groups = validate_session(session)
    if groups:
        raise EntityValidationError(groups)


__all__ = [
    "max_length_message",
    "required_message",
    "validate_instance",
    "validate_session",
    "ensure_valid",
]
