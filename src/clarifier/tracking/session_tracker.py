"""
Snapshots of the entities tracked by a SQLAlchemy session.

This is the only place that touches ORM internals (`sqlalchemy.inspect`, attribute
history). Everything downstream works on `FieldMapSnapshot` objects.

Values are read straight from the instance `__dict__` through the instance state, so
building a snapshot never triggers a lazy load or an expired-attribute refresh (which
would be I/O, and is not allowed from sync code under an AsyncSession).
"""

import logging

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from .snapshots import EntityState, FieldMapSnapshot

logger = logging.getLogger(__name__)


def entity_state(session: Session, instance: object) -> EntityState:
    """
    Change state of `instance` from the session's point of view.

    `session.deleted` is checked before modification: an entity marked for deletion
    may also carry modified attributes, but it is not being written.
    """
    if instance in session.new:
        return EntityState.ADDED
    if instance in session.deleted:
        return EntityState.DELETED
    if session.is_modified(instance, include_collections=False):
        return EntityState.MODIFIED
    return EntityState.UNCHANGED


def snapshot_instance(session: Session, instance: object) -> FieldMapSnapshot:
    """
    Take a snapshot of one mapped instance: column attributes in mapper order.
    """
    state = sa_inspect(instance)
    values = {}
    modified = set()
    for column_attr in state.mapper.column_attrs:
        key = column_attr.key
        values[key] = state.dict.get(key)
        if state.attrs[key].history.has_changes():
            modified.add(key)

    return FieldMapSnapshot(
        values=values,
        state=entity_state(session, instance),
        modified=frozenset(modified),
        entity_name=state.mapper.class_.__name__,
    )


def tracked_instances(session: Session) -> list[object]:
    """
    Every instance the session tracks: persistent ones (identity-map order) followed
    by pending ones (in the order they were added).
    """
    instances = list(session.identity_map.values())
    instances.extend(session.new)
    return instances


def snapshot_session(session: Session) -> list[FieldMapSnapshot]:
    """Snapshots for every tracked instance."""
    snapshots = [snapshot_instance(session, obj) for obj in tracked_instances(session)]
    logger.debug(
        "tracker.snapshot_session",
        extra={
            "tracked": len(snapshots),
            "changed": sum(1 for s in snapshots if s.state in (EntityState.ADDED, EntityState.MODIFIED)),
        },
    )
    return snapshots


__all__ = ["entity_state", "snapshot_instance", "tracked_instances", "snapshot_session"]
