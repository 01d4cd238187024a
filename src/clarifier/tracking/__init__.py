from .snapshots import EntitySnapshot, EntityState, FieldMapSnapshot, build_changed_field_snapshot
from .session_tracker import entity_state, snapshot_instance, snapshot_session, tracked_instances

__all__ = [
    "EntitySnapshot",
    "EntityState",
    "FieldMapSnapshot",
    "build_changed_field_snapshot",
    "entity_state",
    "snapshot_instance",
    "snapshot_session",
    "tracked_instances",
]
