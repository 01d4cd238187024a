"""
Entity snapshots.

A snapshot is a read-only view of one tracked entity at commit time: its change
state, the current value of each property and which properties were modified.
The translators only ever talk to this capability, never to ORM instances, so they
stay pure and can be fed hand-built snapshots in tests.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Protocol


class EntityState(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"
    DELETED = "deleted"


class EntitySnapshot(Protocol):
    """Read-only capability the translators consume."""

    @property
    def state(self) -> EntityState: ...

    def property_names(self) -> Iterable[str]: ...

    def current_value(self, name: str) -> Any: ...

    def is_modified(self, name: str) -> bool: ...


@dataclass(frozen=True)
class FieldMapSnapshot:
    """
    Snapshot backed by an ordered field map.

    - values: property name -> current value, in mapper (declaration) order
    - state: change state of the entity
    - modified: names of properties whose value changed since load
    - entity_name: optional label for logs (e.g. the mapped class name)
    """

    values: Mapping[str, Any]
    state: EntityState
    modified: frozenset[str] = field(default_factory=frozenset)
    entity_name: str | None = None

    def property_names(self) -> Iterable[str]:
        return tuple(self.values.keys())

    def current_value(self, name: str) -> Any:
        return self.values.get(name)

    def is_modified(self, name: str) -> bool:
        return name in self.modified


def build_changed_field_snapshot(entries: Iterable[EntitySnapshot]) -> dict[str, str]:
    """
    Build the changed-field snapshot: property name -> stringified current value.

    Only entries in state ADDED or MODIFIED contribute:
      - ADDED: every property that carries a non-None value
      - MODIFIED: only properties flagged as modified that carry a non-None value

    Insertion order is preserved; the update translator relies on it for first-match-wins.
    A property name seen again in a later entry takes the later value but keeps its
    original position.
    """
    changed: dict[str, str] = {}
    for entry in entries:
        if entry.state not in (EntityState.ADDED, EntityState.MODIFIED):
            continue
        for name in entry.property_names():
            value = entry.current_value(name)
            if value is None:
                continue
            if entry.state is EntityState.MODIFIED and not entry.is_modified(name):
                continue
            changed[name] = str(value)
    return changed


__all__ = [
    "EntityState",
    "EntitySnapshot",
    "FieldMapSnapshot",
    "build_changed_field_snapshot",
]
