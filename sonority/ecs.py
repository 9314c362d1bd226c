"""Minimal component storage used to register audio components.

Components live in per-type storages keyed by entity id. Systems iterate a
storage in ascending entity order so every tick visits entities in the same
sequence.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterator
from typing import Any, ClassVar, Generic, TypeVar

from sonority.types import EntityId


C = TypeVar("C")
ComponentT = TypeVar("ComponentT", bound="Component")


class BTreeStorage(Generic[C]):
    """Component storage that keeps entities sorted by id."""

    def __init__(self) -> None:
        self._ids: list[EntityId] = []
        self._components: dict[EntityId, C] = {}

    def insert(self, entity: EntityId, component: C) -> C | None:
        """Store ``component`` for ``entity``.

        Returns:
            The component previously stored for the entity, if any
        """
        previous = self._components.get(entity)
        if previous is None:
            bisect.insort(self._ids, entity)
        self._components[entity] = component
        return previous

    def remove(self, entity: EntityId) -> C | None:
        """Remove and return the entity's component, or None if absent."""
        component = self._components.pop(entity, None)
        if component is not None:
            index = bisect.bisect_left(self._ids, entity)
            del self._ids[index]
        return component

    def get(self, entity: EntityId) -> C | None:
        return self._components.get(entity)

    def items(self) -> Iterator[tuple[EntityId, C]]:
        """Iterate (entity, component) pairs in ascending entity order."""
        for entity in list(self._ids):
            component = self._components.get(entity)
            if component is not None:
                yield entity, component

    def values(self) -> Iterator[C]:
        for _, component in self.items():
            yield component

    def __contains__(self, entity: object) -> bool:
        return entity in self._components

    def __len__(self) -> int:
        return len(self._ids)


class Component:
    """Base class for anything that can be attached to an entity."""

    storage_type: ClassVar[type[BTreeStorage[Any]]] = BTreeStorage

    def on_remove(self) -> None:
        """Called when the component is removed or its entity despawned."""


class World:
    """Holds one storage per registered component type."""

    def __init__(self) -> None:
        self._storages: dict[type[Component], BTreeStorage[Any]] = {}
        self._next_entity: EntityId = 0

    def register(self, component_type: type[Component]) -> None:
        """Create the storage for ``component_type`` if it does not exist yet."""
        if component_type not in self._storages:
            self._storages[component_type] = component_type.storage_type()

    def create_entity(self) -> EntityId:
        entity = self._next_entity
        self._next_entity += 1
        return entity

    def storage(
        self, component_type: type[ComponentT]
    ) -> BTreeStorage[ComponentT]:
        """Return the storage for a registered component type.

        Raises:
            KeyError: If the type was never registered.
        """
        try:
            return self._storages[component_type]
        except KeyError:
            raise KeyError(
                f"Component type {component_type.__name__} is not registered"
            ) from None

    def insert(self, entity: EntityId, component: Component) -> None:
        """Attach ``component`` to ``entity``, replacing one of the same type.

        A replaced component gets its ``on_remove`` hook called.
        """
        previous = self.storage(type(component)).insert(entity, component)
        if previous is not None and previous is not component:
            previous.on_remove()

    def get(
        self, entity: EntityId, component_type: type[ComponentT]
    ) -> ComponentT | None:
        return self.storage(component_type).get(entity)

    def remove(
        self, entity: EntityId, component_type: type[ComponentT]
    ) -> ComponentT | None:
        """Detach and tear down the entity's component of the given type."""
        component = self.storage(component_type).remove(entity)
        if component is not None:
            component.on_remove()
        return component

    def despawn(self, entity: EntityId) -> None:
        """Remove every component attached to ``entity``."""
        for storage in self._storages.values():
            component = storage.remove(entity)
            if component is not None:
                component.on_remove()
