"""Entity component system: entities, component storage, systems and a world tying them together."""

from __future__ import annotations

import warnings
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

MAX_ENTITIES = 5000
MAX_COMPONENTS = 32

Entity = int
Signature = int  # bitmask indexed by component id

C = TypeVar("C")


class EntityManager:
    """Hands out entity ids and stores the component signature of each."""

    def __init__(self, max_entities: int = MAX_ENTITIES) -> None:
        self._max_entities = max_entities
        self._available: deque[Entity] = deque(range(max_entities))
        self._signatures: list[Signature] = [0] * max_entities
        self._living: set[Entity] = set()

    @property
    def living_count(self) -> int:
        return len(self._living)

    def _check_range(self, entity: Entity) -> None:
        if not 0 <= entity < self._max_entities:
            raise IndexError(f"entity {entity} out of range")

    def create_entity(self, signature: Signature = 0) -> Entity:
        """Create an entity with the given signature and return its id."""
        if not self._available:
            raise RuntimeError("too many entities")
        entity = self._available.popleft()
        self._living.add(entity)
        self._signatures[entity] = signature
        return entity

    def destroy_entity(self, entity: Entity) -> None:
        """Release the entity id and clear its signature."""
        self._check_range(entity)
        if entity not in self._living:
            raise ValueError(f"entity {entity} is not alive")
        self._living.remove(entity)
        self._available.append(entity)
        self._signatures[entity] = 0

    def set_signature(self, entity: Entity, signature: Signature) -> None:
        self._check_range(entity)
        self._signatures[entity] = signature

    def signature(self, entity: Entity) -> Signature:
        self._check_range(entity)
        return self._signatures[entity]


class ComponentArray(Generic[C]):
    """Components of one type, keyed by entity."""

    def __init__(self) -> None:
        self._components: dict[Entity, C] = {}

    def __contains__(self, entity: object) -> bool:
        return entity in self._components

    def __len__(self) -> int:
        return len(self._components)

    def insert(self, entity: Entity, component: C) -> None:
        if entity in self._components:
            warnings.warn(
                "component added to the same entity more than once", RuntimeWarning, stacklevel=2
            )
            return
        self._components[entity] = component

    def remove(self, entity: Entity) -> None:
        try:
            del self._components[entity]
        except KeyError:
            raise KeyError(f"entity {entity} has no such component") from None

    def get(self, entity: Entity) -> C:
        try:
            return self._components[entity]
        except KeyError:
            raise KeyError(f"entity {entity} has no such component") from None

    def on_entity_destroyed(self, entity: Entity) -> None:
        self._components.pop(entity, None)


class ComponentManager:
    """Registers component types and owns one array per type."""

    def __init__(self) -> None:
        self._ids: dict[type, int] = {}
        self._arrays: dict[type, ComponentArray[Any]] = {}

    def register_component(self, component_type: type) -> None:
        """Register a component type; registering it again does nothing."""
        if component_type in self._ids:
            return
        if len(self._ids) >= MAX_COMPONENTS:
            raise RuntimeError("too many component types registered")
        self._ids[component_type] = len(self._ids)
        self._arrays[component_type] = ComponentArray()

    def component_id(self, component_type: type) -> int:
        try:
            return self._ids[component_type]
        except KeyError:
            raise KeyError(f"component {component_type.__name__} not registered before use") from None

    def _array(self, component_type: type) -> ComponentArray[Any]:
        try:
            return self._arrays[component_type]
        except KeyError:
            raise KeyError(f"component {component_type.__name__} not registered before use") from None

    def add_component(self, entity: Entity, component: Any) -> None:
        self._array(type(component)).insert(entity, component)

    def remove_component(self, entity: Entity, component_type: type) -> None:
        self._array(component_type).remove(entity)

    def get_component(self, entity: Entity, component_type: type[C]) -> C:
        return self._array(component_type).get(entity)

    def entity_destroyed(self, entity: Entity) -> None:
        for array in self._arrays.values():
            array.on_entity_destroyed(entity)


class System(ABC):
    """A system updated every frame with the entities given to systems."""

    def __init__(self, world: World | None = None) -> None:
        self.world = world

    @abstractmethod
    def update(self, entities: Iterable[Entity], deltatime: float) -> None:
        """Advance the system by deltatime seconds."""


class SystemManager:
    """Holds systems, one per type, and the entities they are given."""

    def __init__(self) -> None:
        self._systems: dict[type, System] = {}
        self._entities: set[Entity] = set()

    @property
    def entities(self) -> frozenset[Entity]:
        return frozenset(self._entities)

    def register_system(self, system: System) -> System | None:
        """Add a system; returns None if one of its type is already registered."""
        if type(system) in self._systems:
            return None
        self._systems[type(system)] = system
        return system

    def remove_system(self, system_type: type) -> None:
        try:
            del self._systems[system_type]
        except KeyError:
            raise KeyError(f"system {system_type.__name__} not registered before use") from None

    def update(self, deltatime: float) -> None:
        entities = tuple(sorted(self._entities))
        for system in list(self._systems.values()):
            system.update(entities, deltatime)

    def add_entity(self, entity: Entity) -> None:
        self._entities.add(entity)

    def remove_entity(self, entity: Entity) -> None:
        self._entities.discard(entity)


class World:
    """Entity, component and system managers working together."""

    def __init__(self, max_entities: int = MAX_ENTITIES) -> None:
        self.entities = EntityManager(max_entities)
        self.components = ComponentManager()
        self.systems = SystemManager()

    def has(self, entity: Entity, component_type: type) -> bool:
        bit = self.components.component_id(component_type)
        return bool(self.entities.signature(entity) >> bit & 1)

    def get(self, entity: Entity, component_type: type[C]) -> C:
        return self.components.get_component(entity, component_type)

    def add_component(self, entity: Entity, component: Any) -> None:
        self.components.add_component(entity, component)
        bit = self.components.component_id(type(component))
        self.entities.set_signature(entity, self.entities.signature(entity) | 1 << bit)

    def remove_component(self, entity: Entity, component_type: type) -> None:
        self.components.remove_component(entity, component_type)
        bit = self.components.component_id(component_type)
        self.entities.set_signature(entity, self.entities.signature(entity) & ~(1 << bit))

    def make_entity(self, *args: Any) -> Entity:
        """Create an entity holding the given components.

        Each argument is a component type, default-constructed, or a component instance.
        """
        components = [arg() if isinstance(arg, type) else arg for arg in args]
        signature = 0
        for component in components:
            self.components.register_component(type(component))
            signature |= 1 << self.components.component_id(type(component))
        entity = self.entities.create_entity(signature)
        for component in components:
            self.components.add_component(entity, component)
        return entity

    def destroy_entity(self, entity: Entity) -> None:
        self.components.entity_destroyed(entity)
        self.entities.destroy_entity(entity)
        self.systems.remove_entity(entity)