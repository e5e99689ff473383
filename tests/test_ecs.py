from dataclasses import dataclass, field

import pytest

from gorillaengine.ecs import (
    MAX_COMPONENTS,
    ComponentArray,
    ComponentManager,
    EntityManager,
    System,
    SystemManager,
    World,
)


@dataclass
class Health:
    value: int = 100


@dataclass
class Tag:
    name: str = ""


@dataclass
class Recorder(System):
    calls: list = field(default_factory=list)

    def update(self, entities, deltatime):
        self.calls.append((tuple(entities), deltatime))


def test_entities_created_in_order():
    manager = EntityManager()
    assert [manager.create_entity() for _ in range(3)] == [0, 1, 2]
    assert manager.living_count == 3


def test_create_entity_stores_signature():
    manager = EntityManager()
    entity = manager.create_entity(0b101)
    assert manager.signature(entity) == 0b101


def test_destroyed_entity_resets_signature_and_is_reused_last():
    manager = EntityManager(max_entities=2)
    first = manager.create_entity(0b1)
    manager.destroy_entity(first)
    assert manager.signature(first) == 0
    second = manager.create_entity()
    assert second == 1
    assert manager.create_entity() == first


def test_too_many_entities():
    manager = EntityManager(max_entities=2)
    manager.create_entity()
    manager.create_entity()
    with pytest.raises(RuntimeError):
        manager.create_entity()


def test_entity_out_of_range():
    manager = EntityManager(max_entities=2)
    with pytest.raises(IndexError):
        manager.signature(2)
    with pytest.raises(IndexError):
        manager.set_signature(-1, 0)


def test_destroy_dead_entity_raises():
    manager = EntityManager()
    with pytest.raises(ValueError):
        manager.destroy_entity(0)


def test_component_array_insert_get_remove():
    array = ComponentArray()
    array.insert(4, Health(5))
    assert array.get(4) == Health(5)
    array.remove(4)
    assert 4 not in array
    with pytest.raises(KeyError):
        array.get(4)
    with pytest.raises(KeyError):
        array.remove(4)


def test_component_array_duplicate_insert_keeps_first():
    array = ComponentArray()
    array.insert(1, Health(1))
    with pytest.warns(RuntimeWarning):
        array.insert(1, Health(2))
    assert array.get(1) == Health(1)


def test_component_array_entity_destroyed():
    array = ComponentArray()
    array.insert(1, Health())
    array.insert(2, Health())
    array.on_entity_destroyed(1)
    array.on_entity_destroyed(9)
    assert len(array) == 1
    assert 2 in array


def test_component_ids_are_sequential_and_stable():
    manager = ComponentManager()
    manager.register_component(Health)
    manager.register_component(Tag)
    manager.register_component(Health)
    assert manager.component_id(Health) == 0
    assert manager.component_id(Tag) == 1


def test_unregistered_component_raises():
    manager = ComponentManager()
    with pytest.raises(KeyError):
        manager.component_id(Health)
    with pytest.raises(KeyError):
        manager.add_component(0, Health())


def test_component_limit():
    manager = ComponentManager()
    for index in range(MAX_COMPONENTS):
        manager.register_component(type(f"C{index}", (), {}))
    with pytest.raises(RuntimeError):
        manager.register_component(Health)


def test_component_manager_entity_destroyed():
    manager = ComponentManager()
    manager.register_component(Health)
    manager.register_component(Tag)
    manager.add_component(3, Health(7))
    manager.add_component(3, Tag("a"))
    assert manager.get_component(3, Health).value == 7
    manager.entity_destroyed(3)
    with pytest.raises(KeyError):
        manager.get_component(3, Tag)


def test_system_manager_registration_and_update():
    systems = SystemManager()
    recorder = Recorder()
    assert systems.register_system(recorder) is recorder
    assert systems.register_system(Recorder()) is None
    systems.add_entity(2)
    systems.add_entity(1)
    systems.update(0.25)
    assert recorder.calls == [((1, 2), 0.25)]
    systems.remove_entity(2)
    assert systems.entities == frozenset({1})


def test_remove_system():
    systems = SystemManager()
    recorder = Recorder()
    systems.register_system(recorder)
    systems.remove_system(Recorder)
    systems.update(1.0)
    assert recorder.calls == []
    with pytest.raises(KeyError):
        systems.remove_system(Recorder)


def test_world_make_entity_with_types_and_instances():
    world = World()
    entity = world.make_entity(Health, Tag("player"))
    assert world.has(entity, Health)
    assert world.get(entity, Health) == Health()
    assert world.get(entity, Tag).name == "player"


def test_world_component_is_shared_reference():
    world = World()
    entity = world.make_entity(Health)
    world.get(entity, Health).value = 3
    assert world.get(entity, Health).value == 3


def test_world_add_and_remove_component():
    world = World()
    world.components.register_component(Tag)
    entity = world.make_entity(Health)
    assert not world.has(entity, Tag)
    world.add_component(entity, Tag("x"))
    assert world.has(entity, Tag)
    world.remove_component(entity, Tag)
    assert not world.has(entity, Tag)
    assert world.has(entity, Health)


def test_world_has_requires_registration():
    world = World()
    entity = world.make_entity()
    with pytest.raises(KeyError):
        world.has(entity, Health)


def test_world_destroy_entity():
    world = World()
    entity = world.make_entity(Health)
    world.systems.add_entity(entity)
    world.destroy_entity(entity)
    assert world.entities.signature(entity) == 0
    assert entity not in world.systems.entities
    with pytest.raises(KeyError):
        world.get(entity, Health)