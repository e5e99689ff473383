import numpy as np
import pytest

from gorillaengine import glmath
from gorillaengine.ecs import World
from gorillaengine.physics import MovementSystem, Position, RotationQuaternion, Velocity


def _moving_world(position, velocity):
    world = World(max_entities=16)
    entity = world.make_entity(Position(position), Velocity(velocity))
    return world, entity


def test_movement_applies_velocity():
    world, entity = _moving_world([1.0, 2.0, 3.0], [2.0, 0.0, -4.0])
    MovementSystem(world).update([entity], 0.5)
    assert np.allclose(world.get(entity, Position).position, [2.0, 2.0, 1.0])


def test_two_half_steps_equal_one_step():
    world_a, entity_a = _moving_world([0.5, -1.0, 2.0], [3.0, 1.5, -0.5])
    world_b, entity_b = _moving_world([0.5, -1.0, 2.0], [3.0, 1.5, -0.5])
    MovementSystem(world_a).update([entity_a], 0.25)
    MovementSystem(world_a).update([entity_a], 0.25)
    MovementSystem(world_b).update([entity_b], 0.5)
    assert np.allclose(world_a.get(entity_a, Position).position, world_b.get(entity_b, Position).position)


def test_entity_without_velocity_is_unchanged():
    world = World(max_entities=16)
    entity = world.make_entity(Position([4.0, 5.0, 6.0]))
    MovementSystem(world).update([entity], 1.0)
    assert np.allclose(world.get(entity, Position).position, [4.0, 5.0, 6.0])


def test_entity_not_given_is_unchanged():
    world, entity = _moving_world([1.0, 1.0, 1.0], [9.0, 9.0, 9.0])
    MovementSystem(world).update([], 1.0)
    assert np.allclose(world.get(entity, Position).position, [1.0, 1.0, 1.0])


def test_system_without_world_raises():
    with pytest.raises(RuntimeError):
        MovementSystem().update([0], 1.0)


def test_components_do_not_share_defaults():
    first, second = Position(), Position()
    first.position += 1.0
    assert np.allclose(second.position, np.zeros(3))


def test_wrong_shape_raises():
    with pytest.raises(ValueError):
        Velocity([1.0, 2.0])


def test_default_quaternion_is_identity_rotation():
    assert np.allclose(glmath.quat_to_mat4(RotationQuaternion().quat), np.eye(4))