import math

import numpy as np
import pytest

from gorillaengine import glmath
from gorillaengine.ecs import World
from gorillaengine.physics import Position, Rotation, RotationQuaternion, Scale
from gorillaengine.renderer import (
    Camera,
    CameraUpdater,
    ModelMatrix,
    PerspectiveProjection,
    RenderTarget,
    model_matrix,
    projection_matrix,
    view_matrix,
)


def _apply(matrix, point):
    vector = matrix @ np.append(np.asarray(point, dtype=float), 1.0)
    return vector[:3] / vector[3]


def _world():
    return World(max_entities=32)


def test_perspective_projection_uses_camera_fields():
    world = _world()
    entity = world.make_entity(Camera(width=800, height=600), PerspectiveProjection)
    camera = world.get(entity, Camera)
    expected = glmath.perspective(math.radians(camera.fov), 800 / 600, camera.znear, camera.zfar)
    assert np.allclose(projection_matrix(world, entity), expected)


def test_orthographic_projection_without_marker():
    world = _world()
    entity = world.make_entity(Camera(width=400, height=200))
    camera = world.get(entity, Camera)
    expected = glmath.ortho(-2.0, 2.0, -1.0, 1.0, camera.znear, camera.zfar)
    assert np.allclose(projection_matrix(world, entity), expected)


def test_projection_with_zero_height_raises():
    world = _world()
    entity = world.make_entity(Camera(width=100, height=0))
    with pytest.raises(ValueError):
        projection_matrix(world, entity)


def test_view_without_transform_is_identity():
    world = _world()
    entity = world.make_entity(Camera())
    assert np.allclose(view_matrix(world, entity), np.eye(4))


def test_view_with_position_moves_it_to_origin():
    world = _world()
    entity = world.make_entity(Position([3.0, -1.0, 2.0]))
    assert np.allclose(_apply(view_matrix(world, entity), [3.0, -1.0, 2.0]), np.zeros(3))


def test_view_with_identity_quaternion():
    world = _world()
    entity = world.make_entity(Position([1.0, 2.0, 3.0]), RotationQuaternion())
    expected = glmath.translate(np.eye(4), [-1.0, -2.0, -3.0])
    assert np.allclose(view_matrix(world, entity), expected)


def test_view_prefers_quaternion_over_euler():
    world = _world()
    quat = glmath.angle_axis(0.6, [0.0, 1.0, 0.0])
    entity = world.make_entity(RotationQuaternion(quat), Rotation([10.0, 20.0, 0.0]))
    assert np.allclose(view_matrix(world, entity), glmath.quat_to_mat4(quat))


def test_view_with_zero_euler_looks_along_x():
    world = _world()
    entity = world.make_entity(Position([1.0, 2.0, 3.0]), Rotation([0.0, 0.0, 0.0]))
    ahead = _apply(view_matrix(world, entity), [2.0, 2.0, 3.0])
    assert np.allclose(ahead, [0.0, 0.0, -1.0])


def test_model_matrix_without_components_is_identity():
    world = _world()
    entity = world.make_entity(Camera())
    assert np.allclose(model_matrix(world, entity), np.eye(4))


def test_model_matrix_uses_base_matrix():
    world = _world()
    base = glmath.rotate(np.eye(4), 0.4, [1.0, 1.0, 0.0])
    entity = world.make_entity(ModelMatrix(base))
    assert np.allclose(model_matrix(world, entity), base)


def test_model_matrix_translates_and_scales():
    world = _world()
    entity = world.make_entity(Position([5.0, 6.0, 7.0]), Scale([2.0, 3.0, 4.0]))
    matrix = model_matrix(world, entity)
    assert np.allclose(_apply(matrix, [0, 0, 0]), [5.0, 6.0, 7.0])
    assert np.allclose(_apply(matrix, [1, 1, 1]), [7.0, 9.0, 11.0])


def test_model_matrix_with_quaternion():
    world = _world()
    quat = glmath.angle_axis(1.0, [0.0, 0.0, 1.0])
    entity = world.make_entity(RotationQuaternion(quat))
    assert np.allclose(model_matrix(world, entity), glmath.quat_to_mat4(quat))


def test_camera_updater_refreshes_matrices():
    world = _world()
    entity = world.make_entity(
        Camera(width=640, height=480), PerspectiveProjection, RenderTarget, Position([0.0, 0.0, 1.0])
    )
    CameraUpdater(world).update([entity], 0.016)
    camera = world.get(entity, Camera)
    target = world.get(entity, RenderTarget)
    assert (target.prev_width, target.prev_height) == (640, 480)
    assert np.allclose(camera.view_mat, view_matrix(world, entity))
    assert np.allclose(camera.proj_mat, projection_matrix(world, entity))


def test_camera_updater_skips_camera_without_target():
    world = _world()
    entity = world.make_entity(Camera(width=640, height=480), Position([4.0, 0.0, 0.0]))
    CameraUpdater(world).update([entity], 0.016)
    assert np.allclose(world.get(entity, Camera).view_mat, np.eye(4))