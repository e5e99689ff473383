"""Camera and render components and the matrices the renderer derives from them."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from gorillaengine import glmath
from gorillaengine.ecs import Entity, System, World
from gorillaengine.physics import Position, Rotation, RotationQuaternion, Scale


def _has(world: World, entity: Entity, component_type: type) -> bool:
    try:
        return world.has(entity, component_type)
    except KeyError:
        return False


def _normalized(vector: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length == 0:
        raise ValueError("cannot normalize a zero-length vector")
    return vector / length


@dataclass
class Camera:
    zfar: float = 100.0
    znear: float = 0.01
    fov: float = 45.0
    width: int = 0
    height: int = 0
    view_mat: np.ndarray = field(default_factory=lambda: np.eye(4))
    proj_mat: np.ndarray = field(default_factory=lambda: np.eye(4))


@dataclass
class PerspectiveProjection:
    """Marker: the camera uses a perspective projection."""


@dataclass
class Transparent:
    """Marker: the entity is drawn as transparent."""


@dataclass
class Color:
    color: np.ndarray = field(default_factory=lambda: np.ones(4))

    def __post_init__(self) -> None:
        self.color = np.array(self.color, dtype=float)
        if self.color.shape != (4,):
            raise ValueError("color must have four components")


@dataclass
class ModelMatrix:
    model_matrix: np.ndarray = field(default_factory=lambda: np.eye(4))

    def __post_init__(self) -> None:
        self.model_matrix = np.array(self.model_matrix, dtype=float)
        if self.model_matrix.shape != (4, 4):
            raise ValueError("model matrix must be 4x4")


@dataclass
class RenderTarget:
    clear_color: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0, 1.0]))
    main_fbo_id: int = 0
    prev_width: int = -1
    prev_height: int = -1

    def __post_init__(self) -> None:
        self.clear_color = np.array(self.clear_color, dtype=float)


def projection_matrix(world: World, entity: Entity) -> np.ndarray:
    """Projection matrix of a camera entity."""
    camera = world.get(entity, Camera)
    if camera.height == 0:
        raise ValueError("camera height must be non-zero")
    aspect = camera.width / camera.height
    if _has(world, entity, PerspectiveProjection):
        return glmath.perspective(math.radians(camera.fov), aspect, camera.znear, camera.zfar)
    return glmath.ortho(-aspect, aspect, -1.0, 1.0, camera.znear, camera.zfar)


def _position_of(world: World, entity: Entity) -> np.ndarray:
    if _has(world, entity, Position):
        return world.get(entity, Position).position
    return np.zeros(3)


def view_matrix(world: World, entity: Entity) -> np.ndarray:
    """View matrix from an entity's orientation and position."""
    if _has(world, entity, RotationQuaternion):
        orientation = glmath.quat_normalize(world.get(entity, RotationQuaternion).quat)
        return glmath.translate(glmath.quat_to_mat4(orientation), -_position_of(world, entity))
    if _has(world, entity, Rotation):
        position = _position_of(world, entity)
        pitch, yaw, roll = np.radians(world.get(entity, Rotation).rotation)
        forward = _normalized(
            np.array(
                [
                    math.cos(yaw) * math.cos(pitch),
                    math.sin(pitch),
                    math.sin(yaw) * math.cos(pitch),
                ]
            )
        )
        right = _normalized(np.cross(forward, [0.0, 1.0, 0.0]))
        roll_matrix = glmath.rotate(np.eye(4), roll, [0.0, 0.0, 1.0])
        up = _normalized((roll_matrix @ np.append(np.cross(right, forward), 0.0))[:3])
        return glmath.look_at(position, position + forward, up)
    if _has(world, entity, Position):
        return glmath.translate(np.eye(4), -world.get(entity, Position).position)
    return np.eye(4)


def model_matrix(world: World, entity: Entity) -> np.ndarray:
    """Model matrix from an entity's base matrix, position, rotation and scale."""
    matrix = np.eye(4)
    if _has(world, entity, ModelMatrix):
        matrix = world.get(entity, ModelMatrix).model_matrix.copy()
    if _has(world, entity, Position):
        matrix = glmath.translate(matrix, world.get(entity, Position).position)
    if _has(world, entity, Rotation):
        x, y, z = world.get(entity, Rotation).rotation
        matrix = glmath.rotate(matrix, x, [1.0, 0.0, 0.0])
        matrix = glmath.rotate(matrix, y, [0.0, 1.0, 0.0])
        matrix = glmath.rotate(matrix, z, [0.0, 0.0, 1.0])
    elif _has(world, entity, RotationQuaternion):
        matrix = matrix @ glmath.quat_to_mat4(world.get(entity, RotationQuaternion).quat)
    if _has(world, entity, Scale):
        matrix = glmath.scale(matrix, world.get(entity, Scale).scale)
    return matrix


class CameraUpdater(System):
    """Keeps every camera's projection and view matrices current."""

    def update(self, entities: Iterable[Entity], deltatime: float) -> None:
        if self.world is None:
            raise RuntimeError("camera updater is not attached to a world")
        world = self.world
        for entity in entities:
            if not (_has(world, entity, Camera) and _has(world, entity, RenderTarget)):
                continue
            camera = world.get(entity, Camera)
            target = world.get(entity, RenderTarget)
            target.prev_width = camera.width
            target.prev_height = camera.height
            camera.proj_mat = projection_matrix(world, entity)
            camera.view_mat = view_matrix(world, entity)