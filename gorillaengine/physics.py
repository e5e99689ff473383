"""Transform components and the system that moves entities by their velocity."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from gorillaengine.ecs import Entity, System, World


def _as_vector(value, size: int) -> np.ndarray:
    array = np.array(value, dtype=float)
    if array.shape != (size,):
        raise ValueError(f"expected a vector of {size} components, got shape {array.shape}")
    return array


def _has(world: World, entity: Entity, component_type: type) -> bool:
    try:
        return world.has(entity, component_type)
    except KeyError:
        return False


@dataclass
class Position:
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.position = _as_vector(self.position, 3)


@dataclass
class Rotation:
    """Euler angles in degrees."""

    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.rotation = _as_vector(self.rotation, 3)


@dataclass
class Scale:
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))

    def __post_init__(self) -> None:
        self.scale = _as_vector(self.scale, 3)


@dataclass
class Velocity:
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.velocity = _as_vector(self.velocity, 3)


@dataclass
class RotationQuaternion:
    """Orientation as a quaternion ordered (w, x, y, z)."""

    quat: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))

    def __post_init__(self) -> None:
        self.quat = _as_vector(self.quat, 4)


class MovementSystem(System):
    """Advances every entity with a position and a velocity."""

    def update(self, entities: Iterable[Entity], deltatime: float) -> None:
        if self.world is None:
            raise RuntimeError("movement system is not attached to a world")
        world = self.world
        for entity in entities:
            if _has(world, entity, Position) and _has(world, entity, Velocity):
                world.get(entity, Position).position += world.get(entity, Velocity).velocity * deltatime