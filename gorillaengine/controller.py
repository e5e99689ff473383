"""Free-flying camera controlled by keyboard and mouse."""

from __future__ import annotations

import enum
import math
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol

import numpy as np

from gorillaengine import glmath
from gorillaengine.ecs import Entity, System, World
from gorillaengine.physics import Position, Rotation, RotationQuaternion
from gorillaengine.renderer import Camera
from gorillaengine.shader import ShaderProgram

PITCH_LIMIT = 89.999


class Key(enum.IntEnum):
    A = 65
    C = 67
    D = 68
    E = 69
    Q = 81
    R = 82
    S = 83
    W = 87
    X = 88
    Z = 90
    ESCAPE = 256


class KeyAction(enum.IntEnum):
    RELEASE = 0
    PRESS = 1
    REPEAT = 2


class Window(Protocol):
    """What the controller needs from a window."""

    size: tuple[int, int]
    cursor_position: tuple[float, float]

    def is_pressed(self, key: Key) -> bool: ...

    def set_cursor_locked(self, locked: bool) -> None: ...


@dataclass(frozen=True)
class KeyEvent:
    key: int
    action: int
    window: Any = None
    scancode: int = 0
    mods: int = 0


@dataclass
class ControllableCamera:
    window: Any = None
    speed_units_per_second: float = 0.0
    sensitivity: float = 0.0
    locked: bool = True
    prev_cursor_pos: np.ndarray = field(default_factory=lambda: np.zeros(2))
    first_time_moving_mouse: bool = True


def _has(world: World, entity: Entity, component_type: type) -> bool:
    try:
        return world.has(entity, component_type)
    except KeyError:
        return False


def _direction(inverse_view: np.ndarray, axis: list[float]) -> np.ndarray:
    vector = (inverse_view @ np.array(axis + [0.0]))[:3]
    return vector / np.linalg.norm(vector)


class CameraController(System):
    """Moves controllable cameras and handles queued key presses."""

    def __init__(self, world: World | None = None) -> None:
        super().__init__(world)
        self._key_queue: deque[KeyEvent] = deque()

    def push_key_event(self, event: KeyEvent) -> None:
        """Queue a key event to be handled on the next update."""
        self._key_queue.append(event)

    def update(self, entities: Iterable[Entity], deltatime: float) -> None:
        if self.world is None:
            raise RuntimeError("camera controller is not attached to a world")
        world = self.world
        entities = tuple(entities)
        for entity in entities:
            if not (_has(world, entity, Camera) and _has(world, entity, ControllableCamera)):
                continue
            self._move_camera(world, entity, deltatime)
        self._handle_keys(world, entities)

    def _move_camera(self, world: World, entity: Entity, deltatime: float) -> None:
        controllable = world.get(entity, ControllableCamera)
        camera = world.get(entity, Camera)
        window = controllable.window
        camera.width, camera.height = window.size
        if not _has(world, entity, Position):
            return

        inverse_view = np.linalg.inv(camera.view_mat)
        position = world.get(entity, Position).position
        step = controllable.speed_units_per_second * deltatime
        forward = _direction(inverse_view, [0.0, 0.0, -1.0])
        right = _direction(inverse_view, [1.0, 0.0, 0.0])
        up = _direction(inverse_view, [0.0, 1.0, 0.0])
        moves = {
            Key.W: forward,
            Key.S: -forward,
            Key.A: -right,
            Key.D: right,
            Key.E: up,
            Key.Q: -up,
        }
        for key, direction in moves.items():
            if window.is_pressed(key):
                position += step * direction

        if not controllable.locked:
            controllable.first_time_moving_mouse = True
            window.set_cursor_locked(False)
            return
        window.set_cursor_locked(True)

        cursor = np.array(window.cursor_position, dtype=float)
        if controllable.first_time_moving_mouse:
            controllable.first_time_moving_mouse = False
            controllable.prev_cursor_pos = cursor
        offset = (cursor - controllable.prev_cursor_pos) * controllable.sensitivity
        controllable.prev_cursor_pos = cursor
        roll_step = controllable.sensitivity * 1000 * deltatime

        if _has(world, entity, Rotation):
            orientation = world.get(entity, Rotation).rotation
            if window.is_pressed(Key.Z):
                orientation[2] -= roll_step
            if window.is_pressed(Key.C):
                orientation[2] += roll_step
            if window.is_pressed(Key.X):
                orientation[2] = 0.0
            orientation[0] -= offset[1]
            orientation[1] += offset[0]
            if orientation[0] >= 90:
                orientation[0] = PITCH_LIMIT
            elif orientation[0] <= -90:
                orientation[0] = -PITCH_LIMIT
        elif _has(world, entity, RotationQuaternion):
            component = world.get(entity, RotationQuaternion)
            quat = component.quat
            if window.is_pressed(Key.Z):
                quat = glmath.quat_multiply(quat, glmath.angle_axis(math.radians(roll_step), [0.0, 0.0, 1.0]))
            if window.is_pressed(Key.C):
                quat = glmath.quat_multiply(quat, glmath.angle_axis(math.radians(roll_step), [0.0, 0.0, -1.0]))
            if window.is_pressed(Key.X):
                quat = np.array([1.0, 0.0, 0.0, 0.0])
            pitch = glmath.angle_axis(math.radians(offset[1]), [1.0, 0.0, 0.0])
            yaw = glmath.angle_axis(math.radians(offset[0]), [0.0, 1.0, 0.0])
            component.quat = glmath.quat_normalize(
                glmath.quat_multiply(glmath.quat_multiply(pitch, quat), yaw)
            )

    def _handle_keys(self, world: World, entities: tuple[Entity, ...]) -> None:
        while self._key_queue:
            event = self._key_queue.popleft()
            if event.action != KeyAction.PRESS:
                continue
            for entity in entities:
                if event.key == Key.R and _has(world, entity, ShaderProgram):
                    program = world.get(entity, ShaderProgram)
                    try:
                        program.collect_shaders(program.path)
                    except OSError as error:
                        print(f'failed to collect shaders from directory "{program.path}":\n{error}')
                if event.key == Key.ESCAPE and _has(world, entity, ControllableCamera):
                    controllable = world.get(entity, ControllableCamera)
                    controllable.locked = not controllable.locked