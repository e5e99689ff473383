"""Matrix and quaternion helpers for 3D graphics.

Matrices are 4x4 numpy arrays applied to column vectors (``m @ v``).
Quaternions are arrays ordered ``(w, x, y, z)``. Angles are in radians.
"""

from __future__ import annotations

import math

import numpy as np

_QUAT_EPSILON = float(np.finfo(np.float32).eps)


def _vector(value, size: int) -> np.ndarray:
    array = np.asarray(value, dtype=float)
    if array.shape != (size,):
        raise ValueError(f"expected a vector of {size} components, got shape {array.shape}")
    return array


def _matrix(value) -> np.ndarray:
    array = np.asarray(value, dtype=float)
    if array.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {array.shape}")
    return array


def _normalized(vector: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length == 0:
        raise ValueError("cannot normalize a zero-length vector")
    return vector / length


def perspective(fovy: float, aspect: float, znear: float, zfar: float) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must be non-zero")
    if zfar == znear:
        raise ValueError("near and far planes must differ")
    focal = 1.0 / math.tan(fovy / 2)
    result = np.zeros((4, 4))
    result[0, 0] = focal / aspect
    result[1, 1] = focal
    result[2, 2] = -(zfar + znear) / (zfar - znear)
    result[2, 3] = -(2 * zfar * znear) / (zfar - znear)
    result[3, 2] = -1.0
    return result


def ortho(left: float, right: float, bottom: float, top: float, znear: float, zfar: float) -> np.ndarray:
    """Right-handed orthographic projection mapping the box to [-1, 1] on every axis."""
    if right == left or top == bottom or zfar == znear:
        raise ValueError("orthographic box must have non-zero extent")
    result = np.eye(4)
    result[0, 0] = 2 / (right - left)
    result[1, 1] = 2 / (top - bottom)
    result[2, 2] = -2 / (zfar - znear)
    result[0, 3] = -(right + left) / (right - left)
    result[1, 3] = -(top + bottom) / (top - bottom)
    result[2, 3] = -(zfar + znear) / (zfar - znear)
    return result


def translate(matrix, offset) -> np.ndarray:
    """Return ``matrix`` followed by a translation by ``offset`` in its local space."""
    translation = np.eye(4)
    translation[:3, 3] = _vector(offset, 3)
    return _matrix(matrix) @ translation


def rotate(matrix, angle: float, axis) -> np.ndarray:
    """Return ``matrix`` followed by a counter-clockwise rotation about ``axis``."""
    unit = _normalized(_vector(axis, 3))
    cosine, sine = math.cos(angle), math.sin(angle)
    cross = np.array(
        [
            [0.0, -unit[2], unit[1]],
            [unit[2], 0.0, -unit[0]],
            [-unit[1], unit[0], 0.0],
        ]
    )
    rotation = np.eye(4)
    rotation[:3, :3] = cosine * np.eye(3) + sine * cross + (1 - cosine) * np.outer(unit, unit)
    return _matrix(matrix) @ rotation


def scale(matrix, factors) -> np.ndarray:
    """Return ``matrix`` followed by a per-axis scale."""
    scaling = np.diag(np.append(_vector(factors, 3), 1.0))
    return _matrix(matrix) @ scaling


def look_at(eye, center, up) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``center``."""
    eye = _vector(eye, 3)
    forward = _normalized(_vector(center, 3) - eye)
    side = _normalized(np.cross(forward, _vector(up, 3)))
    upward = np.cross(side, forward)
    result = np.eye(4)
    result[0, :3] = side
    result[1, :3] = upward
    result[2, :3] = -forward
    result[0, 3] = -side @ eye
    result[1, 3] = -upward @ eye
    result[2, 3] = forward @ eye
    return result


def quat_to_mat4(quat) -> np.ndarray:
    """Rotation matrix of a unit quaternion."""
    w, x, y, z = _vector(quat, 4)
    result = np.eye(4)
    result[:3, :3] = [
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ]
    return result


def angle_axis(angle: float, axis) -> np.ndarray:
    """Quaternion rotating by ``angle`` about ``axis`` (the axis is used as given)."""
    half = angle / 2
    return np.concatenate(([math.cos(half)], _vector(axis, 3) * math.sin(half)))


def quat_multiply(first, second) -> np.ndarray:
    """Hamilton product ``first * second``."""
    w1, x1, y1, z1 = _vector(first, 4)
    w2, x2, y2, z2 = _vector(second, 4)
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ]
    )


def quat_normalize(quat) -> np.ndarray:
    """Unit quaternion; a zero quaternion becomes the identity."""
    quat = _vector(quat, 4)
    length = float(np.linalg.norm(quat))
    if length <= 0:
        return np.array([1.0, 0.0, 0.0, 0.0])
    return quat / length


def slerp(first, second, factor: float) -> np.ndarray:
    """Spherical interpolation along the shorter arc."""
    first = _vector(first, 4)
    target = _vector(second, 4)
    cosine = float(first @ target)
    if cosine < 0:
        target = -target
        cosine = -cosine
    if cosine > 1 - _QUAT_EPSILON:
        return mix(first, target, factor)
    angle = math.acos(cosine)
    return (math.sin((1 - factor) * angle) * first + math.sin(factor * angle) * target) / math.sin(angle)


def mix(first, second, factor):
    """Linear interpolation between scalars or arrays."""
    if isinstance(first, (int, float)) and isinstance(second, (int, float)):
        return first * (1 - factor) + second * factor
    return np.asarray(first, dtype=float) * (1 - factor) + np.asarray(second, dtype=float) * factor