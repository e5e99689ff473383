"""Skinned models: meshes with bone weights, a node hierarchy and keyframe animations."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np

from gorillaengine import glmath

MAX_BONES_PER_VERTEX = 4
MAX_BONES = 100
DEFAULT_TICKS_PER_SECOND = 25.0
MIN_DURATION_SECONDS = 0.0001


class LoadFlags(enum.IntFlag):
    NONE = 0
    LOAD_DATA = 1 << 0
    LOAD_DRAWABLE = 1 << 1
    FLIP_TEXTURES = 1 << 2
    FLIP_WINDING_ORDER = 1 << 3


def _vector(value, size: int) -> np.ndarray:
    array = np.array(value, dtype=float)
    if array.shape != (size,):
        raise ValueError(f"expected a vector of {size} components, got shape {array.shape}")
    return array


def _matrix(value) -> np.ndarray:
    array = np.array(value, dtype=float)
    if array.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {array.shape}")
    return array


@dataclass
class VectorKey:
    """A 3D value at a time in ticks."""

    time: float
    value: np.ndarray

    def __post_init__(self) -> None:
        self.value = _vector(self.value, 3)


@dataclass
class QuatKey:
    """A rotation quaternion (w, x, y, z) at a time in ticks."""

    time: float
    value: np.ndarray

    def __post_init__(self) -> None:
        self.value = _vector(self.value, 4)


@dataclass
class NodeAnim:
    """Keyframes animating one node of the hierarchy."""

    node_name: str
    position_keys: list[VectorKey] = field(default_factory=list)
    rotation_keys: list[QuatKey] = field(default_factory=list)
    scaling_keys: list[VectorKey] = field(default_factory=list)


@dataclass
class AnimationClip:
    """A named animation; duration is in ticks."""

    name: str
    duration: float
    ticks_per_second: float = 0.0
    channels: list[NodeAnim] = field(default_factory=list)


@dataclass
class Node:
    """A node of the scene hierarchy with its transformation relative to its parent."""

    name: str
    transformation: np.ndarray = field(default_factory=lambda: np.eye(4))
    children: list[Node] = field(default_factory=list)
    meshes: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.transformation = _matrix(self.transformation)


@dataclass(frozen=True)
class VertexWeight:
    vertex_id: int
    weight: float


@dataclass
class Bone:
    """A bone, the matrix from mesh space to its bind pose, and the vertices it moves."""

    name: str
    offset_matrix: np.ndarray = field(default_factory=lambda: np.eye(4))
    weights: list[VertexWeight] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.offset_matrix = _matrix(self.offset_matrix)


@dataclass
class MeshSource:
    """Imported mesh geometry, one entry per vertex in each per-vertex list."""

    vertices: list = field(default_factory=list)
    normals: list | None = None
    tangents: list | None = None
    texture_coords: list | None = None
    faces: list[Sequence[int]] = field(default_factory=list)
    bones: list[Bone] = field(default_factory=list)
    material_index: int = 0


@dataclass
class MeshData:
    """Vertex data laid out for upload: vec4 positions, normals and tangents, vec2 texture coordinates."""

    indices: list[int] = field(default_factory=list)
    positions: list[np.ndarray] = field(default_factory=list)
    texture_coords: list[np.ndarray] = field(default_factory=list)
    normals: list[np.ndarray] = field(default_factory=list)
    tangents: list[np.ndarray] = field(default_factory=list)
    bone_ids: list[list[int]] = field(default_factory=list)
    weights: list[list[float]] = field(default_factory=list)


def ticks_per_second(animation: AnimationClip) -> float:
    """Ticks per second of an animation, falling back to 25 when unset."""
    return float(animation.ticks_per_second) if animation.ticks_per_second != 0 else DEFAULT_TICKS_PER_SECOND


def duration_seconds(animation: AnimationClip) -> float:
    """Duration of an animation in seconds, never below a tiny positive minimum."""
    return max(animation.duration / ticks_per_second(animation), MIN_DURATION_SECONDS)


def find_node_anim(animation: AnimationClip, node_name: str) -> NodeAnim | None:
    """The first channel of the animation that targets the named node, if any."""
    return next((channel for channel in animation.channels if channel.node_name == node_name), None)


def _key_index(time_ticks: float, keys: Sequence) -> int:
    for index, key in enumerate(keys[1:]):
        if time_ticks < key.time:
            return index
    return 0


def _bracket(time_ticks: float, keys: Sequence, what: str):
    """The two keys around the time and the clamped factor between them, or a single key."""
    if not keys:
        raise ValueError(f"node animation has no {what} keys")
    if len(keys) == 1:
        return keys[0], None, 0.0
    index = _key_index(time_ticks, keys)
    if index + 1 >= len(keys):
        return keys[0], None, 0.0
    first, second = keys[index], keys[index + 1]
    factor = (time_ticks - first.time) / (second.time - first.time)
    return first, second, min(max(factor, 0.0), 1.0)


def interpolate_position(time_ticks: float, node_anim: NodeAnim) -> np.ndarray:
    """Position of the node at the given time."""
    first, second, factor = _bracket(time_ticks, node_anim.position_keys, "position")
    if second is None:
        return first.value.copy()
    return glmath.mix(first.value, second.value, factor)


def interpolate_rotation(time_ticks: float, node_anim: NodeAnim) -> np.ndarray:
    """Rotation quaternion of the node at the given time."""
    first, second, factor = _bracket(time_ticks, node_anim.rotation_keys, "rotation")
    if second is None:
        return first.value.copy()
    return glmath.quat_normalize(glmath.slerp(first.value, second.value, factor))


def interpolate_scaling(time_ticks: float, node_anim: NodeAnim) -> np.ndarray:
    """Scale of the node at the given time."""
    first, second, factor = _bracket(time_ticks, node_anim.scaling_keys, "scaling")
    if second is None:
        return first.value.copy()
    return glmath.mix(first.value, second.value, factor)


def _per_vertex(values, count: int, what: str) -> list:
    if values is None or len(values) != count:
        raise ValueError(f"mesh has no {what} for every vertex")
    return list(values)


def extract_vertex_data(mesh: MeshSource) -> MeshData:
    """Per-vertex attributes and flattened face indices of a mesh."""
    count = len(mesh.vertices)
    normals = _per_vertex(mesh.normals, count, "normals")
    tangents = _per_vertex(mesh.tangents, count, "tangents")
    texture_coords = _per_vertex(mesh.texture_coords, count, "texture coordinates")

    data = MeshData()
    for vertex, normal, tangent, uv in zip(mesh.vertices, normals, tangents, texture_coords):
        data.positions.append(np.append(_vector(vertex, 3), 1.0))
        data.normals.append(np.append(_vector(normal, 3), 0.0))
        data.tangents.append(np.append(_vector(tangent, 3), 0.0))
        data.texture_coords.append(np.array(uv, dtype=float)[:2])
    data.indices = [int(index) for face in mesh.faces for index in face]
    return data


class Model:
    """A node hierarchy with skinned meshes that can be posed by its animations."""

    def __init__(
        self,
        root: Node,
        meshes: Iterable[MeshSource] = (),
        animations: Iterable[AnimationClip] = (),
        flags: int = LoadFlags.NONE,
    ) -> None:
        self.root = root
        self.animations = list(animations)
        self.flags = LoadFlags(flags)
        self.bone_map: dict[str, int] = {}
        self._tpose_transforms: list[np.ndarray] = []
        self._bone_transformations: list[np.ndarray] = []
        self.global_inverse_transform = np.linalg.inv(root.transformation)
        self.meshes: list[MeshData | None] = []
        self._process_node(root, list(meshes))

    @property
    def tpose_transforms(self) -> list[np.ndarray]:
        return [matrix.copy() for matrix in self._tpose_transforms]

    def _process_node(self, node: Node, sources: list[MeshSource]) -> None:
        for mesh_index in node.meshes:
            self.meshes.append(self._process_mesh(sources[mesh_index]))
        for child in node.children:
            self._process_node(child, sources)

    def _process_mesh(self, source: MeshSource) -> MeshData | None:
        if self.flags & LoadFlags.FLIP_WINDING_ORDER:
            source = dataclasses.replace(source, faces=[tuple(reversed(face)) for face in source.faces])
        data = extract_vertex_data(source)
        if source.bones:
            self._extract_bones(data, source.bones)
            missing = len(self._tpose_transforms) - len(self._bone_transformations)
            self._bone_transformations.extend(np.eye(4) for _ in range(missing))
        return data if self.flags & LoadFlags.LOAD_DATA else None

    def _extract_bones(self, data: MeshData, bones: Iterable[Bone]) -> None:
        data.bone_ids = [[-1] * MAX_BONES_PER_VERTEX for _ in data.positions]
        data.weights = [[-1.0] * MAX_BONES_PER_VERTEX for _ in data.positions]
        for bone in bones:
            bone_id = self.bone_map.get(bone.name)
            if bone_id is None:
                bone_id = len(self._tpose_transforms)
                self._tpose_transforms.append(bone.offset_matrix.copy())
                self.bone_map[bone.name] = bone_id
            for vertex_weight in bone.weights:
                vertex_id = vertex_weight.vertex_id
                if not 0 <= vertex_id < len(data.positions):
                    raise IndexError(f"bone {bone.name!r} weights vertex {vertex_id} out of range")
                slots = data.bone_ids[vertex_id]
                if -1 in slots:
                    slot = slots.index(-1)
                    slots[slot] = bone_id
                    data.weights[vertex_id][slot] = float(vertex_weight.weight)

    def _animate(
        self,
        node: Node,
        animation: AnimationClip,
        time_ticks: float,
        second: AnimationClip | None,
        second_ticks: float,
        factor: float,
        parent: np.ndarray,
    ) -> None:
        transformation = node.transformation
        node_anim = find_node_anim(animation, node.name)
        if node_anim is not None:
            second_anim = find_node_anim(second, node.name) if second is not None else None
            position = interpolate_position(time_ticks, node_anim)
            rotation = interpolate_rotation(time_ticks, node_anim)
            scaling = interpolate_scaling(time_ticks, node_anim)
            if second_anim is not None:
                position = glmath.mix(position, interpolate_position(second_ticks, second_anim), factor)
                rotation = glmath.slerp(rotation, interpolate_rotation(second_ticks, second_anim), factor)
                scaling = glmath.mix(scaling, interpolate_scaling(second_ticks, second_anim), factor)
            transformation = (
                glmath.translate(np.eye(4), position)
                @ glmath.quat_to_mat4(rotation)
                @ glmath.scale(np.eye(4), scaling)
            )
        global_transformation = parent @ transformation

        bone_id = self.bone_map.get(node.name)
        if bone_id is not None:
            self._bone_transformations[bone_id] = (
                self.global_inverse_transform @ global_transformation @ self._tpose_transforms[bone_id]
            )
        for child in node.children:
            self._animate(child, animation, time_ticks, second, second_ticks, factor, global_transformation)

    @staticmethod
    def _check_time(animation: AnimationClip, time_ticks: float) -> None:
        if time_ticks > animation.duration:
            raise ValueError(
                f"time {time_ticks} ticks exceeds the duration of animation {animation.name!r}"
            )

    def pose(self, animation: AnimationClip, time_ticks: float) -> list[np.ndarray]:
        """Bone matrices for the animation at a time in ticks, indexed by bone id."""
        self._check_time(animation, time_ticks)
        self._animate(self.root, animation, time_ticks, None, 0.0, 0.0, np.eye(4))
        return [matrix.copy() for matrix in self._bone_transformations]

    def blended_pose(
        self,
        first: AnimationClip,
        second: AnimationClip,
        factor: float,
        first_ticks: float,
        second_ticks: float,
    ) -> list[np.ndarray]:
        """Bone matrices blending two animations; factor 0 is the first, 1 the second."""
        self._check_time(first, first_ticks)
        self._check_time(second, second_ticks)
        self._animate(self.root, first, first_ticks, second, second_ticks, factor, np.eye(4))
        return [matrix.copy() for matrix in self._bone_transformations]

    def bone_transformations(self, animation: AnimationClip, time_seconds: float) -> list[np.ndarray]:
        """Bone matrices for the animation at a time in seconds."""
        return self.pose(animation, time_seconds * ticks_per_second(animation))

    def blended_bone_transformations(
        self,
        first: AnimationClip,
        second: AnimationClip,
        factor: float,
        first_seconds: float,
        second_seconds: float,
    ) -> list[np.ndarray]:
        """Blended bone matrices with both times given in seconds."""
        return self.blended_pose(
            first,
            second,
            factor,
            first_seconds * ticks_per_second(first),
            second_seconds * ticks_per_second(second),
        )