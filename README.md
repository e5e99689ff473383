# gorillaengine

A compact game core built around an entity-component-system. It also has
the maths and skeletal-animation logic that a small 3D scene needs. Every
matrix, vector and quaternion is a numpy array.

## Modules

- `gorillaengine.ecs`: `EntityManager`, `ComponentArray`, `ComponentManager`,
  the `System` base class, `SystemManager`, and a `World` that ties them
  together. `World` provides `make_entity`, `add_component`, `get`, `has`,
  `remove_component` and `destroy_entity`.
- `gorillaengine.resource`: `Resource` is a base class for shared resources.
  `copy()` shares the resource and raises its reference count.
  `can_deallocate()` is true only while no copy exists.
- `gorillaengine.aabb`: `AABB`, an axis-aligned box. It starts at the origin
  and grows with `grow_to_include`.
- `gorillaengine.glmath`: 4x4 matrices applied to column vectors, and
  quaternions ordered `(w, x, y, z)`. It provides `perspective`, `ortho`,
  `look_at`, `translate`, `rotate`, `scale`, `quat_to_mat4`, `angle_axis`,
  `quat_multiply`, `quat_normalize`, `slerp` and `mix`.
- `gorillaengine.physics`: the `Position`, `Rotation` (Euler degrees),
  `Scale`, `Velocity` and `RotationQuaternion` components, and
  `MovementSystem`, which moves entities by their velocity.
- `gorillaengine.renderer`: the `Camera`, `PerspectiveProjection`,
  `Transparent`, `Color`, `ModelMatrix` and `RenderTarget` components.
  - `projection_matrix`, `view_matrix` and `model_matrix` build matrices
    from an entity's components.
  - `CameraUpdater` keeps each camera's `proj_mat` and `view_mat` current.
- `gorillaengine.vertex_layout`: the vertex buffer layouts
  `InterleavedVertexBufferLayout`, `VertexBufferLayout`,
  `InstancingVertexBufferLayout` and `InterleavedInstancingVertexBufferLayout`.
  `attribute_pointers` turns a layout into `AttributePointer` records.
  `size_of_gl_type` gives the byte size of a `GLType`.
- `gorillaengine.model`: skinned models.
  - You describe a model with `Node`, `MeshSource`, `Bone` and `VertexWeight`.
  - You describe its key-framed animations with `AnimationClip`, `NodeAnim`,
    `VectorKey` and `QuatKey`.
  - `Model.pose` and `Model.bone_transformations` return the bone matrices
    at a time given in ticks or in seconds.
  - `Model.blended_pose` and `Model.blended_bone_transformations` blend two
    clips.
- `gorillaengine.shader`: `ShaderProgram.collect_shaders` reads every
  `.vert`, `.geom`, `.frag` and `.comp` file below a directory. Files with
  other extensions are noted in the program's `log`.
- `gorillaengine.controller`: `CameraController`, a fly-camera system for
  entities that have `Camera` and `ControllableCamera`.
  - The `window` it is given must provide `size`, `cursor_position`,
    `is_pressed(key)` and `set_cursor_locked(locked)`.
  - Queued `KeyEvent`s toggle the cursor lock (`Key.ESCAPE`) and re-read the
    shader sources (`Key.R`).
- `gorillaengine.text`: `char_range`, `atlas_cells` and `pack_atlas` place
  glyphs in a square atlas. `Font.layout` turns a string into `GlyphQuad`s.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from gorillaengine.ecs import World
from gorillaengine.physics import Position, Velocity, MovementSystem

world = World()
entity = world.make_entity(Position, Velocity)
world.get(entity, Velocity).velocity[:] = (1.0, 0.0, 0.0)

world.systems.register_system(MovementSystem(world))
world.systems.add_entity(entity)
world.systems.update(0.5)

print(world.get(entity, Position).position)  # [0.5 0.  0. ]
```

Vertex layouts give the attribute pointers that a renderer would bind:

```python
from gorillaengine.vertex_layout import GLType, InterleavedVertexBufferLayout, attribute_pointers

layout = InterleavedVertexBufferLayout([(3, GLType.FLOAT), (2, GLType.FLOAT)])
layout.stride                                           # 20
[p.offset for p in attribute_pointers(layout)]          # [0, 12]
```

## What it does not do

- It opens no window and draws nothing on a GPU. The renderer module only
  computes camera, view and model matrices. Shader programs only collect
  source text and are never compiled.
- It does not import models or fonts from files. You build models from
  `Node`, `MeshSource` and `AnimationClip` objects. You build fonts from
  glyph bounds that you supply.
- It has no system that advances animation clips from frame to frame. You
  ask a `Model` for the pose at a given time.
- It has no easing curves.
- It provides no command-line program or game loop. You drive
  `World.systems.update` yourself.