# slimequest

This is the simulation side of a small third-person action game. A character
moves about a stage, and slime enemies wander, chase and bite a player
character. The package covers the maths, physics and game logic, and it reads
the game's asset files. It has no dependencies outside the standard library.

## What is inside

- `slimequest.vector`
  - `Vec3` is an immutable 3D vector.
  - `Matrix` is a row-major 4x4 matrix. Points are row vectors, so
    `a @ b` applies `a` first. It provides scaling, translation, axis and
    roll/pitch/yaw rotations, `from_quaternion`, `inverse`, `transform_coord`
    and `transform_normal`.
  - `lerp` and `quaternion_slerp` interpolate between values.
  - `HitResult` and `RenderContext` are data records.
- `slimequest.collision`
  - `intersect_sphere_vs_sphere`, `intersect_cylinder_vs_cylinder` and
    `intersect_sphere_vs_cylinder` return the position the second shape is
    pushed out to, or `None` when the shapes do not touch.
  - `intersect_ray_vs_model` returns a `HitResult` for the nearest
    front-facing triangle of a `Model`, or `None`.
- `slimequest.audio_resource`: `AudioResource.parse(bytes)` and
  `AudioResource.load(path)` read RIFF/WAVE data.
  - The result exposes `wave_format` (a `WaveFormat` with `channels`,
    `samples_per_sec`, `bits_per_sample`, `block_align` and
    `avg_bytes_per_sec`) and the sample `data`.
  - 8-bit samples are converted to signed values.
  - Input that cannot be read raises `WavFormatError`.
- `slimequest.model_resource`: `ModelResource` reads and writes a
  little-endian binary model archive with `loads`/`load` and `dumps`/`save`.
  - The archive holds nodes, materials, meshes and keyframe animations.
  - Input that cannot be read raises `ModelFormatError`.
  - `find_node_index` looks up a node by id.
  - `texture_path` resolves a material's texture relative to the model file.
- `slimequest.model`: `Model` builds the node hierarchy of a resource, and
  `Model.from_file` builds one from a file on disk.
  - `update_transform` computes the local and world matrices.
  - `play_animation` and `update_animation` play keyframe animations. Playback
    can loop, and a new animation blends in over a given time.
  - `find_node` looks up a node by name.
- `slimequest.debug_shapes`
  - `sphere_mesh` and `cylinder_mesh` return line-list vertices.
  - `DebugRenderer` queues `DebugSphere` and `DebugCylinder` shapes and hands
    them out on `flush()`.
- `slimequest.line_renderer`: `LineRenderer` queues coloured `LineVertex`
  values. `flush()` returns them in batches of at most `capacity` vertices.
- `slimequest.character`: `Character` is a moving actor.
  - It handles gravity, friction, acceleration with air control, slope
    handling, wall sliding, jumping and turning.
  - It also tracks damage, invincibility time and health.
  - Ground and wall tests go through a `RayCaster`. A `RayCaster` holds
    callables that take `(start, end)` and return a `HitResult` or `None`.
- `slimequest.camera_controller`: `CameraController.update(elapsed_time,
  axis_x, axis_y)` orbits a target and returns a `CameraView` with `eye`,
  `target` and `up`.
- `slimequest.enemy`
  - `Enemy` is an abstract character. Subclasses implement `update`.
  - `EnemyManager` updates its enemies and removes those marked with
    `remove`/`destroy` after each update. It then pushes overlapping enemies
    apart.
- `slimequest.slime`: `EnemySlime` is an enemy driven by a state machine.
  - Its states (`SlimeState`) are wander, idle, pursuit, attack, battle idle,
    damage and death.
  - It plays the animations named in `SlimeAnimation` on its `Model`.
  - It damages and knocks back the player `Character` it is given.
- `slimequest.sprite`: `Sprite.vertices` computes the four triangle-strip
  vertices of a rotated screen-space quad. The positions are in normalised
  device coordinates and the texture coordinates are normalised.

## Example

```python
from slimequest.vector import Vec3
from slimequest.collision import intersect_sphere_vs_sphere

pushed = intersect_sphere_vs_sphere(Vec3(0, 0, 0), 0.5, Vec3(0.5, 0, 0), 0.5)
print(pushed)  # Vec3(x=1.0, y=0.0, z=0.0)
```

```python
from slimequest.audio_resource import AudioResource

sound = AudioResource.load("hit.wav")
print(sound.wave_format.samples_per_sec, sound.audio_bytes)
```

## What it does not do

This is a library with no command to run. It does not draw anything, open a
window, read a gamepad or play sound. The debug and line renderers, the sprite
and the camera controller only compute data for a renderer to use. The package
has no playable player character and no stage geometry of its own. A
`Character` can serve as the slime's player, and the stage is whatever
colliders you put in a `RayCaster`.

## Running the tests

```
pip install -e .[test]
pytest
```