# meshkit

Procedural triangle meshes for real-time 3D scenes and a decoder for DDS
textures (DXT1–DXT5 compressed and uncompressed 24/32-bit surfaces). Built on
NumPy.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Meshes

Every shape derives from `meshkit.shape.Shape` and stores its vertices in one
interleaved layout of 11 floats per vertex: position (3), colour (3),
normal (3) and texture coordinate (2). Triangles come as a flat index array.
The Y axis points up.

| Module              | Classes                         |
|---------------------|---------------------------------|
| `meshkit.round`     | `Sphere`, `Cylinder`, `Donut`   |
| `meshkit.profiles`  | `Capsule`, `Bottle`             |
| `meshkit.knot`      | `TorusKnot`                     |

- `Sphere(radius=1.0, sectors=10, stacks=10, pattern=1)` – UV sphere; patterns 1–6.
- `Cylinder(sectors=36, pattern=1)` – radius 1, from y=0 to y=1, with flat caps.
- `Donut(major_radius=0.5, minor_radius=0.2, segments=15, slices=15, pattern=1)` – torus in the XZ plane.
- `Capsule(radius=0.5, height=1.0, sectors=36, stacks=18, pattern=1)` – cylinder capped by two hemispheres, centred on the origin.
- `Bottle(radial_segs=36, height_segs=8, pattern=1)` – turned from the fixed outline `BOTTLE_PROFILE` with a closed base; `height_segs` is kept on the object but does not change the mesh.
- `TorusKnot(p=2, q=3, radius=1.0, tube=0.2, segments=200, sides=16, pattern=1)` – tube swept along a (p, q) knot.

`pattern` picks a built-in colour gradient; an unknown pattern falls back to 1.
Segment counts below 1 raise `ValueError`.

```python
from meshkit.round import Sphere

sphere = Sphere(radius=1.0, sectors=16, stacks=8, pattern=2)
verts = sphere.vertices()          # shape (vertex_count, 11)
tris = sphere.indices              # flat uint32 array
sphere.set_pos((0.0, 1.0, 0.0))
sphere.set_rotate(45.0, (0.0, 1.0, 0.0))   # degrees about an axis
sphere.set_scale((2.0, 2.0, 2.0))
model = sphere.update_matrix()     # 4x4 translate @ rotate @ scale
```

`Shape` also offers:

- `positions`, `colors`, `normals`, `texcoords`, `vertex_count`, `index_count`;
- `position`, `scale`, `color`, `model_matrix` (as of the last
  `update_matrix()`), `translation_matrix`;
- `set_transform_matrix(m)` for an extra 4x4 matrix applied after the shape's
  own transform;
- `set_color(rgba)`, which switches `shading_mode` to
  `ShadingMode.OBJECT_COLOR` and sets `uses_object_color`;
- `reset()` to restore the default colour, transform and shading mode, and
  `update(dt)`, which does nothing for these static shapes.

## DDS textures

```python
from meshkit.dds import is_dds, load_dds_file

image = load_dds_file("texture.dds", req_comp=0)
print(image.width, image.height, image.channels, image.components)
pixels = image.pixels()            # (height, width, channels) uint8 array
```

`load_dds(data, req_comp=0)` decodes bytes already in memory and
`is_dds(data)` checks the magic number and header size. Invalid, unsupported
or truncated data raises `DDSError` (a `ValueError`).

- Cube maps with square faces come back with all six faces stacked
  vertically (`faces` is 6 and `height` covers them all).
- Mipmaps past the first level are skipped.
- `req_comp` from 1 to 4 converts the result to that many channels (grey,
  grey + alpha, RGB, RGBA). Any other value keeps the decoded channels, except
  that a fully opaque RGBA image is reduced to RGB.
- `channels` is the bytes per pixel in `data`; `components` is the channel
  count reported for the source surface.

The block decoders `decode_dxt1_block`, `decode_dxt23_alpha_block`,
`decode_dxt45_alpha_block` and `decode_dxt_color_block`, along with
`convert_bit_range` and `rgb888_from_565`, are public for working with single
4x4 blocks.

## What it does not do

meshkit only produces vertex and index arrays and decoded pixel bytes. It does
not open a window, upload buffers or textures to a GPU, or draw anything. It
has no box, cube, quad or teapot shapes, reads no mesh files, writes no DDS
files, and does no collision detection.