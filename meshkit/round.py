"""Curved primitives: sphere, capped cylinder and torus (donut)."""

from __future__ import annotations

import math

import numpy as np

from .shape import Shape

_SPHERE_PALETTES = {
    1: ((0.00, 0.50, 0.70), (0.30, 0.80, 0.90)),
    2: ((1.00, 0.50, 0.20), (1.00, 0.80, 0.40)),
    3: ((0.50, 0.20, 0.70), (0.90, 0.40, 0.90)),
    4: ((0.20, 0.60, 0.20), (0.70, 0.90, 0.40)),
    5: ((0.00, 0.50, 0.70), (1.00, 0.80, 0.40)),
    6: ((0.90, 0.40, 0.90), (0.20, 0.60, 0.20)),
}
"""Sphere palettes as (top colour, bottom colour)."""

_CYLINDER_PALETTES = {
    1: ((0.65, 0.80, 0.90), (0.45, 0.60, 0.75)),
    2: ((0.75, 0.60, 0.85), (0.55, 0.40, 0.65)),
    3: ((0.95, 0.85, 0.75), (0.85, 0.70, 0.55)),
    4: ((1.00, 0.88, 0.70), (1.00, 0.78, 0.55)),
}
"""Cylinder palettes as (top colour, bottom colour)."""

_DONUT_PALETTES = {
    1: ((1.00, 0.85, 0.75), (1.00, 0.65, 0.45)),
    2: ((0.85, 0.75, 0.95), (0.65, 0.55, 0.75)),
    3: ((0.75, 0.95, 0.85), (0.55, 0.75, 0.65)),
    4: ((0.95, 0.75, 0.85), (0.75, 0.55, 0.65)),
}
"""Donut palettes as (inner-ring colour, outer-ring colour) along the tube."""


def _palette(palettes: dict, pattern: int) -> tuple[np.ndarray, np.ndarray]:
    first, second = palettes.get(pattern, palettes[1])
    return np.array(first), np.array(second)


def _require_count(value: int, name: str) -> int:
    count = int(value)
    if count < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return count


def _normalize(vectors: np.ndarray) -> np.ndarray:
    lengths = np.linalg.norm(vectors, axis=-1, keepdims=True)
    with np.errstate(invalid="ignore", divide="ignore"):
        return vectors / lengths


def _interleave(pos, color, normal, uv) -> np.ndarray:
    shape = pos.shape[:-1]
    parts = [np.broadcast_to(a, shape + (a.shape[-1],)) for a in (pos, color, normal, uv)]
    return np.concatenate(parts, axis=-1).reshape(-1, 11)


def _grid_indices(rows: int, cols: int, start: int = 0) -> np.ndarray:
    """Two triangles per cell of a (rows+1) x (cols+1) vertex grid."""
    i, j = np.meshgrid(np.arange(rows), np.arange(cols), indexing="ij")
    first = start + i * (cols + 1) + j
    second = first + cols + 1
    quads = np.stack([first, second, first + 1, first + 1, second, second + 1], axis=-1)
    return quads.reshape(-1)


class Sphere(Shape):
    """UV sphere around the origin with Y as the vertical axis."""

    def __init__(self, radius: float = 1.0, sectors: int = 10, stacks: int = 10,
                 pattern: int = 1) -> None:
        super().__init__()
        sectors = _require_count(sectors, "sectors")
        stacks = _require_count(stacks, "stacks")
        top, bottom = _palette(_SPHERE_PALETTES, pattern)

        rows = np.arange(stacks + 1)
        v = rows / stacks
        stack_angle = math.pi / 2.0 - rows * (math.pi / stacks)
        ring_radius = radius * np.cos(stack_angle)
        y = radius * np.sin(stack_angle)

        cols = np.arange(sectors + 1)
        sector_angle = cols * (2.0 * math.pi / sectors)

        x = ring_radius[:, None] * np.cos(sector_angle)[None, :]
        z = -ring_radius[:, None] * np.sin(sector_angle)[None, :]
        pos = np.stack([x, np.broadcast_to(y[:, None], x.shape), z], axis=-1)
        normal = _normalize(pos)
        color = (top * (1.0 - v)[:, None] + bottom * v[:, None])[:, None, :]
        uv = np.stack(np.broadcast_arrays((cols / sectors)[None, :], v[:, None]), axis=-1)

        self._set_geometry(_interleave(pos, color, normal, uv),
                           _grid_indices(stacks, sectors))


class Cylinder(Shape):
    """Unit-radius cylinder from y=0 to y=1, closed by two flat caps."""

    RADIUS = 1.0
    HEIGHT = 1.0

    def __init__(self, sectors: int = 36, pattern: int = 1) -> None:
        super().__init__()
        sectors = _require_count(sectors, "sectors")
        top, bottom = _palette(_CYLINDER_PALETTES, pattern)
        stacks = 1

        theta = np.arange(sectors + 1) * (2.0 * math.pi / sectors)
        ring_x = np.cos(theta) * self.RADIUS
        ring_z = -np.sin(theta) * self.RADIUS
        u = np.arange(sectors + 1) / sectors

        side = []
        for level in range(stacks + 1):
            v = level / stacks
            y = 0.0 if level == 0 else self.HEIGHT
            color = bottom * (1.0 - v) + top * v
            pos = np.stack([ring_x, np.full_like(ring_x, y), ring_z], axis=-1)
            normal = _normalize(np.stack([ring_x, np.zeros_like(ring_x), ring_z], axis=-1))
            uv = np.stack([u, np.full_like(u, v)], axis=-1)
            side.append(_interleave(pos, color, normal, uv))
        side_points = np.concatenate(side)
        indices = [_grid_indices(stacks, sectors)]

        caps = []
        base = len(side_points)
        for y, color, ny, flip in ((0.0, bottom, -1.0, True), (self.HEIGHT, top, 1.0, False)):
            normal = np.array([0.0, ny, 0.0])
            center = np.concatenate([[0.0, y, 0.0], color, normal, [0.5, 0.5]])
            pos = np.stack([ring_x, np.full_like(ring_x, y), ring_z], axis=-1)
            uv = np.stack([(ring_x + 1.0) * 0.5, (ring_z + 1.0) * 0.5], axis=-1)
            ring = _interleave(pos, color, normal, uv)
            caps.extend([center[None, :], ring])

            j = np.arange(sectors)
            centre_idx = np.full(sectors, base)
            a, b = base + j + 1, base + j + 2
            tris = np.stack([centre_idx, b, a] if flip else [centre_idx, a, b], axis=-1)
            indices.append(tris.reshape(-1))
            base += 1 + (sectors + 1)

        points = np.concatenate([side_points, *caps])
        self._set_geometry(points, np.concatenate(indices))


class Donut(Shape):
    """Torus lying in the XZ plane, coloured along the tube with a faint ripple."""

    def __init__(self, major_radius: float = 0.5, minor_radius: float = 0.2,
                 segments: int = 15, slices: int = 15, pattern: int = 1) -> None:
        super().__init__()
        segments = _require_count(segments, "segments")
        slices = _require_count(slices, "slices")
        color1, color2 = _palette(_DONUT_PALETTES, pattern)

        u = np.arange(segments + 1) / segments
        theta = np.arange(segments + 1) * (2.0 * math.pi / segments)
        v = np.arange(slices + 1) / slices
        phi = np.arange(slices + 1) * (2.0 * math.pi / slices)

        cos_t, sin_t = np.cos(theta)[:, None], np.sin(theta)[:, None]
        cos_p, sin_p = np.cos(phi)[None, :], np.sin(phi)[None, :]

        ring = major_radius + minor_radius * cos_p
        pos = np.stack(np.broadcast_arrays(ring * cos_t, minor_radius * sin_p, -ring * sin_t),
                       axis=-1)
        center = np.stack(np.broadcast_arrays(cos_t * major_radius, 0.0 * cos_t,
                                              -sin_t * major_radius), axis=-1)
        normal = _normalize(pos - center)

        base = color1[None, None, :] * (1.0 - v)[None, :, None] + color2 * v[None, :, None]
        noise = 0.05 * np.sin(8.0 * u * math.pi)[:, None] * np.cos(6.0 * v * math.pi)[None, :]
        color = np.clip(base + noise[:, :, None], 0.0, 1.0)
        uv = np.stack(np.broadcast_arrays(u[:, None], v[None, :]), axis=-1)

        self._set_geometry(_interleave(pos, color, normal, uv),
                           _grid_indices(segments, slices))