"""Base mesh shape: interleaved vertex data plus a model transform."""

from __future__ import annotations

import enum
import math
from typing import Iterable, Sequence

import numpy as np

ATTRIBUTE_COUNT = 11
"""Floats per vertex: position(3), colour(3), normal(3), texture coordinate(2)."""

POSITION = slice(0, 3)
COLOR = slice(3, 6)
NORMAL = slice(6, 9)
TEXCOORD = slice(9, 11)

DEFAULT_COLOR = (0.5, 0.5, 0.5, 1.0)


class ShadingMode(enum.IntEnum):
    """How a shape is coloured when drawn."""

    VERTEX_COLOR = 1
    OBJECT_COLOR = 2


def _vector(values: Iterable[float], size: int, name: str) -> np.ndarray:
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.shape != (size,):
        raise ValueError(f"{name} must have {size} components, got {arr.shape}")
    return arr


def _translation(offset: np.ndarray) -> np.ndarray:
    mx = np.identity(4)
    mx[:3, 3] = offset
    return mx


def _scaling(factors: np.ndarray) -> np.ndarray:
    return np.diag([factors[0], factors[1], factors[2], 1.0])


def _rotation(radians: float, axis: np.ndarray) -> np.ndarray:
    x, y, z = axis
    c, s = math.cos(radians), math.sin(radians)
    cross = np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])
    mx = np.identity(4)
    mx[:3, :3] = c * np.identity(3) + (1.0 - c) * np.outer(axis, axis) + s * cross
    return mx


class Shape:
    """A mesh with interleaved vertex attributes and a translate-rotate-scale transform."""

    def __init__(self) -> None:
        self._points = np.zeros((0, ATTRIBUTE_COUNT), dtype=np.float32)
        self._indices = np.zeros(0, dtype=np.uint32)
        self.reset()

    def _set_geometry(self, points: Sequence, indices: Sequence[int]) -> None:
        pts = np.asarray(points, dtype=np.float32).reshape(-1, ATTRIBUTE_COUNT)
        idx = np.asarray(indices, dtype=np.uint32).ravel()
        if idx.size and int(idx.max()) >= len(pts):
            raise ValueError("index refers past the last vertex")
        self._points = pts
        self._indices = idx

    def reset(self) -> None:
        """Restore the default colour, transform and shading mode."""
        self._scale = np.ones(3)
        self._color = np.array(DEFAULT_COLOR)
        self._pos = np.zeros(3)
        self._rot_angle = 0.0
        self._rot_axis = np.array([0.0, 1.0, 0.0])
        self._scale_dirty = self._pos_dirty = self._rotation_dirty = False
        self._transform_dirty = self._has_transform = False
        self._mx_scale = np.identity(4)
        self._mx_trans = np.identity(4)
        self._mx_rotation = np.identity(4)
        self._mx_trs = np.identity(4)
        self._mx_transform = np.identity(4)
        self._mx_final = np.identity(4)
        self.shading_mode = ShadingMode.VERTEX_COLOR
        self.uses_object_color = False

    def update(self, dt: float) -> None:
        """Advance any animation by ``dt`` seconds; the base shape is static."""

    def set_color(self, color: Iterable[float]) -> None:
        """Use a single RGBA object colour instead of the vertex colours."""
        self._color = _vector(color, 4, "color")
        self.shading_mode = ShadingMode.OBJECT_COLOR
        self.uses_object_color = True

    def set_scale(self, scale: Iterable[float]) -> None:
        self._scale = _vector(scale, 3, "scale")
        self._scale_dirty = True
        self._mx_scale = _scaling(self._scale)

    def set_pos(self, position: Iterable[float]) -> None:
        self._pos = _vector(position, 3, "position")
        self._pos_dirty = True
        self._mx_trans = _translation(self._pos)

    def set_rotate(self, angle: float, axis: Iterable[float]) -> None:
        """Rotate by ``angle`` degrees about ``axis``."""
        axis_vec = _vector(axis, 3, "axis")
        length = float(np.linalg.norm(axis_vec))
        if length == 0.0:
            raise ValueError("rotation axis must not be the zero vector")
        self._rot_angle = float(angle)
        self._rot_axis = axis_vec / length
        self._mx_rotation = _rotation(math.radians(angle), self._rot_axis)
        self._rotation_dirty = True

    def set_transform_matrix(self, matrix: Sequence) -> None:
        """Set an extra matrix applied after the shape's own transform."""
        mx = np.asarray(matrix, dtype=np.float64)
        if mx.shape != (4, 4):
            raise ValueError("transform matrix must be 4x4")
        self._mx_transform = mx.copy()
        self._has_transform = self._transform_dirty = True

    def update_matrix(self) -> np.ndarray:
        """Recompute the model matrix if anything changed and return it."""
        if self._scale_dirty or self._pos_dirty or self._rotation_dirty:
            self._mx_trs = self._mx_trans @ self._mx_rotation @ self._mx_scale
            if self._has_transform:
                self._mx_final = self._mx_transform @ self._mx_trs
            else:
                self._mx_final = self._mx_trs
            self._scale_dirty = self._pos_dirty = self._rotation_dirty = False
        if self._transform_dirty:
            self._mx_final = self._mx_transform @ self._mx_trs
            self._transform_dirty = False
        return self._mx_final.copy()

    def vertices(self) -> np.ndarray:
        """Return a copy of the interleaved vertex data, one row per vertex."""
        return self._points.copy()

    @property
    def indices(self) -> np.ndarray:
        return self._indices.copy()

    @property
    def vertex_count(self) -> int:
        return len(self._points)

    @property
    def index_count(self) -> int:
        return len(self._indices)

    @property
    def positions(self) -> np.ndarray:
        return self._points[:, POSITION].copy()

    @property
    def colors(self) -> np.ndarray:
        return self._points[:, COLOR].copy()

    @property
    def normals(self) -> np.ndarray:
        return self._points[:, NORMAL].copy()

    @property
    def texcoords(self) -> np.ndarray:
        return self._points[:, TEXCOORD].copy()

    @property
    def position(self) -> np.ndarray:
        return self._pos.copy()

    @property
    def scale(self) -> np.ndarray:
        return self._scale.copy()

    @property
    def color(self) -> np.ndarray:
        return self._color.copy()

    @property
    def model_matrix(self) -> np.ndarray:
        """The model matrix as of the last ``update_matrix`` call."""
        return self._mx_final.copy()

    @property
    def translation_matrix(self) -> np.ndarray:
        return self._mx_trans.copy()