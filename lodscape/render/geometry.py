"""
Vertex buffers handed to the renderer.

Planes lie in x/z with height on y. Vertex (row, col) of a width x height
grid sits at linear index row * width + col.
"""

import numpy as np
from typing import Tuple

from ..errors import DimensionMismatchError


def grid_uvs(width: int, height: int) -> np.ndarray:
    """
    Per-vertex (u, v): u = col / (width - 1), v = row / (height - 1).

    An axis with a single sample has coordinate 0.
    """
    u = np.arange(width, dtype=np.float64) / max(width - 1, 1)
    v = np.arange(height, dtype=np.float64) / max(height - 1, 1)
    vv, uu = np.meshgrid(v, u, indexing="ij")
    return np.stack([uu.ravel(), vv.ravel()], axis=1).astype(np.float32)


def grid_indices(width: int, height: int) -> np.ndarray:
    """Two triangles per grid quad, shape (2 * (w-1) * (h-1), 3)."""
    iy, ix = np.meshgrid(np.arange(height - 1), np.arange(width - 1), indexing="ij")
    a = (iy * width + ix).ravel()
    b = ((iy + 1) * width + ix).ravel()
    c = ((iy + 1) * width + ix + 1).ravel()
    d = (iy * width + ix + 1).ravel()

    faces = np.empty((a.size * 2, 3), dtype=np.uint32)
    faces[0::2] = np.stack([a, b, d], axis=1)
    faces[1::2] = np.stack([b, c, d], axis=1)
    return faces


def grid_normals(heights: np.ndarray, dx: float, dz: float) -> np.ndarray:
    """Unit vertex normals from central differences of a (h, w) height grid."""
    dh_dz, dh_dx = np.gradient(heights.astype(np.float64), dz, dx)
    normals = np.stack([-dh_dx, np.ones_like(dh_dx), -dh_dz], axis=-1)
    normals /= np.linalg.norm(normals, axis=-1, keepdims=True)
    return normals.reshape(-1, 3).astype(np.float32)


class PlaneGeometry:
    """Position / normal / uv / index buffers of one height grid."""

    def __init__(
        self,
        width: int,
        height: int,
        positions: np.ndarray,
        normals: np.ndarray,
        uvs: np.ndarray,
        indices: np.ndarray,
    ):
        self.width = width
        self.height = height
        self.positions = positions
        self.normals = normals
        self.uvs = uvs
        self.indices = indices

    @classmethod
    def from_heights(
        cls,
        heights: np.ndarray,
        size: Tuple[float, float, float],
        offset: Tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> "PlaneGeometry":
        """
        Build a plane of size[0] x size[2] centred on the origin, heights
        scaled by size[1], then translated by offset.

        Raises:
            DimensionMismatchError: If the grid is smaller than 2 x 2
        """
        height, width = heights.shape
        if width < 2 or height < 2:
            raise DimensionMismatchError(
                f"PlaneGeometry.from_heights(): need at least 2 x 2 samples, got {width} x {height}"
            )

        size_x, size_y, size_z = size
        dx = size_x / (width - 1)
        dz = size_z / (height - 1)

        xs = -size_x / 2.0 + np.arange(width, dtype=np.float64) * dx
        zs = -size_z / 2.0 + np.arange(height, dtype=np.float64) * dz
        zz, xx = np.meshgrid(zs, xs, indexing="ij")
        yy = heights.astype(np.float64) * size_y

        positions = np.stack(
            [xx.ravel() + offset[0], yy.ravel() + offset[1], zz.ravel() + offset[2]],
            axis=1,
        ).astype(np.float32)

        return cls(
            width,
            height,
            positions,
            grid_normals(yy, dx, dz),
            grid_uvs(width, height),
            grid_indices(width, height),
        )

    @property
    def vertex_count(self) -> int:
        return self.width * self.height

    @property
    def nbytes(self) -> int:
        return self.positions.nbytes + self.normals.nbytes + self.uvs.nbytes + self.indices.nbytes


class DualPlaneGeometry:
    """
    Two planes with identical vertex grids packed for render-side blending.

    `position/normal/uv` come from the true tile and
    `blend_position/blend_normal/blend_uv` from the conformal tile it blends
    towards. Triangles are shared.
    """

    def __init__(self, base: PlaneGeometry, blend: PlaneGeometry):
        if (base.width, base.height) != (blend.width, blend.height):
            raise DimensionMismatchError(
                f"DualPlaneGeometry(): base [{base.width} {base.height}] and blend "
                f"[{blend.width} {blend.height}] vertex grids don't match"
            )

        self.width = base.width
        self.height = base.height
        self.attributes = {
            "position": base.positions,
            "normal": base.normals,
            "uv": base.uvs,
            "blend_position": blend.positions,
            "blend_normal": blend.normals,
            "blend_uv": blend.uvs,
        }
        self.indices = base.indices

    @classmethod
    def combine(cls, base: PlaneGeometry, blend: PlaneGeometry) -> "DualPlaneGeometry":
        return cls(base, blend)

    @property
    def vertex_count(self) -> int:
        return self.width * self.height
