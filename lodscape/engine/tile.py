"""
Terrain tiles: one region of the height field at one level of detail.

A tile always covers its full region; a higher lod_factor just represents
that area with fewer samples (1 / 2^lod_factor per axis).
"""

import enum
import numpy as np
from typing import Sequence, Tuple

from ..errors import ConformError, DimensionMismatchError, LodFactorError
from ..procgen.interpolation import bilinear_resample
from ..render.geometry import PlaneGeometry, grid_uvs
from ..render.mesh import corner_blend
from .region import Region

MAX_LOD_FACTOR = 10

Vec3 = Tuple[float, float, float]


class TileStorage(enum.Enum):
    OWNED = "owned"
    # data is the height field's own map, shared rather than copied
    FIELD_VIEW = "field_view"


def _check_lod_factor(caller: str, lod_factor) -> int:
    lod_factor = int(np.floor(lod_factor))
    if lod_factor < 0 or lod_factor > MAX_LOD_FACTOR:
        raise LodFactorError(f"Tile.{caller}(): lod out of range {lod_factor}")
    return lod_factor


class Tile:
    """
    Samples for one region at one level of detail.

    Use one of the constructors (master, from_region, downsample, conform)
    rather than calling this directly.
    """

    def __init__(
        self,
        field,
        region: Region,
        width: int,
        height: int,
        data: np.ndarray,
        lod_factor: int,
        storage: TileStorage = TileStorage.OWNED,
    ):
        self.field = field
        self.region = region
        self.width = width
        self.height = height
        self.data = data
        self.lod_factor = lod_factor
        self.storage = storage

    def __repr__(self) -> str:
        return (
            f"Tile({self.region!r}, {self.width}x{self.height}, "
            f"lod={self.lod_factor}, {self.storage.value})"
        )

    # Constructors

    @classmethod
    def master(cls, field) -> "Tile":
        """Whole-field tile at lod 0 sharing the field's buffer."""
        return cls(
            field,
            field.region(),
            field.width,
            field.height,
            field.map,
            0,
            TileStorage.FIELD_VIEW,
        )

    @classmethod
    def from_region(cls, field, region: Region) -> "Tile":
        """Copy of the region's samples at full resolution."""
        return cls(
            field,
            region,
            region.x_span,
            region.y_span,
            field.extract_region(region),
            0,
        )

    @classmethod
    def downsample(cls, tile: "Tile", lod_factor: int) -> "Tile":
        """
        Box-filter the tile's region down by 2^lod_factor per axis.

        Always sampled from the source field, never from another level, so
        averaging error does not compound. Edges will not match neighbouring
        regions until stitched.
        """
        lod_factor = _check_lod_factor("downsample", lod_factor)

        region = tile.region
        power = 2 ** lod_factor
        width = region.x_span // power
        height = region.y_span // power

        data = tile.field.box_means(region.x, region.y, power, width, height)
        return cls(tile.field, region, width, height, data, lod_factor)

    @classmethod
    def conform(cls, coarser: "Tile", lod_factor: int) -> "Tile":
        """
        Resample a coarser tile at lod_factor's density.

        Rendered, the result has the exact shape of `coarser` but as many
        vertices as the true tile at lod_factor, so the two can be blended
        vertex for vertex.
        """
        lod_factor = int(np.floor(lod_factor))
        if coarser.lod_factor <= lod_factor:
            raise ConformError(
                f"Tile.conform(): target tile has a lower or equal lod factor "
                f"{coarser.lod_factor} to us {lod_factor}"
            )
        lod_factor = _check_lod_factor("conform", lod_factor)

        region = coarser.region
        power = 2 ** lod_factor
        width = region.x_span // power
        height = region.y_span // power

        data = bilinear_resample(coarser.data, width, height)
        return cls(coarser.field, region, width, height, data, lod_factor)

    # Stitching

    def _check_same_size(self, caller: str, other: "Tile") -> None:
        if self.width != other.width or self.height != other.height:
            raise DimensionMismatchError(
                f"Tile.{caller}(): our [{self.width} {self.height}] and other "
                f"[{other.width} {other.height}] sizes don't match."
            )

    def stitch_left(self, left: "Tile") -> None:
        """Set our first column and left's last column to their average."""
        self._check_same_size("stitch_left", left)

        average = (left.data[:, -1].astype(np.float64) + self.data[:, 0]) * 0.5
        left.data[:, -1] = average
        self.data[:, 0] = average

    def stitch_top(self, top: "Tile") -> None:
        """Set our first row and top's last row to their average."""
        self._check_same_size("stitch_top", top)

        average = (top.data[-1, :].astype(np.float64) + self.data[0, :]) * 0.5
        top.data[-1, :] = average
        self.data[0, :] = average

    def stitch_corner(self, left: "Tile", top_left: "Tile", top: "Tile") -> None:
        """
        Average the sample shared by four tiles at our top-left corner.

        Run after the edge passes, which leave top_left's bottom-right
        sample out of step with the other three.
        """
        average = (
            float(left.data[0, -1])
            + float(top_left.data[-1, -1])
            + float(top.data[-1, 0])
            + float(self.data[0, 0])
        ) * 0.25

        left.data[0, -1] = average
        top_left.data[-1, -1] = average
        top.data[-1, 0] = average
        self.data[0, 0] = average

    # Blending and output

    def lerp(self, target: "Tile", factors: Sequence[float]) -> "Tile":
        """
        Blend towards a same-resolution tile with bilinear corner factors.

        factors are at (u, v) = (0, 0), (0, 1), (1, 0), (1, 1); u runs along
        columns, v along rows. All 0 gives our data, all 1 gives target's.
        The basis matches RenderableMesh.blended_positions, so software and
        render-side blending agree.
        """
        if target.region != self.region:
            raise DimensionMismatchError(
                f"Tile.lerp(): region's represented were not equal, us: {self.region}, "
                f"target: {target.region}"
            )
        self._check_same_size("lerp", target)
        if len(factors) != 4:
            raise DimensionMismatchError(
                f"Tile.lerp(): expected 4 corner factors, got {len(factors)}"
            )

        uv = grid_uvs(self.width, self.height).astype(np.float64)
        factor = corner_blend(uv[:, 0], uv[:, 1], factors).reshape(self.height, self.width)

        ours = self.data.astype(np.float64)
        theirs = target.data.astype(np.float64)
        data = (ours * (1.0 - factor) + theirs * factor).astype(np.float32)

        return Tile(self.field, self.region, self.width, self.height, data, self.lod_factor)

    def to_geometry(self, size: Vec3, origin: Vec3 = (0.0, 0.0, 0.0)) -> PlaneGeometry:
        """
        Plane geometry for our region, placed where it sits in the whole
        field. Pass the same size and origin for every tile of a field; the
        footprint depends only on the region, not on the sample count.
        """
        field = self.field
        our_x_size = size[0] * (self.region.x_span / field.width)
        our_z_size = size[2] * (self.region.y_span / field.height)

        our_x_offset = size[0] * (self.region.x / field.width)
        our_z_offset = size[2] * (self.region.y / field.height)

        return PlaneGeometry.from_heights(
            self.data,
            (our_x_size, size[1], our_z_size),
            (
                our_x_offset + origin[0],
                origin[1],
                our_z_offset + origin[2],
            ),
        )

    @property
    def nbytes(self) -> int:
        return self.data.nbytes
