"""
Per-region stack of tiles at every level of detail.
"""

from typing import List

from ..errors import LodFactorError
from .region import Region
from .tile import MAX_LOD_FACTOR, Tile


class TilePyramid:
    """
    Primary and conformal tiles for one region.

    levels[lod] is the region box-filtered to 1 / 2^lod resolution.
    conformal[lod] has levels[lod]'s resolution and levels[lod + 1]'s
    shape; it is only filled by build_conformal(), which must run after
    the edges of `levels` have been stitched against neighbouring regions.
    """

    def __init__(self, field, region: Region, lod_levels: int):
        if lod_levels < 1 or lod_levels > MAX_LOD_FACTOR + 1:
            raise LodFactorError(
                f"TilePyramid(): lod_levels must be in [1, {MAX_LOD_FACTOR + 1}], got {lod_levels}"
            )

        self.field = field
        self.region = region
        self.lod_levels = lod_levels

        base = Tile.from_region(field, region)
        self.levels: List[Tile] = [base]
        for lod in range(1, lod_levels):
            self.levels.append(Tile.downsample(base, lod))

        self.conformal: List[Tile] = []

    def build_conformal(self) -> List[Tile]:
        self.conformal = [
            Tile.conform(self.levels[lod + 1], lod)
            for lod in range(self.lod_levels - 1)
        ]
        return self.conformal

    def tile(self, lod: int) -> Tile:
        return self.levels[lod]

    @property
    def nbytes(self) -> int:
        return sum(t.nbytes for t in self.levels) + sum(t.nbytes for t in self.conformal)
