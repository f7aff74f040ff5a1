"""
Tiling and LOD pyramid engine.

Partitions a height field into regions, builds stitched LOD tiles per
region, conformal tiles for blending between levels, and the meshes the
renderer consumes.
"""

from .region import Region
from .tile import Tile, TileStorage
from .arena import LodArena
from .pyramid import TilePyramid
from .landscape import Landscape
from .factors import oscillating_factors

__all__ = [
    "Region",
    "Tile",
    "TileStorage",
    "LodArena",
    "TilePyramid",
    "Landscape",
    "oscillating_factors",
]
