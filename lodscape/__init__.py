"""
lodscape: multi-resolution height field tiles with seamless LOD blending.
"""

# procgen first: heightfield pulls Region from engine, and engine reaches
# back into procgen.interpolation only
from .procgen import HeightField, build_height_field, next_power_of_two
from .engine import Landscape, Region, Tile, TilePyramid, oscillating_factors
from .config import LandscapeConfig, TerrainConfig
from .errors import (
    ConformError,
    DimensionMismatchError,
    LodFactorError,
    LodRangeError,
    RegionBoundsError,
)

__version__ = "0.1.0"

__all__ = [
    "HeightField",
    "build_height_field",
    "next_power_of_two",
    "Region",
    "Tile",
    "TilePyramid",
    "Landscape",
    "oscillating_factors",
    "LandscapeConfig",
    "TerrainConfig",
    "LodRangeError",
    "DimensionMismatchError",
    "LodFactorError",
    "ConformError",
    "RegionBoundsError",
]
