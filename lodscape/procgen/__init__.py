"""
Height field generation.

- Improved Perlin noise summed over octaves
- Bicubic upsampling from a coarser field
- Block queries used by the tile downsampler
"""

from .interpolation import bicubic, bilinear_resample, next_power_of_two
from .noise import PerlinNoise
from .heightfield import HeightField, build_height_field

__all__ = [
    "HeightField",
    "PerlinNoise",
    "bicubic",
    "bilinear_resample",
    "build_height_field",
    "next_power_of_two",
]
