"""
Power-of-two height field.

Holds the full-resolution elevation samples the LOD pyramid is built from.
The field is generated once (fractal noise at a small size, then bicubic
upsampling) and treated as read-only afterwards.
"""

import numpy as np
from typing import Optional

from ..engine.region import Region
from ..errors import RegionBoundsError
from .interpolation import bicubic, next_power_of_two
from .noise import PerlinNoise


class HeightField:
    """
    Flat row-major buffer of width * height float32 samples.

    Both sizes are rounded up to a power of two so wraparound indexing can
    use a bit mask. `map` has shape (height, width) and is C-contiguous.
    """

    def __init__(self, width: int, height: int):
        self.width = next_power_of_two(width)
        self.height = next_power_of_two(height)

        self.width_mask = self.width - 1
        self.height_mask = self.height - 1

        self.count = self.width * self.height
        self.map = np.zeros((self.height, self.width), dtype=np.float32)

    @classmethod
    def from_array(cls, data) -> "HeightField":
        """Wrap existing samples (shape (height, width), both powers of two)."""
        data = np.asarray(data, dtype=np.float32)
        if data.ndim != 2:
            raise ValueError(f"HeightField.from_array(): expected 2D data, got shape {data.shape}")

        height, width = data.shape
        field = cls(width, height)
        if (field.width, field.height) != (width, height):
            raise ValueError(
                f"HeightField.from_array(): sizes must be powers of two, got {width} x {height}"
            )
        field.map[...] = data
        return field

    # Generators

    def generate(
        self,
        seed: Optional[int] = None,
        octaves: int = 4,
        lacunarity: float = 5.0,
        base_weight: float = 1.0 / 25.0,
    ) -> None:
        """
        Add fractal noise to every sample.

        Each octave samples 3D noise at (x / quality, y / quality, z) and
        adds it weighted by quality * base_weight, quality growing by
        `lacunarity` per octave.

        Args:
            seed: Seed for the permutation table and z slice; None draws
                  fresh entropy
            octaves: Number of octaves to sum
            lacunarity: Quality multiplier per octave
            base_weight: Weight applied at quality 1
        """
        rng = np.random.default_rng(seed)
        perlin = PerlinNoise(rng=rng)
        z = rng.random()

        xs = np.arange(self.width, dtype=np.float64)
        ys = np.arange(self.height, dtype=np.float64)
        X, Y = np.meshgrid(xs, ys, indexing="ij")

        # Samples are written x-major: noise(x, y) lands at flat index
        # x * height + y, so a square field holds it at map[x, y]
        accumulated = self.map.astype(np.float64).reshape(self.width, self.height)
        quality = 1.0
        for _ in range(octaves):
            accumulated += perlin.noise(X / quality, Y / quality, z) * quality * base_weight
            quality *= lacunarity

        self.map[...] = accumulated.reshape(self.height, self.width)

    def upsample_from(self, source: "HeightField", fix_row_offset: bool = False) -> None:
        """
        Fill this field with a bicubic upsampling of a smaller field.

        The source is treated as toroidal: the 4x4 neighbourhood around
        each sample point wraps with the source masks. Column offsets are
        -2..1. Row offsets are -2, -1, 0, 0 (the last row repeats the
        third) unless `fix_row_offset` is set, which uses -2..1.

        Raises:
            RegionBoundsError: If the source is larger on either axis
        """
        if source.width > self.width:
            raise RegionBoundsError(
                f"HeightField.upsample_from(): source width {source.width} > our width {self.width}"
            )
        if source.height > self.height:
            raise RegionBoundsError(
                f"HeightField.upsample_from(): source height {source.height} > our height {self.height}"
            )

        sample_x = np.arange(self.width, dtype=np.float64) * (source.width / self.width)
        sample_y = np.arange(self.height, dtype=np.float64) * (source.height / self.height)

        index_x = np.floor(sample_x).astype(np.int64)
        index_y = np.floor(sample_y).astype(np.int64)
        frac_x = sample_x - index_x
        frac_y = sample_y - index_y

        IY, IX = np.meshgrid(index_y, index_x, indexing="ij")
        FY, FX = np.meshgrid(frac_y, frac_x, indexing="ij")

        col_offsets = (-2, -1, 0, 1)
        row_offsets = (-2, -1, 0, 1) if fix_row_offset else (-2, -1, 0, 0)

        src = source.map.astype(np.float64)
        neighbourhood = [
            [
                src[(IY + dy) & source.height_mask, (IX + dx) & source.width_mask]
                for dx in col_offsets
            ]
            for dy in row_offsets
        ]

        self.map[...] = bicubic(FX, FY, neighbourhood)

    # Queries

    def _check_rect(self, caller: str, x: int, y: int, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise RegionBoundsError(
                f"HeightField.{caller}(): negative size {width} x {height}"
            )
        if x < 0 or x + width > self.width:
            raise RegionBoundsError(
                f"HeightField.{caller}(): x coords out of range, we're {self.width}, "
                f"input was {x} and {width} -> {x + width}"
            )
        if y < 0 or y + height > self.height:
            raise RegionBoundsError(
                f"HeightField.{caller}(): y coords out of range, we're {self.height}, "
                f"input was {y} and {height} -> {y + height}"
            )

    def sum_block(self, x: int, y: int, width: int, height: int) -> float:
        """Sum of the samples in the width x height rectangle at (x, y)."""
        self._check_rect("sum_block", x, y, width, height)
        return float(self.map[y:y + height, x:x + width].sum(dtype=np.float64))

    def box_means(self, x: int, y: int, power: int, out_width: int, out_height: int) -> np.ndarray:
        """
        Mean of each power x power block in an out_width x out_height grid
        of blocks starting at (x, y). Equivalent to calling sum_block per
        block and scaling by 1 / power^2.
        """
        self._check_rect("box_means", x, y, out_width * power, out_height * power)

        block = self.map[y:y + out_height * power, x:x + out_width * power].astype(np.float64)
        sums = block.reshape(out_height, power, out_width, power).sum(axis=(1, 3))
        return (sums * (1.0 / (power * power))).astype(np.float32)

    def extract_region(self, region: Region) -> np.ndarray:
        """Fresh contiguous copy of the region's samples, shape (y_span, x_span)."""
        self._check_rect("extract_region", region.x, region.y, region.x_span, region.y_span)
        return self.map[
            region.y:region.y + region.y_span,
            region.x:region.x + region.x_span,
        ].copy()

    def region(self) -> Region:
        """Region covering the whole field."""
        return Region(0, 0, self.width, self.height)

    def stats(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "min": float(self.map.min()),
            "max": float(self.map.max()),
            "mean": float(self.map.mean()),
        }


def build_height_field(config) -> HeightField:
    """
    Generate noise at config.generation_size and upsample it to
    config.field_size (a TerrainConfig).
    """
    source = HeightField(config.generation_size, config.generation_size)
    source.generate(
        seed=config.seed,
        octaves=config.octaves,
        lacunarity=config.lacunarity,
        base_weight=config.base_weight,
    )

    field = HeightField(config.field_size, config.field_size)
    field.upsample_from(source, fix_row_offset=config.fix_row_offset)
    return field
