"""
Configuration models for height field generation and landscape assembly.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, Field

from .render.materials import DEFAULT_BASE_COLOR, DEFAULT_BLEND_COLORS


class TerrainConfig(BaseModel):
    """How the base height field is generated."""

    generation_size: int = Field(256, ge=1, description="Size the noise is evaluated at")
    field_size: int = Field(1024, ge=1, description="Size after bicubic upsampling")
    octaves: int = Field(4, ge=1, le=12, description="Noise octaves")
    lacunarity: float = Field(5.0, gt=0.0, description="Quality multiplier per octave")
    base_weight: float = Field(1.0 / 25.0, gt=0.0, description="Octave weight at quality 1")
    seed: Optional[int] = Field(None, description="Noise seed, None for a fresh one per run")
    fix_row_offset: bool = Field(
        False, description="Use a -2..1 row neighbourhood when upsampling instead of -2, -1, 0, 0"
    )


class LandscapeConfig(BaseModel):
    """How the field is tiled and turned into meshes."""

    x_splits: int = Field(16, ge=1, description="Cells across, rounded up to a power of two")
    y_splits: int = Field(16, ge=1, description="Cells down, rounded up to a power of two")
    lod_levels: int = Field(6, ge=1, le=11, description="Pyramid depth")
    world_size: Tuple[float, float, float] = Field(
        (1000.0, 25.0, 1000.0), description="Mesh extent in x, height scale in y, extent in z"
    )
    world_origin: Tuple[float, float, float] = Field((0.0, 0.0, 0.0))
    base_color: int = Field(DEFAULT_BASE_COLOR, ge=0, le=0xffffff)
    blend_colors: Tuple[int, int] = Field(DEFAULT_BLEND_COLORS)
    debug: bool = Field(False, description="Wireframe materials and construction diagnostics")
