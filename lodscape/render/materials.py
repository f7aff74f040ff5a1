"""
Material handles for plain and dual-plane (blended) meshes.
"""

from typing import List, Sequence, Tuple

from ..errors import DimensionMismatchError

Color = Tuple[float, float, float]

DEFAULT_BASE_COLOR = 0xff0055
DEFAULT_BLEND_COLORS = (0x1e2963, 0xbf2a7f)


def hex_to_rgb(value: int) -> Color:
    """0xRRGGBB -> (r, g, b) in [0, 1]."""
    return (
        ((value >> 16) & 0xff) / 255.0,
        ((value >> 8) & 0xff) / 255.0,
        (value & 0xff) / 255.0,
    )


class BasicMaterial:
    """Single colour, optionally wireframe."""

    def __init__(self, color: int = DEFAULT_BASE_COLOR, wireframe: bool = False):
        self.color = hex_to_rgb(color)
        self.wireframe = wireframe


class DualPlaneMaterial:
    """
    Uniform state for blending a dual-plane mesh.

    factor_1..factor_4 are the corner blend factors in the order
    (u, v) = (0, 0), (0, 1), (1, 0), (1, 1). color_a and color_b are the
    colours at blend factor 0 and 1. Uniforms are updated in place; the
    geometry is never touched.
    """

    def __init__(
        self,
        factors: Sequence[float] = (0.0, 0.0, 0.0, 0.0),
        colors: Sequence[int] = DEFAULT_BLEND_COLORS,
        wireframe: bool = False,
    ):
        self.uniforms = {
            "factor_1": 0.0,
            "factor_2": 0.0,
            "factor_3": 0.0,
            "factor_4": 0.0,
            "color_a": (0.0, 0.0, 0.0),
            "color_b": (0.0, 0.0, 0.0),
        }
        self.wireframe = wireframe
        self.set_factors(factors)
        self.set_colors(colors)

    def set_factors(self, factors: Sequence[float]) -> None:
        if len(factors) != 4:
            raise DimensionMismatchError(
                f"DualPlaneMaterial.set_factors(): expected 4 corner factors, got {len(factors)}"
            )
        for i, value in enumerate(factors):
            self.uniforms[f"factor_{i + 1}"] = float(value)

    def set_colors(self, colors: Sequence[int]) -> None:
        if len(colors) != 2:
            raise DimensionMismatchError(
                f"DualPlaneMaterial.set_colors(): expected 2 colours, got {len(colors)}"
            )
        self.uniforms["color_a"] = hex_to_rgb(colors[0])
        self.uniforms["color_b"] = hex_to_rgb(colors[1])

    @property
    def factors(self) -> List[float]:
        return [self.uniforms[f"factor_{i}"] for i in range(1, 5)]
