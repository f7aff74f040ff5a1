"""
Renderable mesh: a geometry paired with a material.
"""

import numpy as np
from typing import Union

from .geometry import DualPlaneGeometry, PlaneGeometry
from .materials import BasicMaterial, DualPlaneMaterial


def corner_blend(u: np.ndarray, v: np.ndarray, factors) -> np.ndarray:
    """
    Bilinear blend of four corner factors ordered f(0,0), f(0,1), f(1,0), f(1,1).
    """
    f1, f2, f3, f4 = factors
    return (
        (1.0 - u) * (1.0 - v) * f1
        + u * (1.0 - v) * f3
        + (1.0 - u) * v * f2
        + u * v * f4
    )


class RenderableMesh:
    """What the renderer draws. Holds references, never copies buffers."""

    def __init__(
        self,
        geometry: Union[PlaneGeometry, DualPlaneGeometry],
        material: Union[BasicMaterial, DualPlaneMaterial],
    ):
        self.geometry = geometry
        self.material = material

    @property
    def is_blended(self) -> bool:
        return isinstance(self.geometry, DualPlaneGeometry) and isinstance(
            self.material, DualPlaneMaterial
        )

    def blended_positions(self) -> np.ndarray:
        """
        Vertex positions after the per-vertex blend the vertex stage applies.

        Plain meshes return their positions unchanged.
        """
        if not self.is_blended:
            return self.geometry.positions

        attributes = self.geometry.attributes
        uv = attributes["uv"].astype(np.float64)
        factor = corner_blend(uv[:, 0], uv[:, 1], self.material.factors)[:, None]

        base = attributes["position"].astype(np.float64)
        target = attributes["blend_position"].astype(np.float64)
        return (base * (1.0 - factor) + target * factor).astype(np.float32)
