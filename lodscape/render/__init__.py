"""
In-memory rendering collaborator.

Holds vertex buffers and uniform state for whatever renderer consumes
them. Nothing here draws.
"""

from .geometry import DualPlaneGeometry, PlaneGeometry, grid_indices, grid_normals, grid_uvs
from .materials import BasicMaterial, DualPlaneMaterial, hex_to_rgb
from .mesh import RenderableMesh, corner_blend

__all__ = [
    "PlaneGeometry",
    "DualPlaneGeometry",
    "BasicMaterial",
    "DualPlaneMaterial",
    "RenderableMesh",
    "corner_blend",
    "hex_to_rgb",
    "grid_indices",
    "grid_normals",
    "grid_uvs",
]
