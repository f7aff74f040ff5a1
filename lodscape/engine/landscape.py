"""
Multi-resolution landscape assembly.

Splits a height field into a grid of cells, builds a stitched LOD pyramid
per cell plus the conformal tiles used to blend between neighbouring
levels, and turns both into meshes for the renderer.
"""

import math
import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import LandscapeConfig
from ..errors import DimensionMismatchError, LodFactorError
from ..procgen.interpolation import next_power_of_two
from ..render import (
    BasicMaterial,
    DualPlaneGeometry,
    DualPlaneMaterial,
    PlaneGeometry,
    RenderableMesh,
)
from .arena import LodArena
from .pyramid import TilePyramid
from .tile import MAX_LOD_FACTOR, Tile


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class Landscape:
    """
    LOD meshes for a whole height field.

    Like a mip chain, the downsampled levels cost roughly one third extra
    over the full-resolution cells. The conformal tiles used for blending
    add about as much again as the primary pyramid.

    Every cell keeps, per lod: the primary tile, its plane geometry and a
    plain mesh; per lod below the coarsest: a conformal tile (that lod's
    resolution, the next lod's shape) and its geometry; and a pre-built
    dual-plane mesh whose blend uniforms are rewritten each frame by
    blend_shader_update().
    """

    def __init__(self, field, config: Optional[LandscapeConfig] = None):
        if config is None:
            config = LandscapeConfig()

        self.field = field
        self.config = config
        self.lod_levels = config.lod_levels
        self.x_splits = next_power_of_two(config.x_splits)
        self.y_splits = next_power_of_two(config.y_splits)
        self.size = tuple(config.world_size)
        self.origin = tuple(config.world_origin)
        self.debug = config.debug

        self.material = BasicMaterial(config.base_color, wireframe=self.debug)
        self.master_tile = Tile.master(field)

        self._check_levels()
        self._construct_lod_data()

    def _log(self, message: str) -> None:
        if self.debug:
            print(message)

    def _check_levels(self) -> None:
        if self.lod_levels < 1 or self.lod_levels > MAX_LOD_FACTOR + 1:
            raise LodFactorError(
                f"Landscape(): lod_levels must be in [1, {MAX_LOD_FACTOR + 1}], got {self.lod_levels}"
            )

        # The coarsest level still needs a 2 x 2 vertex grid per cell
        power = 2 ** (self.lod_levels - 1)
        cell_width = (self.field.width // self.x_splits) // power
        cell_height = (self.field.height // self.y_splits) // power
        if cell_width < 2 or cell_height < 2:
            raise LodFactorError(
                f"Landscape(): {self.lod_levels} levels over {self.x_splits} x {self.y_splits} "
                f"cells of a {self.field.width} x {self.field.height} field leaves "
                f"{cell_width} x {cell_height} tiles at the coarsest level"
            )

    def _construct_lod_data(self) -> None:
        """
        Build every level of every cell. Runs once; after this only the
        blend uniforms of the pre-built shader meshes change.
        """
        rows, cols, depth = self.y_splits, self.x_splits, self.lod_levels

        regions = self.field.region().subdivide(cols, rows)

        self.pyramids: List[TilePyramid] = [
            TilePyramid(self.field, region, depth) for region in regions
        ]

        self.tiles: LodArena[Tile] = LodArena(rows, cols, depth)
        for (row, col), pyramid in zip(self.tiles.cells(), self.pyramids):
            for lod, tile in enumerate(pyramid.levels):
                self.tiles.set(row, col, lod, tile)

        self._stitch()
        self._log(f"Landscape._construct_lod_data(): stitched {rows * cols} cells")

        # One fewer level: the coarsest has nothing coarser to conform to
        self.conformal_tiles: LodArena[Tile] = LodArena(rows, cols, depth - 1)
        for (row, col), pyramid in zip(self.tiles.cells(), self.pyramids):
            for lod, tile in enumerate(pyramid.build_conformal()):
                self.conformal_tiles.set(row, col, lod, tile)

        self.geometry: LodArena[PlaneGeometry] = LodArena(rows, cols, depth)
        self.meshes: LodArena[RenderableMesh] = LodArena(rows, cols, depth)
        self.conformal_geometry: LodArena[PlaneGeometry] = LodArena(rows, cols, depth - 1)
        self.shader_meshes: LodArena[RenderableMesh] = LodArena(rows, cols, depth)

        for row, col in self.tiles.cells():
            for lod in range(depth):
                geometry = self.tiles.get(row, col, lod).to_geometry(self.size, self.origin)
                self.geometry.set(row, col, lod, geometry)
                self.meshes.set(row, col, lod, RenderableMesh(geometry, self.material))

            for lod in range(depth - 1):
                self.conformal_geometry.set(
                    row, col, lod,
                    self.conformal_tiles.get(row, col, lod).to_geometry(self.size, self.origin),
                )

            for lod in range(depth):
                dual = DualPlaneGeometry.combine(
                    self.geometry.get(row, col, lod),
                    self._blend_target(self.conformal_geometry, self.geometry, row, col, lod),
                )
                material = DualPlaneMaterial(
                    (0.0, 0.0, 0.0, 0.0), self.config.blend_colors, wireframe=self.debug
                )
                self.shader_meshes.set(row, col, lod, RenderableMesh(dual, material))

        self._log(
            f"Landscape._construct_lod_data(): {self.x_splits} by {self.y_splits} blocks, "
            f"{self.lod_levels} deep."
        )

    def _stitch(self) -> None:
        """
        Make shared edges identical at every lod above 0. Lod 0 tiles are
        straight copies of the field and are left alone.
        """
        tiles = self.tiles
        for row, col in tiles.cells():
            for lod in range(1, self.lod_levels):
                tile = tiles.get(row, col, lod)

                if col > 0:
                    tile.stitch_left(tiles.get(row, col - 1, lod))

                if row > 0:
                    tile.stitch_top(tiles.get(row - 1, col, lod))

                if col > 0 and row > 0:
                    tile.stitch_corner(
                        tiles.get(row, col - 1, lod),
                        tiles.get(row - 1, col - 1, lod),
                        tiles.get(row - 1, col, lod),
                    )

    def _blend_target(self, conformal: LodArena, primary: LodArena, row: int, col: int, lod: int):
        """Conformal entry at lod, or the primary entry itself at the coarsest level."""
        if lod < self.lod_levels - 1:
            return conformal.get(row, col, lod)
        return primary.get(row, col, lod)

    # Selection

    def _check_factor_grid(self, caller: str, factor_grid) -> np.ndarray:
        rows, cols = self.y_splits + 1, self.x_splits + 1

        try:
            grid = np.asarray(factor_grid, dtype=np.float64)
        except ValueError as e:
            raise DimensionMismatchError(
                f"Landscape.{caller}(): factors array is ragged, should be {rows} rows of {cols}"
            ) from e

        if grid.shape != (rows, cols):
            raise DimensionMismatchError(
                f"Landscape.{caller}(): factors array is the wrong size, was {grid.shape}, "
                f"should be {rows} rows of {cols}"
            )

        max_lod = self.lod_levels - 1
        if not np.all(np.isfinite(grid)) or grid.min() < 0.0 or grid.max() > max_lod:
            raise LodFactorError(
                f"Landscape.{caller}(): factors must lie in [0, {max_lod}], "
                f"got [{grid.min()}, {grid.max()}]"
            )
        return grid

    @staticmethod
    def select(corners: Sequence[float]) -> Tuple[int, int, List[float]]:
        """
        Levels and blend factors for one cell.

        corners are the factors at (u, v) = (0, 0), (0, 1), (1, 0), (1, 1).
        Returns (upper, lower, alphas): upper = round(min) is the finer
        level drawn, lower = round(max) the coarsest level touched, and
        alphas the fractional part of each corner.
        """
        upper = _round_half_up(min(corners))
        lower = _round_half_up(max(corners))
        alphas = [float(c - math.floor(c)) for c in corners]
        return upper, lower, alphas

    def _cell_selections(self, caller: str, factor_grid):
        grid = self._check_factor_grid(caller, factor_grid)
        for row, col in self.tiles.cells():
            corners = (
                grid[row, col],
                grid[row + 1, col],
                grid[row, col + 1],
                grid[row + 1, col + 1],
            )
            upper, _, alphas = self.select(corners)
            yield row, col, upper, alphas

    # Access and rendering

    def meshes_at_lod(self, lod: int) -> List[RenderableMesh]:
        """One plain mesh per cell at a fixed level, row-major."""
        if lod < 0 or lod >= self.lod_levels:
            raise LodFactorError(
                f"Landscape.meshes_at_lod(): lod {lod} outside [0, {self.lod_levels})"
            )
        return self.meshes.level(lod)

    def blend_software(self, factor_grid) -> List[RenderableMesh]:
        """
        Blend on the CPU.

        factor_grid is (y_splits + 1) x (x_splits + 1) lod values, one per
        cell corner. Each cell's finer tile is lerped towards its conformal
        tile and fresh geometry is built every call.
        """
        out = []
        for row, col, upper, alphas in self._cell_selections("blend_software", factor_grid):
            tile = self.tiles.get(row, col, upper)
            target = self._blend_target(self.conformal_tiles, self.tiles, row, col, upper)

            blended = tile.lerp(target, alphas)
            out.append(RenderableMesh(blended.to_geometry(self.size, self.origin), self.material))

        return out

    def blend_shader_regenerate(self, factor_grid) -> List[RenderableMesh]:
        """Same selection as blend_software, but emits fresh dual-plane meshes for render-side blending."""
        out = []
        for row, col, upper, alphas in self._cell_selections("blend_shader_regenerate", factor_grid):
            tile = self.tiles.get(row, col, upper)
            target = self._blend_target(self.conformal_tiles, self.tiles, row, col, upper)

            geometry = DualPlaneGeometry.combine(
                tile.to_geometry(self.size, self.origin),
                target.to_geometry(self.size, self.origin),
            )
            material = DualPlaneMaterial(alphas, self.config.blend_colors, wireframe=self.debug)
            out.append(RenderableMesh(geometry, material))

        return out

    def blend_shader_update(self, factor_grid) -> List[RenderableMesh]:
        """
        Same selection again, but reuse the pre-built dual-plane meshes and
        only rewrite their blend uniforms. Nothing is allocated per frame.
        """
        out = []
        for row, col, upper, alphas in self._cell_selections("blend_shader_update", factor_grid):
            mesh = self.shader_meshes.get(row, col, upper)
            mesh.material.set_factors(alphas)
            mesh.material.set_colors(self.config.blend_colors)
            out.append(mesh)

        return out

    def field_mesh(self) -> RenderableMesh:
        """The whole field as one full-resolution mesh."""
        return RenderableMesh(self.master_tile.to_geometry(self.size, self.origin), self.material)

    def memory_report(self) -> Dict[str, float]:
        field_bytes = self.field.map.nbytes
        base_bytes = sum(t.nbytes for t in self.tiles.level(0))
        primary_bytes = sum(t.nbytes for t in self.tiles)
        conformal_bytes = sum(t.nbytes for t in self.conformal_tiles)
        geometry_bytes = sum(g.nbytes for g in self.geometry) + sum(
            g.nbytes for g in self.conformal_geometry
        )

        return {
            "field_bytes": field_bytes,
            "primary_bytes": primary_bytes,
            "conformal_bytes": conformal_bytes,
            "geometry_bytes": geometry_bytes,
            "downsampled_ratio": (primary_bytes - base_bytes) / field_bytes,
            "conformal_ratio": conformal_bytes / field_bytes,
        }
