"""
Rectangular index ranges into a height field.
"""

import math
from typing import List

from ..errors import DimensionMismatchError


class Region:
    """
    In-plane index rectangle (x, y, x_span, y_span) into a height field's
    sample grid. Components are floor-truncated on construction. Regions
    are immutable and compare component-wise.
    """

    __slots__ = ("_x", "_y", "_x_span", "_y_span")

    def __init__(self, x: float, y: float, x_span: float, y_span: float):
        object.__setattr__(self, "_x", math.floor(x))
        object.__setattr__(self, "_y", math.floor(y))
        object.__setattr__(self, "_x_span", math.floor(x_span))
        object.__setattr__(self, "_y_span", math.floor(y_span))

    def __setattr__(self, name, value):
        raise AttributeError("Region is immutable")

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def x_span(self) -> int:
        return self._x_span

    @property
    def y_span(self) -> int:
        return self._y_span

    def as_tuple(self):
        return (self._x, self._y, self._x_span, self._y_span)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Region):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __repr__(self) -> str:
        return f"Region(x={self._x}, y={self._y}, x_span={self._x_span}, y_span={self._y_span})"

    def subdivide(self, x_splits: int, y_splits: int) -> List["Region"]:
        """
        Split into x_splits * y_splits children, row-major (y outer, x inner).

        Steps are real-valued and every child is floor-truncated, so when
        the span does not divide evenly the far row/column leaves a
        truncation gap. That gap is kept as-is.
        """
        if x_splits < 1 or y_splits < 1:
            raise DimensionMismatchError(
                f"Region.subdivide(): split counts must be >= 1, got {x_splits} x {y_splits}"
            )

        u_step = self._x_span / x_splits
        v_step = self._y_span / y_splits

        regions = []
        v = float(self._y)
        for _ in range(y_splits):
            u = float(self._x)
            for _ in range(x_splits):
                regions.append(Region(u, v, u_step, v_step))
                u += u_step
            v += v_step

        return regions

    def subdivide_grid(self, x_splits: int, y_splits: int) -> List[List["Region"]]:
        """Same as subdivide(), ranked [y][x]."""
        flat = self.subdivide(x_splits, y_splits)
        return [flat[row * x_splits:(row + 1) * x_splits] for row in range(y_splits)]
