"""
Range-violation errors raised by the tiling and LOD engine.

Every failure is synchronous and raised by the call that detects it.
Nothing is retried; pyramid construction aborts on the first error.
"""


class LodRangeError(ValueError):
    """Base class for all range violations."""


class DimensionMismatchError(LodRangeError):
    """Two buffers, tiles or grids that must agree in size do not."""


class LodFactorError(LodRangeError):
    """A level of detail lies outside the supported range."""


class ConformError(LodRangeError):
    """A conformal tile was requested from a source that is not coarser."""


class RegionBoundsError(LodRangeError):
    """A rectangle or region reaches outside the field it indexes."""
