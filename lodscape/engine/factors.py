"""
Synthetic lod factor fields.

Stands in for a camera-distance policy: a smooth wave that sweeps across
the grid over time so every transition between levels gets exercised.
"""

import numpy as np


def oscillating_factors(t_ms: float, x_splits: int, y_splits: int, max_lod: float) -> np.ndarray:
    """
    (y_splits + 1) x (x_splits + 1) lod values at time t_ms, clamped to
    [0, max_lod].
    """
    t = (t_ms / 1000.0) * (np.pi / 2.0) * 0.25

    x = np.arange(x_splits + 1, dtype=np.float64) / x_splits
    y = np.arange(y_splits + 1, dtype=np.float64) / y_splits
    yy, xx = np.meshgrid(y, x, indexing="ij")

    f = np.sin((xx + t) * np.pi / 2.0) * 2.0 + np.cos((yy + t) * np.pi / 2.0) * 2.0
    return np.clip(f, 0.0, max_lod)
