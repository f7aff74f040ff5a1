"""
Interpolation kernels shared by the height field resamplers.
"""

import numpy as np
from scipy import ndimage


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (n must be >= 1)."""
    n = int(n)
    if n < 1:
        raise ValueError(f"next_power_of_two(): expected n >= 1, got {n}")
    return 1 << (n - 1).bit_length()


def _cubic(a0, a1, a2, a3, t):
    """Cubic convolution through four samples; t=0 gives a1, t=1 gives a2."""
    c3 = a3 - a2 - a0 + a1
    c2 = a0 - a1 - c3
    c1 = a2 - a0
    return ((c3 * t + c2) * t + c1) * t + a1


def bicubic(xf, yf, p):
    """
    Evaluate the 4x4 cubic kernel separably, x first then y.

    Args:
        xf, yf: Fractional position inside the sampling texel (scalars or arrays)
        p: Neighbourhood indexed p[row][col], each entry a scalar or an
           array broadcastable against xf/yf

    Returns:
        Interpolated value(s)
    """
    rows = [_cubic(p[i][0], p[i][1], p[i][2], p[i][3], xf) for i in range(4)]
    return _cubic(rows[0], rows[1], rows[2], rows[3], yf)


def bilinear_resample(data: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Bilinearly resample a 2D grid to width x height samples.

    Sample (x, y) reads the source at u = x * src_w / width,
    v = y * src_h / height. The +1 neighbour is clamped at the far edge
    rather than wrapped.
    """
    src_h, src_w = data.shape
    if width == 0 or height == 0:
        return np.zeros((height, width), dtype=np.float32)

    u = np.arange(width, dtype=np.float64) * (src_w / width)
    v = np.arange(height, dtype=np.float64) * (src_h / height)
    vv, uu = np.meshgrid(v, u, indexing="ij")

    out = ndimage.map_coordinates(
        data.astype(np.float64), [vv, uu], order=1, mode="nearest"
    )
    return out.astype(np.float32)
