"""
Coherent gradient noise for height field generation.

Numpy implementation of improved Perlin noise in three dimensions.
The permutation table is drawn from a seeded generator so a fixed seed
always reproduces the same field.
"""

import numpy as np
from typing import Optional


def fade(t: np.ndarray) -> np.ndarray:
    """Quintic fade curve (6t^5 - 15t^4 + 10t^3)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(t, a, b):
    return a + t * (b - a)


def grad(hash_value: np.ndarray, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    """Dot product of the offset with one of 12 gradient directions."""
    h = hash_value & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 4, y, np.where((h == 12) | (h == 14), x, z))
    return np.where((h & 1) == 0, u, -u) + np.where((h & 2) == 0, v, -v)


class PerlinNoise:
    """
    Improved Perlin noise.

    Values are roughly in [-1, 1] and exactly 0 on integer lattice points.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        if rng is None:
            rng = np.random.default_rng(seed)
        perm = rng.permutation(256).astype(np.int64)
        self.perm = np.concatenate([perm, perm])

    def noise(self, x, y, z) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)
        x, y, z = np.broadcast_arrays(x, y, z)

        fx = np.floor(x)
        fy = np.floor(y)
        fz = np.floor(z)

        X = fx.astype(np.int64) & 255
        Y = fy.astype(np.int64) & 255
        Z = fz.astype(np.int64) & 255

        x = x - fx
        y = y - fy
        z = z - fz

        u = fade(x)
        v = fade(y)
        w = fade(z)

        p = self.perm
        A = p[X] + Y
        AA = p[A] + Z
        AB = p[A + 1] + Z
        B = p[X + 1] + Y
        BA = p[B] + Z
        BB = p[B + 1] + Z

        return lerp(
            w,
            lerp(
                v,
                lerp(u, grad(p[AA], x, y, z), grad(p[BA], x - 1, y, z)),
                lerp(u, grad(p[AB], x, y - 1, z), grad(p[BB], x - 1, y - 1, z)),
            ),
            lerp(
                v,
                lerp(u, grad(p[AA + 1], x, y, z - 1), grad(p[BA + 1], x - 1, y, z - 1)),
                lerp(u, grad(p[AB + 1], x, y - 1, z - 1), grad(p[BB + 1], x - 1, y - 1, z - 1)),
            ),
        )
