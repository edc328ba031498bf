"""Seeded 2D gradient noise.

Classic Perlin noise over Ken Perlin's reference permutation. The world
seed enters only as a coordinate offset, so one permutation serves every
field and two fields with the same seed and frequency are identical.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

_PERMUTATION = np.array([
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
    140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148,
    247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32,
    57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175,
    74, 165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
    60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
    65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
    200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64,
    52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212,
    207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213,
    119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9,
    129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104,
    218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241,
    81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157,
    184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93,
    222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
], dtype=np.int64)

# Doubled so corner lookups never need wrapping
_PERM = np.concatenate([_PERMUTATION, _PERMUTATION])

_GRADIENTS = np.array([
    [1.0, 1.0], [-1.0, 1.0], [1.0, -1.0], [-1.0, -1.0],
    [1.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [0.0, -1.0],
])

# Largest float below 1.0; keeps samples in [0, 1)
_UNIT_MAX = np.nextafter(1.0, 0.0)


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Quintic fade curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a: NDArray[np.float64], b: NDArray[np.float64], t: NDArray[np.float64]) -> NDArray[np.float64]:
    return a + t * (b - a)


def _gradient_dot(
    hashed: NDArray[np.int64], x: NDArray[np.float64], y: NDArray[np.float64]
) -> NDArray[np.float64]:
    g = _GRADIENTS[hashed & 7]
    return g[..., 0] * x + g[..., 1] * y


def perlin_2d(x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
    """Evaluate raw 2D Perlin noise.

    Args:
        x: X coordinates (any shape, broadcast against y).
        y: Y coordinates.

    Returns:
        Noise values in [-1, 1], zero on every integer lattice point.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    x0 = np.floor(x)
    y0 = np.floor(y)
    xf = x - x0
    yf = y - y0
    xi = x0.astype(np.int64) & 255
    yi = y0.astype(np.int64) & 255

    u = _fade(xf)
    v = _fade(yf)

    a = _PERM[xi]
    b = _PERM[xi + 1]
    n00 = _gradient_dot(_PERM[a + yi], xf, yf)
    n01 = _gradient_dot(_PERM[a + yi + 1], xf, yf - 1.0)
    n10 = _gradient_dot(_PERM[b + yi], xf - 1.0, yf)
    n11 = _gradient_dot(_PERM[b + yi + 1], xf - 1.0, yf - 1.0)

    return _lerp(_lerp(n00, n10, u), _lerp(n01, n11, u), v)


class NoiseField:
    """Deterministic 2D noise sampler offset by a world seed."""

    def __init__(self, seed: int | float):
        self.seed = seed

    def sample(self, x: float, y: float, frequency: float) -> float:
        """Sample the field at a single coordinate.

        Args:
            x: Tile x coordinate.
            y: Tile y coordinate.
            frequency: Scale applied after the seed offset.

        Returns:
            Noise value in [0, 1).
        """
        return float(self.sample_grid(np.asarray(x), np.asarray(y), frequency))

    def sample_grid(
        self, xs: ArrayLike, ys: ArrayLike, frequency: float
    ) -> NDArray[np.float64]:
        """Sample the field at many coordinates at once.

        Evaluates noise at ((x + seed) * frequency, (y + seed) * frequency).
        A zero frequency yields a constant field.

        Args:
            xs: X coordinates.
            ys: Y coordinates, broadcast against xs.
            frequency: Scale applied after the seed offset.

        Returns:
            Array of noise values in [0, 1).
        """
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        raw = perlin_2d((xs + self.seed) * frequency, (ys + self.seed) * frequency)
        return np.clip((raw + 1.0) * 0.5, 0.0, _UNIT_MAX)

    def grid(self, width: int, height: int, frequency: float) -> NDArray[np.float64]:
        """Sample a full (height, width) grid indexed [y, x]."""
        ys, xs = np.meshgrid(np.arange(height), np.arange(width), indexing="ij")
        return self.sample_grid(xs, ys, frequency)
