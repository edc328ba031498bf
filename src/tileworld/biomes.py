"""Biome classification: a precomputed grid of biome keys."""

from collections.abc import Sequence

import numpy as np
import structlog
from numpy.typing import NDArray

from .config import BiomeConfig, GradientStop, WorldGenConfig
from .noise import NoiseField

logger = structlog.get_logger()


def classify_biome_keys(
    values: NDArray[np.float64],
    stops: Sequence[GradientStop],
) -> NDArray[np.int32]:
    """Map noise values to discrete biome keys through a gradient.

    A value takes the key of the first stop whose position is at or above
    it; values above the last stop take the last stop's key.

    Args:
        values: Noise values in [0, 1).
        stops: Gradient stops sorted by position.

    Returns:
        Integer key array with the same shape as values.
    """
    if not stops:
        return np.zeros(np.shape(values), dtype=np.int32)

    positions = np.array([stop.position for stop in stops], dtype=np.float64)
    keys = np.array([stop.key for stop in stops], dtype=np.int32)

    band = np.searchsorted(positions, values, side="left")
    band = np.minimum(band, len(stops) - 1)
    return keys[band]


class BiomeMap:
    """Per-coordinate biome lookup over the world grid.

    Keys are stored in a (height, width) grid indexed [y, x]. Rows above
    the grid resolve to the top row.
    """

    def __init__(self, keys: NDArray[np.int32], biomes: Sequence[BiomeConfig]):
        if not biomes:
            raise ValueError("BiomeMap needs at least one biome")
        self.keys = keys
        self.biomes = tuple(biomes)

    @property
    def width(self) -> int:
        return self.keys.shape[1]

    @property
    def height(self) -> int:
        return self.keys.shape[0]

    def key_at(self, x: int, y: int) -> int:
        """Raw classification key at a coordinate."""
        return int(self.keys[self._row(y), x])

    def index_at(self, x: int, y: int) -> int:
        """Biome index at a coordinate, falling back to 0 for unknown keys."""
        key = self.key_at(x, y)
        if 0 <= key < len(self.biomes):
            return key
        return 0

    def biome_at(self, x: int, y: int) -> BiomeConfig:
        """Biome covering a coordinate. Never raises for unknown keys."""
        return self.biomes[self.index_at(x, y)]

    def index_grid(self) -> NDArray[np.int32]:
        """Resolved biome index per cell, with the fallback applied."""
        valid = (self.keys >= 0) & (self.keys < len(self.biomes))
        return np.where(valid, self.keys, 0).astype(np.int32)

    def _row(self, y: int) -> int:
        return min(y, self.height - 1)


def build_biome_map(noise: NoiseField, config: WorldGenConfig) -> BiomeMap:
    """Sample the global biome field and classify every coordinate.

    Args:
        noise: Seeded noise sampler.
        config: World generation configuration.

    Returns:
        BiomeMap covering the world grid.
    """
    size = config.world_size
    values = noise.grid(size, size, config.biome_frequency)
    keys = classify_biome_keys(values, config.biome_gradient)
    biome_map = BiomeMap(keys, config.biomes)

    counts = np.bincount(biome_map.index_grid().ravel(), minlength=len(config.biomes))
    logger.debug(
        "biome_map_built",
        size=size,
        coverage={b.name: int(c) for b, c in zip(config.biomes, counts)},
    )
    return biome_map
