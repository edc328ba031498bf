"""Per-column terrain surface heights."""

import math

import numpy as np
import structlog
from numpy.typing import NDArray

from .biomes import BiomeMap
from .config import BiomeConfig
from .noise import NoiseField

logger = structlog.get_logger()


class HeightProfile:
    """Surface height of every column plus the biome that shaped it.

    Heights are real numbers. A column holds rows y = 0, 1, ... while
    y < height, so a fractional height rounds up to whole rows.
    """

    def __init__(self, heights: NDArray[np.float64], column_biomes: list[BiomeConfig]):
        self.heights = heights
        self.column_biomes = column_biomes

    def __len__(self) -> int:
        return len(self.heights)

    def height_of(self, x: int) -> float:
        return float(self.heights[x])

    def column_biome(self, x: int) -> BiomeConfig:
        """Biome sampled at the bottom row of the column."""
        return self.column_biomes[x]

    def row_count(self, x: int) -> int:
        """Number of rows below the surface in a column."""
        height = self.height_of(x)
        if height <= 0:
            return 0
        return math.ceil(height)

    def top_row(self, x: int) -> int | None:
        """Topmost row of a column, or None for an empty column."""
        rows = self.row_count(x)
        return rows - 1 if rows else None

    @property
    def max_rows(self) -> int:
        return max((self.row_count(x) for x in range(len(self))), default=0)


def make_height_profile(
    noise: NoiseField,
    biome_map: BiomeMap,
    height_addition: float,
) -> HeightProfile:
    """Compute the surface height of every column.

    The column biome comes from row 0. The noise is sampled at row 0 too,
    so the vertical input is just the seed offset and height varies with x
    only.

    Args:
        noise: Seeded noise sampler.
        biome_map: Precomputed biome map.
        height_addition: Base height added to every column.

    Returns:
        HeightProfile for every column of the biome map.
    """
    width = biome_map.width
    heights = np.zeros(width, dtype=np.float64)
    column_biomes: list[BiomeConfig] = []

    for x in range(width):
        biome = biome_map.biome_at(x, 0)
        column_biomes.append(biome)
        heights[x] = (
            noise.sample(x, 0, biome.terrain_freq) * biome.height_multiplier
            + height_addition
        )

    profile = HeightProfile(heights, column_biomes)
    if width:
        logger.debug(
            "height_profile_built",
            min_height=round(float(heights.min()), 2),
            max_height=round(float(heights.max()), 2),
        )
    return profile
