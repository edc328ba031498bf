"""Biome-aware boolean masks for caves and ores.

Each cell thresholds the noise field using the parameters of the biome
covering that cell, so a mask is stitched together from one noise grid
per biome rather than being one mask per biome.
"""

import numpy as np
import structlog
from numpy.typing import NDArray
from scipy import ndimage

from .biomes import BiomeMap
from .config import OreConfig
from .exceptions import InvalidConfigError
from .heights import HeightProfile
from .noise import NoiseField

logger = structlog.get_logger()


class CaveMask:
    """Solid/open grid: True where ground stays, False where a cave opens."""

    def __init__(self, solid: NDArray[np.bool_]):
        self.solid = solid

    def is_solid(self, x: int, y: int) -> bool:
        return bool(self.solid[min(y, self.solid.shape[0] - 1), x])

    @property
    def open_fraction(self) -> float:
        """Fraction of the grid carved out as cave."""
        return float(1.0 - np.mean(self.solid))


class OreMasks:
    """One presence grid per ore slot, resolved against the biome map."""

    def __init__(self, masks: list[NDArray[np.bool_]], biome_map: BiomeMap):
        self.masks = masks
        self.biome_map = biome_map

    @property
    def slot_count(self) -> int:
        return len(self.masks)

    def is_present(self, slot: int, x: int, y: int) -> bool:
        """Whether the slot's mask is set at a coordinate.

        Raises:
            InvalidConfigError: If no mask exists for the slot.
        """
        if not 0 <= slot < len(self.masks):
            raise InvalidConfigError(
                f"Ore slot {slot} has no mask ({len(self.masks)} slots generated)"
            )
        mask = self.masks[slot]
        return bool(mask[min(y, mask.shape[0] - 1), x])

    def ore_at(self, x: int, y: int, depth: float) -> OreConfig | None:
        """Resolve which ore, if any, replaces stone at a coordinate.

        Slots are checked in increasing order and every present,
        deep-enough match overwrites the previous one, so the highest
        matching slot wins.

        Args:
            x: Tile x coordinate.
            y: Tile y coordinate.
            depth: Column surface height minus y.

        Returns:
            The winning ore, or None to keep stone.
        """
        chosen: OreConfig | None = None
        biome = self.biome_map.biome_at(x, y)
        for slot, ore in enumerate(biome.ores):
            if self.is_present(slot, x, y) and depth > ore.max_spawn_height:
                chosen = ore
        return chosen


class _GridCache:
    """Noise grids keyed by frequency, shared across biomes and slots."""

    def __init__(self, noise: NoiseField, width: int, height: int):
        self.noise = noise
        self.width = width
        self.height = height
        self._grids: dict[float, NDArray[np.float64]] = {}

    def get(self, frequency: float) -> NDArray[np.float64]:
        if frequency not in self._grids:
            self._grids[frequency] = self.noise.grid(self.width, self.height, frequency)
        return self._grids[frequency]


def make_cave_mask(noise: NoiseField, biome_map: BiomeMap) -> CaveMask:
    """Build the cave mask: solid where noise exceeds the biome's surface value.

    Args:
        noise: Seeded noise sampler.
        biome_map: Precomputed biome map.

    Returns:
        CaveMask over the biome map's grid.
    """
    index = biome_map.index_grid()
    cache = _GridCache(noise, biome_map.width, biome_map.height)
    solid = np.zeros(index.shape, dtype=bool)

    for biome_index, biome in enumerate(biome_map.biomes):
        cells = index == biome_index
        if not cells.any():
            continue
        values = cache.get(biome.cave_freq)
        solid[cells] = values[cells] > biome.surface_value

    mask = CaveMask(solid)
    logger.debug("cave_mask_built", open_fraction=round(mask.open_fraction, 3))
    return mask


def make_ore_masks(
    noise: NoiseField,
    biome_map: BiomeMap,
    slot_count: int,
) -> OreMasks:
    """Build one presence mask per ore slot.

    Cells whose biome defines fewer ores than the slot index stay absent.

    Args:
        noise: Seeded noise sampler.
        biome_map: Precomputed biome map.
        slot_count: Number of ore slots to generate.

    Returns:
        OreMasks with slot_count grids.
    """
    index = biome_map.index_grid()
    cache = _GridCache(noise, biome_map.width, biome_map.height)
    masks: list[NDArray[np.bool_]] = []

    for slot in range(slot_count):
        present = np.zeros(index.shape, dtype=bool)
        for biome_index, biome in enumerate(biome_map.biomes):
            if slot >= len(biome.ores):
                continue
            cells = index == biome_index
            if not cells.any():
                continue
            ore = biome.ores[slot]
            values = cache.get(ore.rarity)
            present[cells] = values[cells] > ore.size
        masks.append(present)

    logger.debug(
        "ore_masks_built",
        slots=slot_count,
        coverage=[round(float(np.mean(m)), 3) for m in masks],
    )
    return OreMasks(masks, biome_map)


def count_cave_pockets(cave_mask: CaveMask, heights: HeightProfile) -> int:
    """Count connected open regions below the surface.

    Args:
        cave_mask: Cave mask of the world.
        heights: Surface heights bounding each column.

    Returns:
        Number of 4-connected cave pockets under the surface.
    """
    solid = cave_mask.solid
    rows = np.arange(solid.shape[0])[:, None]
    row_counts = np.array([heights.row_count(x) for x in range(len(heights))])
    underground = rows < row_counts[None, :]

    _, num_pockets = ndimage.label(underground & ~solid)
    return int(num_pockets)
