"""Terrain assembly: classify and place every tile below the surface."""

from collections.abc import Callable

import numpy as np
import structlog

from .assets import AssetResolver
from .biomes import BiomeMap
from .heights import HeightProfile
from .masks import CaveMask, OreMasks
from .registry import TilePlacement, TileRegistry
from .tile_types import TileKind

logger = structlog.get_logger()

PlacementCallback = Callable[[TilePlacement], None]


class TilePlacer:
    """Registry-gated tile placement shared by terrain and decoration.

    Occupied cells and columns outside the world are skipped silently.
    New tiles get a chunk, a random sprite variant, and are handed to the
    callback.
    """

    def __init__(
        self,
        registry: TileRegistry,
        assets: AssetResolver,
        rng: np.random.Generator,
        on_place: PlacementCallback | None = None,
    ):
        self.registry = registry
        self.assets = assets
        self.rng = rng
        self.on_place = on_place
        self.placements: list[TilePlacement] = []

    def place(self, kind: TileKind, x: int, y: int) -> TilePlacement | None:
        """Place a tile unless the cell is taken or outside the world.

        Returns:
            The new placement, or None if skipped.

        Raises:
            ChunkIndexError: If x maps outside the chunk array.
        """
        if not self.registry.in_bounds(x):
            logger.debug("tile_outside_world", kind=kind.value, x=x, y=y)
            return None
        if self.registry.contains(x, y):
            return None

        chunk = self.registry.chunk_for(x)
        variant = int(self.rng.integers(0, len(self.assets.variants(kind))))
        self.registry.try_place(x, y)

        placement = TilePlacement(x=x, y=y, kind=kind, variant=variant, chunk=chunk.index)
        chunk.tiles.append(placement)
        self.placements.append(placement)
        if self.on_place is not None:
            self.on_place(placement)
        return placement


class TerrainAssembler:
    """Builds each column bottom-up from the precomputed fields."""

    def __init__(
        self,
        biome_map: BiomeMap,
        heights: HeightProfile,
        cave_mask: CaveMask,
        ore_masks: OreMasks,
        placer: TilePlacer,
        generate_caves: bool = True,
    ):
        self.biome_map = biome_map
        self.heights = heights
        self.cave_mask = cave_mask
        self.ore_masks = ore_masks
        self.placer = placer
        self.generate_caves = generate_caves

    def classify(self, x: int, y: int, height: float) -> TileKind:
        """Material of a cell below a surface at `height`.

        The biome is resolved per cell, so dirt depth and ores follow the
        biome at (x, y) rather than the column's.
        """
        biome = self.biome_map.biome_at(x, y)
        if y < height - biome.dirt_layer_height:
            ore = self.ore_masks.ore_at(x, y, height - y)
            return ore.kind if ore is not None else TileKind.STONE
        if y < height - 1:
            return TileKind.DIRT
        return TileKind.GRASS

    def assemble_column(self, x: int) -> int | None:
        """Place every tile of column x.

        Returns:
            The column's top row, or None if the column is empty.
        """
        height = self.heights.height_of(x)
        for y in range(self.heights.row_count(x)):
            kind = self.classify(x, y, height)
            if self.generate_caves and not self.cave_mask.is_solid(x, y):
                continue
            self.placer.place(kind, x, y)
        return self.heights.top_row(x)
