"""Surface decoration: trees and tall grass on column tops."""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .assembler import TilePlacer
from .config import BiomeConfig
from .heights import HeightProfile
from .tile_types import TileKind

CANOPY_HEIGHT = 3
SIDE_CANOPY_HEIGHT = 2


class DecorationType(str, Enum):
    """Types of decoration that can be placed on a column."""

    TREE = "tree"
    TALL_GRASS = "tall_grass"


@dataclass
class PlacedDecoration:
    """A decoration rooted at (x, y), one tile above the ground."""

    x: int
    y: int
    decoration_type: DecorationType
    tree_height: int = 0


class DecorationPlacer:
    """Rolls for a tree, then for tall grass, on each column top.

    Chances come from the column's bottom-row biome. The grass roll only
    happens when the tree roll fails, so a column gets at most one.
    """

    def __init__(
        self,
        heights: HeightProfile,
        placer: TilePlacer,
        rng: np.random.Generator,
    ):
        self.heights = heights
        self.placer = placer
        self.rng = rng

    def decorate_column(self, x: int) -> PlacedDecoration | None:
        """Roll decoration for column x.

        Nothing is rolled unless the column's top tile was actually placed
        (a cave may have removed it).

        Returns:
            The decoration placed, or None.
        """
        top = self.heights.top_row(x)
        if top is None or not self.placer.registry.contains(x, top):
            return None

        biome = self.heights.column_biome(x)
        root_y = top + 1

        if self.rng.integers(0, biome.tree_chance) == 1:
            tree_height = self._tree_height(biome)
            self.place_tree(x, root_y, tree_height)
            return PlacedDecoration(
                x=x, y=root_y, decoration_type=DecorationType.TREE, tree_height=tree_height
            )

        if self.rng.integers(0, biome.tall_grass_chance) == 1:
            self.placer.place(TileKind.TALL_GRASS, x, root_y)
            return PlacedDecoration(x=x, y=root_y, decoration_type=DecorationType.TALL_GRASS)

        return None

    def place_tree(self, x: int, y: int, tree_height: int) -> None:
        """Place a trunk of `tree_height` logs from y up, then the canopy.

        The canopy is a 3-tile leaf column on top of the trunk with 2-tile
        leaf columns either side of its bottom two rows.
        """
        for i in range(tree_height):
            self.placer.place(TileKind.LOG, x, y + i)

        canopy_y = y + tree_height
        for i in range(CANOPY_HEIGHT):
            self.placer.place(TileKind.LEAF, x, canopy_y + i)

        for i in range(SIDE_CANOPY_HEIGHT):
            self.placer.place(TileKind.LEAF, x - 1, canopy_y + i)
            self.placer.place(TileKind.LEAF, x + 1, canopy_y + i)

    def _tree_height(self, biome: BiomeConfig) -> int:
        if biome.max_tree_height <= biome.min_tree_height:
            return biome.min_tree_height
        return int(self.rng.integers(biome.min_tree_height, biome.max_tree_height))
