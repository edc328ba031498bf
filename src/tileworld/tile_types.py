"""Tile material kinds and their properties."""

from enum import Enum


class TileKind(str, Enum):
    """Material classification of a placed tile."""

    STONE = "stone"
    DIRT = "dirt"
    GRASS = "grass"
    COAL = "coal"
    IRON = "iron"
    GOLD = "gold"
    DIAMOND = "diamond"
    LOG = "log"
    LEAF = "leaf"
    TALL_GRASS = "tall_grass"

    @property
    def is_ore(self) -> bool:
        """Whether this kind can replace stone as an ore."""
        return self in ORE_KINDS

    @property
    def is_decoration(self) -> bool:
        """Whether this kind is placed above the ground surface."""
        return self in DECORATION_KINDS


# Define sets for O(1) lookup
ORE_KINDS = frozenset({
    TileKind.COAL,
    TileKind.IRON,
    TileKind.GOLD,
    TileKind.DIAMOND,
})

DECORATION_KINDS = frozenset({
    TileKind.LOG,
    TileKind.LEAF,
    TileKind.TALL_GRASS,
})

# Kinds that terrain assembly can emit without looking at ore settings
GROUND_KINDS = frozenset({
    TileKind.STONE,
    TileKind.DIRT,
    TileKind.GRASS,
})
