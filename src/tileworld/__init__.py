"""Deterministic 2D tile world generation.

Builds a side-view tile world from a seed: biome map, surface heights,
caves, ores, and trees/tall grass, handing each tile to a placement
callback.
"""

from .assets import AssetResolver, TileAtlas
from .biomes import BiomeMap, build_biome_map
from .config import (
    BiomeConfig,
    GradientStop,
    OreConfig,
    WorldGenConfig,
    find_config,
    load_config,
)
from .exceptions import (
    ChunkIndexError,
    InvalidConfigError,
    MissingVariantsError,
    WorldGenError,
)
from .generator import GenerationResult, generate_world
from .noise import NoiseField
from .registry import Chunk, TilePlacement, TileRegistry
from .tile_types import TileKind
from .validation import ValidationResult, validate_world

__all__ = [
    # Config
    "BiomeConfig",
    "GradientStop",
    "OreConfig",
    "WorldGenConfig",
    "find_config",
    "load_config",
    # Generation
    "BiomeMap",
    "GenerationResult",
    "NoiseField",
    "build_biome_map",
    "generate_world",
    # Tiles
    "Chunk",
    "TileKind",
    "TilePlacement",
    "TileRegistry",
    # Assets
    "AssetResolver",
    "TileAtlas",
    # Validation
    "ValidationResult",
    "validate_world",
    # Exceptions
    "WorldGenError",
    "InvalidConfigError",
    "MissingVariantsError",
    "ChunkIndexError",
]
