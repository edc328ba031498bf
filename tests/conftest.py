"""Shared test fixtures for world generation tests."""

import tempfile
from pathlib import Path

import numpy as np
import pytest

from tileworld.assembler import TilePlacer
from tileworld.assets import TileAtlas
from tileworld.biomes import BiomeMap
from tileworld.config import BiomeConfig, WorldGenConfig
from tileworld.heights import make_height_profile
from tileworld.noise import NoiseField
from tileworld.registry import TileRegistry


class ScriptedRng:
    """Random source that replays a fixed sequence of integers."""

    def __init__(self, values: list[int]):
        self.values = list(values)

    def integers(self, low: int, high: int) -> int:
        value = self.values.pop(0)
        assert low <= value < high, f"{value} outside [{low}, {high})"
        return value


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def flat_biome() -> BiomeConfig:
    """Biome with a constant surface and no decoration rolls that can hit."""
    return BiomeConfig(
        name="flat",
        terrain_freq=0.0,
        height_multiplier=0.0,
        tree_chance=1,
        tall_grass_chance=1,
    )


@pytest.fixture
def flat_config(flat_biome: BiomeConfig) -> WorldGenConfig:
    """16-wide single-chunk world, surface at 5, no caves."""
    return WorldGenConfig(
        seed=0,
        world_size=16,
        chunk_size=16,
        height_addition=5,
        generate_caves=False,
        biomes=[flat_biome],
    )


@pytest.fixture
def flat_biome_map(flat_biome: BiomeConfig) -> BiomeMap:
    """16x16 biome map covered by the flat biome."""
    return BiomeMap(np.zeros((16, 16), dtype=np.int32), [flat_biome])


@pytest.fixture
def flat_heights(flat_biome_map: BiomeMap):
    """Height profile of 5.0 in every column."""
    return make_height_profile(NoiseField(0), flat_biome_map, 5)


@pytest.fixture
def placer() -> TilePlacer:
    """Placer over a 16-wide world split into two chunks."""
    return TilePlacer(
        TileRegistry(world_size=16, chunk_size=8),
        TileAtlas.default(),
        np.random.default_rng(7),
    )


@pytest.fixture
def small_world_config() -> WorldGenConfig:
    """64-wide world with the default biomes and a fixed seed."""
    return WorldGenConfig(seed=42, world_size=64, chunk_size=16)


@pytest.fixture
def scripted_rng() -> type[ScriptedRng]:
    """Factory for random sources that replay fixed integers."""
    return ScriptedRng
