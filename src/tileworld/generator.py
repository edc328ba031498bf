"""Main world generation orchestration."""

import math
from collections import Counter
from collections.abc import Iterable

import numpy as np
import structlog

from .assembler import PlacementCallback, TerrainAssembler, TilePlacer
from .assets import AssetResolver, TileAtlas, check_variants
from .biomes import BiomeMap, build_biome_map
from .config import WorldGenConfig
from .decoration import DecorationPlacer, DecorationType, PlacedDecoration
from .exceptions import InvalidConfigError
from .heights import HeightProfile, make_height_profile
from .masks import CaveMask, OreMasks, count_cave_pockets, make_cave_mask, make_ore_masks
from .noise import NoiseField
from .registry import Chunk, TilePlacement, TileRegistry, create_chunks
from .tile_types import DECORATION_KINDS, GROUND_KINDS, TileKind

logger = structlog.get_logger()

SEED_RANGE = (-10000, 10000)


class GenerationResult:
    """Result of world generation with all intermediate data."""

    def __init__(
        self,
        config: WorldGenConfig,
        seed: int | float,
        placements: list[TilePlacement],
        chunks: list[Chunk],
        decorations: list[PlacedDecoration],
        biome_map: BiomeMap,
        heights: HeightProfile,
        cave_mask: CaveMask,
        ore_masks: OreMasks,
    ):
        self.config = config
        self.seed = seed
        self.placements = placements
        self.chunks = chunks
        self.decorations = decorations
        self.biome_map = biome_map
        self.heights = heights
        self.cave_mask = cave_mask
        self.ore_masks = ore_masks
        self._by_coord: dict[tuple[int, int], TilePlacement] | None = None

    def tile_at(self, x: int, y: int) -> TilePlacement | None:
        """Placement at a coordinate, or None for an empty cell."""
        if self._by_coord is None:
            self._by_coord = {(p.x, p.y): p for p in self.placements}
        return self._by_coord.get((x, y))

    def column(self, x: int) -> list[TilePlacement]:
        """Placements in column x, bottom-up."""
        return sorted((p for p in self.placements if p.x == x), key=lambda p: p.y)

    def kind_counts(self) -> dict[TileKind, int]:
        return dict(Counter(p.kind for p in self.placements))


def check_config(config: WorldGenConfig) -> None:
    """Reject configurations that cannot produce a complete world.

    Raises:
        InvalidConfigError: On a bad chunk partition, missing biomes or a
            non-finite seed.
    """
    if not config.biomes:
        raise InvalidConfigError("At least one biome is required")
    if config.seed is not None and not math.isfinite(config.seed):
        raise InvalidConfigError(f"Seed must be finite (got {config.seed})")
    # Raises on a world size that is not a multiple of the chunk size
    create_chunks(config.world_size, config.chunk_size)


def emitted_kinds(config: WorldGenConfig) -> set[TileKind]:
    """Every tile kind generation may place under this configuration."""
    kinds = set(GROUND_KINDS) | set(DECORATION_KINDS)
    for biome in config.biomes:
        kinds.update(ore.kind for ore in biome.ores)
    return kinds


def resolve_seed(config: WorldGenConfig) -> int | float:
    """The configured seed, or a freshly drawn one."""
    if config.seed is not None:
        return config.seed
    return int(np.random.default_rng().integers(*SEED_RANGE))


def make_rng(config: WorldGenConfig, seed: int | float) -> np.random.Generator:
    """Random source for sprite variants and decoration rolls.

    Uses rng_seed when set, otherwise derives one from the world seed so
    a fixed seed replays the whole world.
    """
    if config.rng_seed is not None:
        return np.random.default_rng(config.rng_seed)
    derived = int.from_bytes(np.float64(seed).tobytes(), "little")
    return np.random.default_rng(derived)


def generate_world(
    config: WorldGenConfig,
    assets: AssetResolver | None = None,
    on_place: PlacementCallback | None = None,
    rng: np.random.Generator | None = None,
) -> GenerationResult:
    """Generate a complete world from configuration.

    Args:
        config: World generation configuration.
        assets: Sprite variant lookup (default: placeholder atlas).
        on_place: Called once per placed tile, in placement order.
        rng: Random source for variants and decoration (default: seeded
            from config).

    Returns:
        GenerationResult with every placement and the fields behind them.

    Raises:
        InvalidConfigError: If the configuration is unusable. Nothing is
            placed in that case.
    """
    check_config(config)
    if assets is None:
        assets = TileAtlas.default()
    check_variants(assets, emitted_kinds(config))

    seed = resolve_seed(config)
    if rng is None:
        rng = make_rng(config, seed)
    noise = NoiseField(seed)

    logger.info(
        "generating_world",
        seed=seed,
        world_size=config.world_size,
        chunk_size=config.chunk_size,
        biomes=len(config.biomes),
        caves=config.generate_caves,
    )

    biome_map = build_biome_map(noise, config)
    cave_mask = make_cave_mask(noise, biome_map)
    ore_masks = make_ore_masks(noise, biome_map, config.ore_slot_count)
    heights = make_height_profile(noise, biome_map, config.height_addition)

    registry = TileRegistry(config.world_size, config.chunk_size)
    placer = TilePlacer(registry, assets, rng, on_place)
    assembler = TerrainAssembler(
        biome_map,
        heights,
        cave_mask,
        ore_masks,
        placer,
        generate_caves=config.generate_caves,
    )
    decorator = DecorationPlacer(heights, placer, rng)

    decorations: list[PlacedDecoration] = []
    for x in range(config.world_size):
        assembler.assemble_column(x)
        decoration = decorator.decorate_column(x)
        if decoration is not None:
            decorations.append(decoration)

    result = GenerationResult(
        config=config,
        seed=seed,
        placements=placer.placements,
        chunks=registry.chunks,
        decorations=decorations,
        biome_map=biome_map,
        heights=heights,
        cave_mask=cave_mask,
        ore_masks=ore_masks,
    )
    _log_world_stats(result)
    return result


def _log_world_stats(result: GenerationResult) -> None:
    """Log world generation statistics."""
    counts = result.kind_counts()
    logger.info(
        "world_generated",
        seed=result.seed,
        tiles=len(result.placements),
        trees=_count(result.decorations, DecorationType.TREE),
        tall_grass=_count(result.decorations, DecorationType.TALL_GRASS),
        cave_pockets=count_cave_pockets(result.cave_mask, result.heights)
        if result.config.generate_caves
        else 0,
    )
    for kind in TileKind:
        if counts.get(kind):
            logger.debug("tile_kind_count", kind=kind.value, count=counts[kind])
    for chunk in result.chunks:
        logger.debug("chunk_filled", chunk=chunk.index, tiles=len(chunk.tiles))


def _count(decorations: Iterable[PlacedDecoration], decoration_type: DecorationType) -> int:
    return sum(1 for d in decorations if d.decoration_type == decoration_type)
