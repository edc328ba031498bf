"""Post-generation validation of structural invariants."""

from collections import Counter

import structlog

from .decoration import DecorationType
from .generator import GenerationResult
from .masks import count_cave_pockets
from .tile_types import TileKind

logger = structlog.get_logger()


class ValidationResult:
    """Outcome of the world checks, grouped by the check that raised them."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.failed_checks: set[str] = set()

    @property
    def passed(self) -> bool:
        return not self.failed_checks

    def add_error(self, check: str, message: str) -> None:
        """Record a broken invariant; the world fails validation."""
        self.errors.append(f"{check}: {message}")
        self.failed_checks.add(check)

    def add_warning(self, check: str, message: str) -> None:
        """Record something suspicious that does not fail validation."""
        self.warnings.append(f"{check}: {message}")


def validate_world(result: GenerationResult) -> ValidationResult:
    """Validate a generated world against its invariants.

    Args:
        result: Output of generate_world.

    Returns:
        ValidationResult with any errors/warnings.
    """
    validation = ValidationResult()

    # Check 1: No coordinate placed twice
    _check_unique_coordinates(result, validation)

    # Check 2: Every tile sits in the chunk owning its column
    _check_chunk_partition(result, validation)

    # Check 3: Grass on top, only stone or ore below the dirt layer
    _check_layering(result, validation)

    # Check 4: At most one decoration per column
    _check_decoration_exclusivity(result, validation)

    # Check 5: Caves enabled but nothing carved
    _check_caves(result, validation)

    if validation.passed:
        logger.info("world_validation_passed")
    else:
        logger.warning(
            "world_validation_failed",
            errors=len(validation.errors),
            checks=sorted(validation.failed_checks),
        )
        for error in validation.errors:
            logger.error("validation_error", message=error)

    for warning in validation.warnings:
        logger.warning("validation_warning", message=warning)

    return validation


def _check_unique_coordinates(result: GenerationResult, validation: ValidationResult) -> None:
    counts = Counter((p.x, p.y) for p in result.placements)
    duplicates = [coord for coord, n in counts.items() if n > 1]
    if duplicates:
        validation.add_error(
            "unique_coordinates",
            f"{len(duplicates)} coordinates placed more than once, e.g. {duplicates[0]}",
        )


def _check_chunk_partition(result: GenerationResult, validation: ValidationResult) -> None:
    chunk_size = result.config.chunk_size
    chunk_count = len(result.chunks)
    misplaced = 0

    for placement in result.placements:
        expected = placement.x // chunk_size
        if placement.chunk != expected or not 0 <= expected < chunk_count:
            misplaced += 1

    for chunk in result.chunks:
        misplaced += sum(1 for tile in chunk.tiles if not chunk.contains_x(tile.x))

    if misplaced:
        validation.add_error(
            "chunk_partition", f"{misplaced} tiles assigned to the wrong chunk"
        )

    uneven = [c.index for c in result.chunks if c.width != chunk_size]
    if uneven:
        validation.add_error(
            "chunk_partition", f"chunks {uneven} are not {chunk_size} columns wide"
        )


def _check_layering(result: GenerationResult, validation: ValidationResult) -> None:
    bad_top = 0
    bad_deep = 0

    for placement in result.placements:
        if placement.kind.is_decoration:
            continue
        height = result.heights.height_of(placement.x)
        biome = result.biome_map.biome_at(placement.x, placement.y)
        if placement.y >= height - 1 and placement.kind != TileKind.GRASS:
            bad_top += 1
        elif placement.y < height - biome.dirt_layer_height and not (
            placement.kind == TileKind.STONE or placement.kind.is_ore
        ):
            bad_deep += 1

    if bad_top:
        validation.add_error("layering", f"{bad_top} surface tiles are not grass")
    if bad_deep:
        validation.add_error(
            "layering", f"{bad_deep} tiles below the dirt layer are not stone or ore"
        )


def _check_decoration_exclusivity(
    result: GenerationResult, validation: ValidationResult
) -> None:
    per_column = Counter(d.x for d in result.decorations)
    crowded = [x for x, n in per_column.items() if n > 1]
    if crowded:
        validation.add_error(
            "decorations", f"{len(crowded)} columns have more than one decoration"
        )

    trees = sum(1 for d in result.decorations if d.decoration_type == DecorationType.TREE)
    if trees == 0 and result.decorations:
        validation.add_warning("decorations", "No trees placed")


def _check_caves(result: GenerationResult, validation: ValidationResult) -> None:
    if not result.config.generate_caves:
        return
    if count_cave_pockets(result.cave_mask, result.heights) == 0:
        validation.add_warning("caves", "Cave generation enabled but no caves carved")
