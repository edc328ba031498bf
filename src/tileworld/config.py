"""World generation configuration models and TOML loading."""

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .tile_types import TileKind


class OreConfig(BaseModel, frozen=True, allow_inf_nan=False):
    """Noise parameters for a single ore slot."""

    kind: TileKind = Field(description="Ore material placed when the mask matches")
    rarity: float = Field(default=0.2, description="Noise frequency of the ore field")
    size: float = Field(default=0.7, description="Noise threshold above which ore forms")
    max_spawn_height: int = Field(
        default=10, description="Ore needs more than this many tiles of cover"
    )

    @field_validator("kind")
    @classmethod
    def _kind_is_ore(cls, kind: TileKind) -> TileKind:
        if not kind.is_ore:
            raise ValueError(f"{kind.value} is not an ore kind")
        return kind


class BiomeConfig(BaseModel, frozen=True, allow_inf_nan=False):
    """Parameter set for one biome."""

    name: str
    terrain_freq: float = Field(default=0.05, description="Surface height noise frequency")
    cave_freq: float = Field(default=0.05, description="Cave noise frequency")
    surface_value: float = Field(
        default=0.25, description="Cave noise above this value is solid ground"
    )
    height_multiplier: float = Field(default=4.0, description="Surface height amplitude")
    dirt_layer_height: int = Field(
        default=5, ge=1, description="Depth of the dirt layer, counting the grass row"
    )
    tree_chance: int = Field(default=10, ge=1, description="1-in-N tree roll per column")
    tall_grass_chance: int = Field(
        default=10, ge=1, description="1-in-N tall grass roll per column"
    )
    min_tree_height: int = Field(default=4, ge=0, description="Minimum trunk height")
    max_tree_height: int = Field(
        default=6, ge=0, description="Trunk height upper bound (exclusive)"
    )
    ores: tuple[OreConfig, ...] = Field(
        default=(), description="Ore slots in override order (later wins)"
    )

    @model_validator(mode="after")
    def _tree_heights_ordered(self) -> "BiomeConfig":
        if self.min_tree_height > self.max_tree_height:
            raise ValueError(
                f"min_tree_height {self.min_tree_height} exceeds "
                f"max_tree_height {self.max_tree_height}"
            )
        return self


class GradientStop(BaseModel, frozen=True, allow_inf_nan=False):
    """A stop in the biome gradient: noise up to `position` maps to `key`."""

    position: float = Field(ge=0.0, le=1.0, description="Upper noise bound of this band")
    key: int = Field(ge=0, description="Biome index the band classifies to")


def _default_ores() -> tuple[OreConfig, ...]:
    return (
        OreConfig(kind=TileKind.COAL, rarity=0.2, size=0.68, max_spawn_height=5),
        OreConfig(kind=TileKind.IRON, rarity=0.18, size=0.72, max_spawn_height=10),
        OreConfig(kind=TileKind.GOLD, rarity=0.15, size=0.76, max_spawn_height=15),
        OreConfig(kind=TileKind.DIAMOND, rarity=0.12, size=0.8, max_spawn_height=20),
    )


def _default_biomes() -> list[BiomeConfig]:
    return [
        # Plain per-field defaults
        BiomeConfig(name="grassland", ores=_default_ores()),
        BiomeConfig(
            name="forest",
            terrain_freq=0.04,
            height_multiplier=6.0,
            tree_chance=4,
            tall_grass_chance=6,
            ores=_default_ores(),
        ),
        BiomeConfig(
            name="desert",
            terrain_freq=0.03,
            surface_value=0.3,
            height_multiplier=3.0,
            dirt_layer_height=8,
            tree_chance=200,
            tall_grass_chance=40,
            ores=_default_ores()[:2],
        ),
        BiomeConfig(
            name="snow",
            terrain_freq=0.06,
            cave_freq=0.08,
            height_multiplier=10.0,
            tree_chance=12,
            tall_grass_chance=50,
            min_tree_height=5,
            max_tree_height=8,
            ores=_default_ores(),
        ),
    ]


def _default_gradient() -> list[GradientStop]:
    return [
        GradientStop(position=0.35, key=2),
        GradientStop(position=0.5, key=0),
        GradientStop(position=0.65, key=1),
        GradientStop(position=1.0, key=3),
    ]


class WorldGenConfig(BaseModel, allow_inf_nan=False):
    """Complete world generation configuration.

    Every float field must be finite; a NaN or infinite seed or amplitude
    would turn the whole noise field into NaN.
    """

    seed: int | float | None = Field(
        default=None, description="World seed (None = draw one per run)"
    )
    rng_seed: int | None = Field(
        default=None,
        ge=0,
        description="Seed for sprite variant and decoration rolls (None = derive from seed)",
    )
    world_size: int = Field(default=128, gt=0, description="World width and grid height")
    chunk_size: int = Field(default=16, gt=0, description="Chunk width in tiles")
    height_addition: int = Field(default=25, description="Base surface height")
    generate_caves: bool = Field(default=True, description="Carve caves with the cave mask")

    biome_frequency: float = Field(default=0.02, description="Biome noise frequency")
    biome_gradient: list[GradientStop] = Field(default_factory=_default_gradient)
    biomes: list[BiomeConfig] = Field(default_factory=_default_biomes)

    @field_validator("biome_gradient")
    @classmethod
    def _sort_gradient(cls, stops: list[GradientStop]) -> list[GradientStop]:
        return sorted(stops, key=lambda stop: stop.position)

    @property
    def chunk_count(self) -> int:
        """Number of chunks along the x axis."""
        return self.world_size // self.chunk_size

    @property
    def ore_slot_count(self) -> int:
        """Number of ore slots (longest ore list across biomes)."""
        return max((len(biome.ores) for biome in self.biomes), default=0)


def load_config(config_path: Path) -> WorldGenConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed WorldGenConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return WorldGenConfig.model_validate(data)


def with_overrides(config: WorldGenConfig, overrides: Mapping[str, Any]) -> WorldGenConfig:
    """Copy a config with some fields replaced, validating the result.

    Raises:
        pydantic.ValidationError: If an override breaks a field constraint.
    """
    return WorldGenConfig.model_validate({**config.model_dump(), **overrides})


def find_config(name: str) -> Path:
    """Resolve a config name or path to a TOML file.

    Names containing a path separator or ending in .toml are taken as
    paths. Bare names are looked up in the bundled configs directory, with
    or without the .toml suffix.

    Args:
        name: Config name (e.g. "flat") or path.

    Returns:
        Path to an existing config file.

    Raises:
        FileNotFoundError: If no matching file exists.
    """
    if "/" in name or name.endswith(".toml"):
        candidates = [Path(name)]
    else:
        configs_dir = _configs_dir()
        candidates = [configs_dir / f"{name}.toml", configs_dir / name]

    for candidate in candidates:
        if candidate.is_file():
            return candidate

    known = ", ".join(list_configs()) or "none"
    raise FileNotFoundError(f"No world config {name!r} (bundled configs: {known})")


def list_configs() -> list[str]:
    """List available config names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))


def _configs_dir() -> Path:
    return Path(__file__).parent.parent.parent / "configs"
