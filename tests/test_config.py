"""Tests for configuration models and loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tileworld.config import (
    BiomeConfig,
    GradientStop,
    OreConfig,
    WorldGenConfig,
    find_config,
    list_configs,
    load_config,
    with_overrides,
)
from tileworld.tile_types import TileKind


class TestDefaults:
    """Tests for built-in defaults."""

    def test_world_defaults(self) -> None:
        """Default world partitions into whole chunks."""
        config = WorldGenConfig()
        assert config.world_size == 128
        assert config.chunk_size == 16
        assert config.chunk_count == 8
        assert config.seed is None
        assert config.generate_caves

    def test_default_biomes(self) -> None:
        """Four biomes, the longest with four ore slots."""
        config = WorldGenConfig()
        assert [b.name for b in config.biomes] == ["grassland", "forest", "desert", "snow"]
        assert config.ore_slot_count == 4

    def test_gradient_keys_reference_biomes(self) -> None:
        """Every default gradient key names a real biome."""
        config = WorldGenConfig()
        assert all(stop.key < len(config.biomes) for stop in config.biome_gradient)

    def test_grassland_uses_field_defaults(self) -> None:
        """The first default biome carries the plain per-field defaults."""
        grassland = WorldGenConfig().biomes[0]
        assert grassland.name == "grassland"
        assert grassland.tree_chance == 10
        assert grassland.tall_grass_chance == 10
        assert grassland.height_multiplier == 4.0
        assert grassland.surface_value == 0.25
        assert (grassland.min_tree_height, grassland.max_tree_height) == (4, 6)

    def test_no_ores_means_no_slots(self) -> None:
        """Biomes without ores need no ore masks."""
        config = WorldGenConfig(biomes=[BiomeConfig(name="bare")])
        assert config.ore_slot_count == 0


class TestValidation:
    """Tests for model constraints."""

    def test_ore_kind_must_be_ore(self) -> None:
        """Only ore kinds can fill an ore slot."""
        with pytest.raises(ValidationError):
            OreConfig(kind=TileKind.DIRT)

    def test_tree_heights_ordered(self) -> None:
        """min_tree_height may not exceed max_tree_height."""
        with pytest.raises(ValidationError):
            BiomeConfig(name="b", min_tree_height=7, max_tree_height=5)

    @pytest.mark.parametrize("field", ["tree_chance", "tall_grass_chance", "dirt_layer_height"])
    def test_positive_fields(self, field: str) -> None:
        """Chances and the dirt layer must be at least one."""
        with pytest.raises(ValidationError):
            BiomeConfig(name="b", **{field: 0})

    @pytest.mark.parametrize("field", ["world_size", "chunk_size"])
    def test_sizes_positive(self, field: str) -> None:
        """Sizes must be positive."""
        with pytest.raises(ValidationError):
            WorldGenConfig(**{field: 0})

    def test_gradient_position_bounds(self) -> None:
        """Gradient positions lie in [0, 1]."""
        with pytest.raises(ValidationError):
            GradientStop(position=1.5, key=0)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_seed_must_be_finite(self, value: float) -> None:
        """Non-finite seeds are rejected."""
        with pytest.raises(ValidationError):
            WorldGenConfig(seed=value)

    @pytest.mark.parametrize(
        "field", ["height_multiplier", "terrain_freq", "cave_freq", "surface_value"]
    )
    def test_biome_floats_must_be_finite(self, field: str) -> None:
        """Non-finite biome parameters are rejected."""
        with pytest.raises(ValidationError):
            BiomeConfig(name="b", **{field: float("inf")})
        with pytest.raises(ValidationError):
            BiomeConfig(name="b", **{field: float("nan")})

    def test_ore_floats_must_be_finite(self) -> None:
        """Non-finite ore parameters are rejected."""
        with pytest.raises(ValidationError):
            OreConfig(kind=TileKind.COAL, size=float("nan"))
        with pytest.raises(ValidationError):
            OreConfig(kind=TileKind.COAL, rarity=float("inf"))

    def test_toml_nan_rejected(self, temp_dir: Path) -> None:
        """TOML nan literals fail validation on load."""
        path = temp_dir / "nan.toml"
        path.write_text("seed = nan\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_biomes_are_frozen(self) -> None:
        """Biome configs are immutable."""
        biome = BiomeConfig(name="b")
        with pytest.raises(ValidationError):
            biome.tree_chance = 3


class TestLoadConfig:
    """Tests for TOML loading."""

    def test_load_minimal(self, temp_dir: Path) -> None:
        """Unset fields keep their defaults."""
        path = temp_dir / "small.toml"
        path.write_text("seed = 7\nworld_size = 32\n")

        config = load_config(path)

        assert config.seed == 7
        assert config.world_size == 32
        assert len(config.biomes) == 4

    def test_load_biomes_and_ores(self, temp_dir: Path) -> None:
        """Biomes and their ore slots load from arrays of tables."""
        path = temp_dir / "custom.toml"
        path.write_text(
            "seed = 1.5\n"
            "[[biome_gradient]]\nposition = 1.0\nkey = 0\n"
            "[[biome_gradient]]\nposition = 0.2\nkey = 0\n"
            "[[biomes]]\nname = \"cavern\"\ncave_freq = 0.1\n"
            "[[biomes.ores]]\nkind = \"gold\"\nsize = 0.9\n"
        )

        config = load_config(path)

        assert config.seed == 1.5
        assert [s.position for s in config.biome_gradient] == [0.2, 1.0]
        assert config.biomes[0].name == "cavern"
        assert config.biomes[0].ores[0].kind == TileKind.GOLD
        assert config.biomes[0].ores[0].size == 0.9

    def test_invalid_values_rejected(self, temp_dir: Path) -> None:
        """Bad values raise a validation error."""
        path = temp_dir / "bad.toml"
        path.write_text("[[biomes]]\nname = \"b\"\n[[biomes.ores]]\nkind = \"stone\"\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file(self, temp_dir: Path) -> None:
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "nope.toml")


class TestFindConfig:
    """Tests for config discovery."""

    def test_bundled_configs_listed(self) -> None:
        """The shipped configs are discoverable by name."""
        names = list_configs()
        assert "default" in names
        assert "flat" in names

    def test_find_by_name(self) -> None:
        """A bare name resolves into configs/."""
        path = find_config("flat")
        assert path.name == "flat.toml"
        config = load_config(path)
        assert config.world_size == 64
        assert not config.generate_caves

    def test_bundled_default_loads(self) -> None:
        """The bundled default config is valid."""
        config = load_config(find_config("default"))
        assert config.world_size % config.chunk_size == 0
        assert len(config.biomes) == 4

    def test_find_by_path(self, temp_dir: Path) -> None:
        """Paths are returned as-is when they exist."""
        path = temp_dir / "mine.toml"
        path.write_text("seed = 1\n")
        assert find_config(str(path)) == path

    def test_not_found(self) -> None:
        """Unknown names raise FileNotFoundError listing the bundled configs."""
        with pytest.raises(FileNotFoundError, match="default, flat"):
            find_config("does-not-exist")


class TestWithOverrides:
    """Tests for validated overrides."""

    def test_applies_fields(self) -> None:
        """Overrides replace fields and keep the rest."""
        base = load_config(find_config("flat"))
        config = with_overrides(base, {"seed": 9, "generate_caves": True})

        assert config.seed == 9
        assert config.generate_caves
        assert config.world_size == base.world_size
        assert config.biomes == base.biomes

    def test_rejects_non_finite_seed(self) -> None:
        """Overrides go through validation."""
        with pytest.raises(ValidationError):
            with_overrides(WorldGenConfig(), {"seed": float("nan")})

    def test_rejects_bad_size(self) -> None:
        """Field constraints apply to overrides."""
        with pytest.raises(ValidationError):
            with_overrides(WorldGenConfig(), {"chunk_size": 0})
