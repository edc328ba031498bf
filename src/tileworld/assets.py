"""Sprite variant lookup for tile kinds.

Generation only needs to know how many interchangeable variants a kind
has; the renderer owns what a variant actually looks like.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from pydantic import BaseModel, Field

from .exceptions import MissingVariantsError
from .tile_types import TileKind


class AssetResolver(Protocol):
    """Anything that can list the sprite variants of a tile kind."""

    def variants(self, kind: TileKind) -> Sequence[str]: ...


class TileAtlas(BaseModel):
    """Sprite names per tile kind."""

    sprites: dict[TileKind, list[str]] = Field(
        default_factory=dict, description="Ordered sprite variants per tile kind"
    )

    def variants(self, kind: TileKind) -> Sequence[str]:
        return self.sprites.get(kind, [])

    @classmethod
    def default(cls, variants_per_kind: int = 3) -> "TileAtlas":
        """Atlas with numbered placeholder sprites for every kind."""
        return cls(
            sprites={
                kind: [f"{kind.value}_{i}" for i in range(variants_per_kind)]
                for kind in TileKind
            }
        )


def check_variants(assets: AssetResolver, kinds: Iterable[TileKind]) -> None:
    """Ensure every kind that may be emitted has at least one variant.

    Raises:
        MissingVariantsError: Listing every kind without variants.
    """
    missing = sorted(kind.value for kind in set(kinds) if not assets.variants(kind))
    if missing:
        raise MissingVariantsError(f"No sprite variants for: {', '.join(missing)}")
