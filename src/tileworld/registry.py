"""Tile occupancy and chunk partitioning."""

from dataclasses import dataclass, field

from .exceptions import ChunkIndexError, InvalidConfigError
from .tile_types import TileKind


@dataclass(frozen=True)
class TilePlacement:
    """A tile handed to the placement callback. Never mutated."""

    x: int
    y: int
    kind: TileKind
    variant: int
    chunk: int

    @property
    def name(self) -> str:
        """Tile name, taken from its kind."""
        return self.kind.value

    @property
    def center(self) -> tuple[float, float]:
        """World position of the tile centre."""
        return (self.x + 0.5, self.y + 0.5)


@dataclass
class Chunk:
    """A contiguous [x_start, x_end) strip of the world."""

    index: int
    x_start: int
    x_end: int
    tiles: list[TilePlacement] = field(default_factory=list)

    @property
    def width(self) -> int:
        return self.x_end - self.x_start

    def contains_x(self, x: int) -> bool:
        return self.x_start <= x < self.x_end


def create_chunks(world_size: int, chunk_size: int) -> list[Chunk]:
    """Create every chunk up front, in order.

    Raises:
        InvalidConfigError: If sizes are not positive or world_size is not
            a multiple of chunk_size.
    """
    if world_size <= 0 or chunk_size <= 0:
        raise InvalidConfigError(
            f"World and chunk sizes must be positive (got {world_size}, {chunk_size})"
        )
    if world_size % chunk_size != 0:
        raise InvalidConfigError(
            f"World size {world_size} is not a multiple of chunk size {chunk_size}"
        )
    return [
        Chunk(index=i, x_start=i * chunk_size, x_end=(i + 1) * chunk_size)
        for i in range(world_size // chunk_size)
    ]


class TileRegistry:
    """Single source of truth for filled cells and chunk ownership.

    A coordinate is registered at most once; later attempts are no-ops.
    """

    def __init__(self, world_size: int, chunk_size: int):
        self.world_size = world_size
        self.chunk_size = chunk_size
        self.chunks = create_chunks(world_size, chunk_size)
        self._occupied: set[tuple[int, int]] = set()

    def __len__(self) -> int:
        return len(self._occupied)

    def __contains__(self, coord: tuple[int, int]) -> bool:
        return coord in self._occupied

    def contains(self, x: int, y: int) -> bool:
        return (x, y) in self._occupied

    def try_place(self, x: int, y: int) -> bool:
        """Register a coordinate.

        Returns:
            True if the coordinate was new, False if it was already filled.
        """
        key = (x, y)
        if key in self._occupied:
            return False
        self._occupied.add(key)
        return True

    def in_bounds(self, x: int) -> bool:
        """Whether x lies inside the world's column range."""
        return 0 <= x < self.world_size

    def chunk_index_of(self, x: int) -> int:
        """Chunk index owning column x (floor division, no bounds check)."""
        return x // self.chunk_size

    def chunk_for(self, x: int) -> Chunk:
        """Chunk owning column x.

        Raises:
            ChunkIndexError: If x maps outside the chunk array.
        """
        index = self.chunk_index_of(x)
        if not 0 <= index < len(self.chunks):
            raise ChunkIndexError(
                f"Column {x} maps to chunk {index}, outside 0..{len(self.chunks) - 1}"
            )
        return self.chunks[index]
