"""Custom exceptions for world generation."""


class WorldGenError(Exception):
    """Base exception for world generation errors."""

    pass


class InvalidConfigError(WorldGenError):
    """Raised when a configuration cannot produce a valid world."""

    pass


class MissingVariantsError(InvalidConfigError):
    """Raised when a tile kind has no sprite variants to choose from."""

    pass


class ChunkIndexError(WorldGenError):
    """Raised when a coordinate falls outside the chunk array."""

    pass
