"""Command-line interface for world generation."""

import argparse
import logging
import time
from collections.abc import Sequence

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog console output."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a deterministic 2D tile world"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path or name of a TOML config in configs/ (default: built-in defaults)",
    )
    parser.add_argument(
        "--seed", type=float, default=None, help="World seed (default: config or random)"
    )
    parser.add_argument(
        "--world-size", type=int, default=None, help="World width in tiles"
    )
    parser.add_argument(
        "--chunk-size", type=int, default=None, help="Chunk width in tiles"
    )
    parser.add_argument(
        "--no-caves", action="store_true", help="Disable cave carving"
    )
    parser.add_argument(
        "--validate", action="store_true", help="Validate the world after generation"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for world generation."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from pydantic import ValidationError

    from .config import WorldGenConfig, find_config, load_config, with_overrides
    from .exceptions import WorldGenError
    from .generator import generate_world
    from .validation import validate_world

    if args.config:
        try:
            config_path = find_config(args.config)
        except FileNotFoundError as e:
            logger.error("config_not_found", path=args.config, error=str(e))
            return 1
        try:
            config = load_config(config_path)
        except ValidationError as e:
            logger.error("invalid_config", path=str(config_path), error=str(e))
            return 1
        logger.info("config_loaded", path=str(config_path))
    else:
        config = WorldGenConfig()
        logger.info("using_default_config")

    # Apply CLI overrides
    overrides: dict = {}
    if args.seed is not None:
        overrides["seed"] = int(args.seed) if args.seed.is_integer() else args.seed
    if args.world_size is not None:
        overrides["world_size"] = args.world_size
    if args.chunk_size is not None:
        overrides["chunk_size"] = args.chunk_size
    if args.no_caves:
        overrides["generate_caves"] = False
    if overrides:
        try:
            config = with_overrides(config, overrides)
        except ValidationError as e:
            logger.error("invalid_override", overrides=overrides, error=str(e))
            return 1

    start_time = time.time()
    try:
        result = generate_world(config)
    except WorldGenError as e:
        logger.error("generation_failed", error=str(e))
        return 1
    gen_time = time.time() - start_time

    print()
    print(f"Generated {config.world_size}-wide world with seed {result.seed} in {gen_time:.2f}s")
    print(f"  tiles: {len(result.placements):,} across {len(result.chunks)} chunks")
    for kind, count in sorted(result.kind_counts().items(), key=lambda kv: kv[0].value):
        print(f"  {kind.value}: {count:,}")
    print(f"  decorations: {len(result.decorations)}")

    if args.validate:
        validation = validate_world(result)
        if not validation.passed:
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
