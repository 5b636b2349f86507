"""
Command-line entry point for tile-atlas.
Usage: python -m tile_atlas DEFINITIONS [--cache-root DIR] [--query INDEX --time MS]
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from . import __version__
from .atlas import TileAtlasService
from .settings import AppSettings, ConfigError
from .utils.logging_config import setup_logging


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tile_atlas",
        description="Pack tile definitions into cached texture atlas pages.",
    )
    parser.add_argument("definitions", help="JSON tile definition file")
    parser.add_argument("--cache-root", help="Cache directory (default from settings)")
    parser.add_argument("--base-path", help="Directory source image paths are relative to")
    parser.add_argument("--settings-file", help="INI file to read settings from")
    parser.add_argument("--query", type=int, help="Tile index to resolve")
    parser.add_argument("--time", type=int, default=0, help="Elapsed milliseconds for --query")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug console output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point."""
    args = parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")
    try:
        settings = AppSettings(file_path=args.settings_file)
        setup_logging(settings, verbose=args.verbose)
        logger.info(f"Configuration loaded from {settings.get_settings_file_path()}")

        validation = settings.validate()
        for warning in validation.warnings:
            logger.warning(f"  {warning}")
        if not validation.is_valid:
            raise ConfigError("; ".join(validation.errors))

        service = TileAtlasService(
            cache_root=args.cache_root,
            settings=settings,
            base_path=args.base_path,
        )
        atlas = service.from_config(args.definitions)

        decision = service.last_decision.value if service.last_decision else "unknown"
        logger.info(
            f"Atlas ready ({decision}): {len(atlas.locations)} tiles "
            f"in {len(atlas.frames)} frames on {atlas.passes} page(s)"
        )

        if args.query is not None:
            u, v = atlas.texture_offset(args.query, args.time)
            print(f"{args.query} page={atlas.tile_page_index(args.query)} offset=({u:.6f}, {v:.6f})")

        return 0

    except ConfigError as e:
        logger.error(f"Configuration validation failed: {e}")
        return 1
    except Exception:
        logger.exception("Unhandled exception in main")
        return 1


if __name__ == "__main__":
    sys.exit(main())
