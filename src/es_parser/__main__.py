"""
Main entry point for es-parser.
Usage: python -m es_parser PLUGINS_JSON [options]
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .game_data import Exporter, GameDataService, GameDataFileLoader
from .settings import AppSettings, ConfigError
from .utils.logging_config import setup_logging


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="es-parser",
        description="Parse Endless Sky data files into JSON ship, outfit and effect lists.",
    )
    parser.add_argument("plugins", help="JSON file listing the data sources to parse")
    parser.add_argument("--settings", help="INI file to read settings from")
    parser.add_argument("--output", help="output directory (overrides output/data_dir)")
    parser.add_argument("--workers", type=int, help="number of parser threads")
    parser.add_argument(
        "--verbose", action="store_true", help="log DEBUG messages to the console"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_arg_parser().parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")

    settings = AppSettings(settings_file=args.settings)
    setup_logging(settings, "DEBUG" if args.verbose else None)
    logger.info(f"Configuration loaded from {settings.get_settings_file_path()}")

    validation = settings.validate()
    for warning in validation.warnings:
        logger.warning(f"  {warning}")
    if not validation.is_valid:
        logger.error("Configuration validation failed:")
        for error in validation.errors:
            logger.error(f"  {error}")
        return 1

    try:
        sources = GameDataFileLoader().load_plugins(args.plugins)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    service = GameDataService(settings)
    if args.workers is not None and args.workers > 0:
        service.max_workers = args.workers
    results = service.parse_directories(sources)

    data_dir = args.output or settings.output.data_dir
    exporter = Exporter(data_dir, pretty=settings.output.pretty)
    exporter.write(results, sources)

    for source in sources:
        counts = results[source.name].counts()
        print(
            f"{source.label}: {counts['ships']} ships, {counts['variants']} variants, "
            f"{counts['outfits']} outfits, {counts['effects']} effects"
        )

    if settings.is_first_run:
        settings.set_first_run_complete()
    return 0


if __name__ == "__main__":
    sys.exit(main())
