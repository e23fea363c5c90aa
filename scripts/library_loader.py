#!/usr/bin/env python3
"""Watch a download folder and turn descriptor archives into CAD libraries.

Settings come from ``LL_*`` environment variables or a ``.env`` file; the
options below override them for one run.
"""

from __future__ import annotations

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from app.utils.config import Settings, get_settings
from app.utils.logs import configure_logging
from domains.component_library.exceptions import LibraryLoaderError
from domains.component_library.watchers.filesystem import LibraryWatcher


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(
        description="Download component libraries referenced by dropped archives.",
    )
    parser.add_argument(
        "--watch-path",
        default=None,
        help="Directory to watch (default: LL_WATCH_PATH or ~/Downloads).",
    )
    parser.add_argument(
        "--recursive",
        action="store_true",
        default=None,
        help="Also watch subdirectories.",
    )
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        default=[],
        metavar="ECAD=PATH",
        help="Output format and directory, e.g. kicad=~/libs (can be repeated).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LL_LOG_LEVEL or INFO).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    parser.add_argument(
        "--once",
        type=Path,
        default=None,
        metavar="ARCHIVE",
        help="Process a single descriptor archive and exit instead of watching.",
    )

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Apply command line overrides to the environment settings."""

    overrides = {}
    if args.watch_path is not None:
        overrides["watch_path"] = args.watch_path
    if args.recursive is not None:
        overrides["recursive"] = args.recursive
    if args.formats:
        overrides["formats"] = ",".join(args.formats)
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.log_file is not None:
        overrides["log_file"] = args.log_file

    return get_settings().model_copy(update=overrides)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI script."""

    args = parse_args(argv)

    try:
        settings = build_settings(args)
    except ValidationError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_logging(settings.log_level, settings.log_file)

    try:
        watcher = LibraryWatcher(settings)
    except LibraryLoaderError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if args.once is not None:
        try:
            saved = watcher.process_archive(args.once)
        except LibraryLoaderError as e:
            logger.error(f"{type(e).__name__}: {e}")
            return 1
        finally:
            watcher.search_engine.close()
        return 0 if saved else 1

    try:
        watcher.start()
    except LibraryLoaderError as e:
        logger.error(f"Could not start watcher: {e}")
        watcher.search_engine.close()
        return 1

    stop_event = threading.Event()

    def _signal_handler(signum, frame):  # noqa: D401
        logger.info(f"Received signal {signum}, shutting down.")
        stop_event.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        while not stop_event.is_set() and watcher.is_running:
            stop_event.wait(1.0)
    finally:
        watcher.stop()
        watcher.search_engine.close()

    logger.info("Library loader stopped.")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(main())
