"""
Logging setup for Library Loader.

All modules log through the loguru ``logger``; every sink added here
receives every message, so stdout and the optional log file fan out the
same stream.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def configure_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """
    Replace loguru's default sink with the application sinks.

    Args:
        level: Minimum level for all sinks
        log_file: Optional file sink, rotated at 10 MB
    """
    logger.remove()
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=level.upper())

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            format=FILE_FORMAT,
            level=level.upper(),
            rotation="10 MB",
            retention=5,
            enqueue=True,
        )
