"""
Helper utilities for Library Loader.

Common path functions used across domains.
"""

import os
import re
import time
import zipfile
import zlib
from pathlib import Path

from domains.component_library.exceptions import ConfigurationError

_UNEXPANDED_VAR = re.compile(r'\$\{?[A-Za-z_][A-Za-z0-9_]*\}?')

# Raised by zipfile for corrupt, truncated, encrypted or unsupported entries
UNREADABLE_ZIP_ERRORS = (zipfile.BadZipFile, NotImplementedError, RuntimeError, EOFError, zlib.error)


def expand_path(path: str) -> Path:
    """
    Expand ``~`` and environment variables in a path string.

    Args:
        path: Path string from configuration

    Returns:
        Expanded Path

    Raises:
        ConfigurationError: If a referenced environment variable is undefined
    """
    expanded = os.path.expandvars(os.path.expanduser(path))

    match = _UNEXPANDED_VAR.search(expanded)
    if match:
        raise ConfigurationError(f"Undefined variable {match.group(0)} in path '{path}'")

    return Path(expanded)


def normalise_path(path: Path) -> Path:
    """Return a resolved version of ``path`` without forcing existence."""

    try:
        return path.expanduser().resolve()
    except FileNotFoundError:
        return path.expanduser().absolute()


def get_file_extension(path: Path) -> str:
    """Get file extension without dot."""
    return path.suffix.lstrip('.')


def has_extension(path: Path, extension: str) -> bool:
    """Case-insensitive extension check (``extension`` without dot)."""
    return get_file_extension(path).lower() == extension.lower()


def wait_for_stable_file(
    path: Path,
    grace_period: float,
    settle_timeout: float,
    poll_interval: float = 0.05,
) -> bool:
    """
    Wait until a freshly created file stops growing.

    Sleeps ``grace_period`` first, then polls the file size until two
    consecutive reads agree or ``settle_timeout`` runs out.

    Returns:
        True if the size settled, False on timeout or if the file vanished
    """
    if grace_period > 0:
        time.sleep(grace_period)

    deadline = time.monotonic() + settle_timeout
    last_size = None

    while True:
        try:
            size = path.stat().st_size
        except FileNotFoundError:
            return False

        if size == last_size:
            return True
        last_size = size

        if time.monotonic() >= deadline:
            return False
        time.sleep(poll_interval)


def format_bytes(bytes_count: int) -> str:
    """Format bytes as human-readable string."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_count < 1024.0:
            return f"{bytes_count:.1f} {unit}"
        bytes_count /= 1024.0
    return f"{bytes_count:.1f} PB"
