"""
Refresh hook.

After a library is saved, a user-provided shell script living two levels
above the save directory is run so that dependent tools can pick up the
new files. The script's behaviour is up to the user; only its output and
exit status are logged.
"""

import os
import subprocess
from pathlib import Path
from typing import Optional

from loguru import logger

from domains.component_library.exceptions import HookError

DEFAULT_SCRIPT_NAME = "refresh_libraries.sh"


def refresh_script_path(save_path: Path, script_name: str = DEFAULT_SCRIPT_NAME) -> Path:
    """Location of the refresh script for a save directory."""
    return Path(os.path.normpath(save_path / ".." / ".." / script_name))


def run_refresh_script(
    save_path: Path,
    script_name: str = DEFAULT_SCRIPT_NAME,
    timeout: Optional[float] = 60.0,
) -> Optional[subprocess.CompletedProcess]:
    """
    Run the refresh script for ``save_path`` through bash, without arguments.

    Args:
        save_path: Directory a library was just saved to
        script_name: Script file name
        timeout: Seconds before the script is killed

    Returns:
        Completed process, or None if no script exists

    Raises:
        HookError: If the script cannot be spawned or times out
    """
    script = refresh_script_path(save_path, script_name)

    if not script.is_file():
        logger.debug(f"No refresh script at {script}, skipping")
        return None

    try:
        result = subprocess.run(
            ["bash", str(script)],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise HookError(f"Refresh script {script} timed out after {timeout}s") from e
    except OSError as e:
        raise HookError(f"Error refreshing libraries: {e}, {script}") from e

    output = (result.stdout + result.stderr).strip()

    if result.returncode == 0:
        logger.info(f"Refreshed libs: {output or '(no output)'}")
    else:
        logger.warning(f"Refresh script {script} exited with {result.returncode}: {output}")

    return result
