"""
Configuration management for Library Loader.

Uses pydantic-settings to load configuration from environment variables
and .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.schemas import Ecad, Format
from app.utils.helpers import expand_path
from domains.component_library.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Component search engine profile
    profile_username: str = ""
    profile_password: str = ""
    cse_base_url: str = "http://componentsearchengine.com/ga/model.php?partID="
    request_timeout: float = 30.0  # seconds

    # Watch Configuration
    watch_path: str = "~/Downloads"
    recursive: bool = False
    grace_period: float = 0.1  # seconds
    settle_timeout: float = 5.0  # seconds

    # Output formats, "ecad=path" pairs
    formats: str = "zip=~/LibraryLoader/zip"

    # Refresh hook
    refresh_enabled: bool = True
    refresh_script_name: str = "refresh_libraries.sh"
    refresh_timeout: float = 60.0  # seconds

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_prefix="LL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_token(self) -> str:
        """Profile credential in ``username:password`` form."""
        return f"{self.profile_username}:{self.profile_password}"

    def get_watch_path(self) -> Path:
        """Expand the watch path."""
        return expand_path(self.watch_path)

    def get_formats(self) -> list[Format]:
        """Parse configured formats into a list of Format values."""
        return parse_formats(self.formats.split(','))


def parse_formats(pairs: list[str]) -> list[Format]:
    """
    Parse ``ecad=output_path`` pairs.

    Args:
        pairs: Raw pair strings, blanks are skipped

    Returns:
        List of formats in configured order

    Raises:
        ConfigurationError: On malformed pairs, unknown ecad tags or no formats
    """
    formats = []

    for pair in pairs:
        pair = pair.strip()
        if not pair:
            continue

        ecad, sep, output_path = pair.partition('=')
        if not sep or not output_path.strip():
            raise ConfigurationError(f"Invalid format entry '{pair}', expected ecad=path")

        try:
            tag = Ecad(ecad.strip().lower())
        except ValueError:
            known = ", ".join(e.value for e in Ecad)
            raise ConfigurationError(f"Unknown format '{ecad.strip()}' (known: {known})") from None

        formats.append(Format(ecad=tag, output_path=expand_path(output_path.strip())))

    if not formats:
        raise ConfigurationError("No output formats configured")

    return formats


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
