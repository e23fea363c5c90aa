"""Fetch results and the save sink that writes them to disk."""

from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from app.models.schemas import Files, Format
from app.utils.helpers import format_bytes
from domains.component_library.exceptions import SaveError


class FetchResult(BaseModel):
    """A converted component package ready to be saved."""
    model_config = ConfigDict(frozen=True)

    format: Format
    output_path: Path
    files: Files = Field(default_factory=dict)

    def save(self) -> Path:
        """
        Write every file of the set below ``output_path``.

        Names may contain ``/`` separators; their folders are created.

        Returns:
            The directory the files were written to

        Raises:
            SaveError: On any filesystem failure, already written files are kept
        """
        try:
            self.output_path.mkdir(parents=True, exist_ok=True)

            for name, content in self.files.items():
                target = self.output_path / name
                if ".." in Path(name).parts or Path(name).is_absolute():
                    raise SaveError(f"Refusing to write '{name}' outside {self.output_path}")
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(content)
                logger.debug(f"Wrote {target} ({format_bytes(len(content))})")

        except OSError as e:
            raise SaveError(f"Could not save to {self.output_path}: {e}") from e

        return self.output_path
