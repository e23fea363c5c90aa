"""Shared contract for format-specific archive extractors."""

import zipfile
import zlib
from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import BinaryIO

from app.models.schemas import Files
from domains.component_library.exceptions import ExtractionError


class Extractor(ABC):
    """Places archive entries of a component package into a file set."""

    @abstractmethod
    def extract(self, files: Files, entry_name: str, reader: BinaryIO) -> None:
        """
        Add zero or more entries to ``files`` for one archive entry.

        Args:
            files: File set being built, mutated in place
            entry_name: Name of the entry inside the archive
            reader: Open stream over the entry content

        Raises:
            ExtractionError: If the entry cannot be placed
        """

    @staticmethod
    def basename(entry_name: str) -> str:
        return PurePosixPath(entry_name.replace('\\', '/')).name

    @staticmethod
    def suffix(entry_name: str) -> str:
        return PurePosixPath(entry_name.replace('\\', '/')).suffix.lower()

    @staticmethod
    def add(files: Files, name: str, content: bytes) -> None:
        """Insert ``name`` into ``files``, refusing to overwrite."""
        if name in files:
            raise ExtractionError(f"Duplicate output file '{name}' in package")
        files[name] = content

    @staticmethod
    def read(entry_name: str, reader: BinaryIO) -> bytes:
        try:
            return reader.read()
        except (OSError, EOFError, zipfile.BadZipFile, zlib.error) as e:
            raise ExtractionError(f"Could not read archive entry '{entry_name}': {e}") from e
