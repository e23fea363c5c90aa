"""EasyEDA extractor.

Packages carry the EasyEDA documents in an ``EasyEDA/`` folder; its
``.json`` and ``.txt`` files are kept under their base name. Entries
outside that folder belong to other tools and are skipped.
"""

from pathlib import PurePosixPath
from typing import BinaryIO

from app.models.schemas import Files
from domains.component_library.extractors.base import Extractor

EASYEDA_FOLDER = "easyeda"
EASYEDA_SUFFIXES = {".json", ".txt"}


class EasyEDAExtractor(Extractor):

    def extract(self, files: Files, entry_name: str, reader: BinaryIO) -> None:
        parts = [p.lower() for p in PurePosixPath(entry_name.replace('\\', '/')).parts[:-1]]
        if EASYEDA_FOLDER not in parts:
            return
        if self.suffix(entry_name) not in EASYEDA_SUFFIXES:
            return
        self.add(files, self.basename(entry_name), self.read(entry_name, reader))
