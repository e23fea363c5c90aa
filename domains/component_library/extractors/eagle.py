"""EAGLE extractor: keeps ``.lbr`` library files, skips everything else."""

from typing import BinaryIO

from app.models.schemas import Files
from domains.component_library.extractors.base import Extractor


class EagleExtractor(Extractor):

    def extract(self, files: Files, entry_name: str, reader: BinaryIO) -> None:
        if self.suffix(entry_name) != ".lbr":
            return
        self.add(files, self.basename(entry_name), self.read(entry_name, reader))
