"""KiCad extractor.

Layout produced under the library directory:

    <part>.lib, <part>.dcm          symbols and their docs
    LibraryLoader.pretty/*.kicad_mod footprints
    LibraryLoader.3dshapes/*.step   3D models (.stp, .step, .wrl)

Any other entry (other tools' files, readmes) is skipped.
"""

from typing import BinaryIO

from app.models.schemas import Files
from domains.component_library.extractors.base import Extractor

FOOTPRINT_DIR = "LibraryLoader.pretty"
SHAPES_DIR = "LibraryLoader.3dshapes"

SYMBOL_SUFFIXES = {".lib", ".dcm"}
FOOTPRINT_SUFFIXES = {".kicad_mod"}
SHAPE_SUFFIXES = {".stp", ".step", ".wrl"}


class KicadExtractor(Extractor):

    def extract(self, files: Files, entry_name: str, reader: BinaryIO) -> None:
        suffix = self.suffix(entry_name)
        name = self.basename(entry_name)

        if suffix in SYMBOL_SUFFIXES:
            target = name
        elif suffix in FOOTPRINT_SUFFIXES:
            target = f"{FOOTPRINT_DIR}/{name}"
        elif suffix in SHAPE_SUFFIXES:
            target = f"{SHAPES_DIR}/{name}"
        else:
            return

        self.add(files, target, self.read(entry_name, reader))
