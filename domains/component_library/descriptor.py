"""
Descriptor parser.

A descriptor archive is the small zip the component search engine hands
out in place of the real package. It holds an ``.epw`` text file whose
first line is the remote part id, followed by ``key=value`` metadata:

    1234567
    mna=Texas Instruments
    mpn=LM358DR
    pna=SOIC127P600X175-8N
"""

import zipfile
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from app.models.schemas import Descriptor
from app.utils.helpers import UNREADABLE_ZIP_ERRORS
from domains.component_library.exceptions import DescriptorParseError

EPW_EXTENSION = ".epw"
# .epw key -> Descriptor field
METADATA_FIELDS = {
    "mna": "mna",
    "mpn": "mpn",
    "pna": "pna",
    "sch": "sch",
    "pcb": "pcb",
    "3d": "v3d",
    "ver": "ver",
}


def from_string(text: str, source_path: Path | None = None) -> Descriptor:
    """
    Parse the text of an .epw file.

    Args:
        text: File content
        source_path: Dropped file the text came from, kept for logging

    Returns:
        Parsed descriptor

    Raises:
        DescriptorParseError: If no valid id is present
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]

    if not lines:
        raise DescriptorParseError("Descriptor is empty")

    fields = {"id": lines[0]}
    for line in lines[1:]:
        key, sep, value = line.partition('=')
        name = METADATA_FIELDS.get(key.strip().lower())
        if sep and name:
            fields[name] = value.strip()

    try:
        return Descriptor(source_path=source_path, **fields)
    except ValidationError as e:
        raise DescriptorParseError(f"Invalid descriptor id '{lines[0]}': {e.errors()[0]['msg']}") from e


def from_file(path: Path) -> Descriptor:
    """
    Read a dropped descriptor archive.

    Raises:
        DescriptorParseError: If the file is unreadable, not a zip, or holds no .epw entry
    """
    try:
        with zipfile.ZipFile(path) as archive:
            name = next(
                (n for n in archive.namelist() if n.lower().endswith(EPW_EXTENSION)),
                None,
            )
            if name is None:
                raise DescriptorParseError(f"No {EPW_EXTENSION} file in {path}")

            raw = archive.read(name)

    except UNREADABLE_ZIP_ERRORS as e:
        raise DescriptorParseError(f"{path} is not a readable zip archive: {e}") from e
    except OSError as e:
        raise DescriptorParseError(f"Could not read {path}: {e}") from e

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DescriptorParseError(f"{name} in {path} is not valid UTF-8") from e

    descriptor = from_string(text, source_path=path)
    logger.debug(f"Parsed descriptor {descriptor.id} from {path}")
    return descriptor
