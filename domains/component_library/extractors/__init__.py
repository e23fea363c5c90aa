"""
Format-specific extractors.

One extractor per converting format; the passthrough format never
reaches archive extraction.
"""

from app.models.schemas import Ecad
from domains.component_library.exceptions import InternalError
from domains.component_library.extractors.base import Extractor
from domains.component_library.extractors.eagle import EagleExtractor
from domains.component_library.extractors.easyeda import EasyEDAExtractor
from domains.component_library.extractors.kicad import KicadExtractor


def extractor_for(ecad: Ecad) -> Extractor:
    """
    Return the extractor for a converting format.

    Raises:
        InternalError: For the passthrough format or an unhandled tag
    """
    if ecad is Ecad.EAGLE:
        return EagleExtractor()
    if ecad is Ecad.EASYEDA:
        return EasyEDAExtractor()
    if ecad is Ecad.KICAD:
        return KicadExtractor()
    if ecad is Ecad.ZIP:
        raise InternalError("Passthrough format reached archive extraction")
    raise InternalError(f"No extractor for format {ecad!r}")


__all__ = [
    "Extractor",
    "EagleExtractor",
    "EasyEDAExtractor",
    "KicadExtractor",
    "extractor_for",
]
