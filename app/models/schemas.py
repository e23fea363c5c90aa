"""
Pydantic models for Library Loader.

Shared data models across the application.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# A file set: relative output name -> content
Files = Dict[str, bytes]


# =====================================================
# Output Format Models
# =====================================================

class Ecad(str, Enum):
    """Target layouts a component package can be converted to."""
    EAGLE = "eagle"
    EASYEDA = "easyeda"
    KICAD = "kicad"
    ZIP = "zip"  # passthrough, archive saved unmodified


class Format(BaseModel):
    """One configured target layout and where its output goes."""
    model_config = ConfigDict(frozen=True)

    ecad: Ecad
    output_path: Path

    @property
    def is_passthrough(self) -> bool:
        return self.ecad is Ecad.ZIP


# =====================================================
# Descriptor Models
# =====================================================

class Descriptor(BaseModel):
    """Reference to a remote component package, read from an .epw file."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    mna: Optional[str] = None  # manufacturer name
    mpn: Optional[str] = None  # manufacturer part number
    pna: Optional[str] = None  # package name
    sch: Optional[str] = None
    pcb: Optional[str] = None
    v3d: Optional[str] = None
    ver: Optional[str] = None
    source_path: Optional[Path] = None

    @field_validator("id")
    @classmethod
    def id_has_no_whitespace(cls, value: str) -> str:
        if any(c.isspace() for c in value):
            raise ValueError("descriptor id must not contain whitespace")
        return value
