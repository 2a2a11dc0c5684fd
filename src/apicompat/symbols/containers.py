"""Metadata wrappers identifying a compared tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .model import Declaration


@dataclass(frozen=True)
class MetadataInformation:
    """Identifies one compared tree.

    Attributes:
        name: Opaque name (typically the assembly or package name)
        version: Opaque version or package tag
        display: Display tag used to tell right-hand trees apart
    """

    name: str = ""
    version: str = ""
    display: str = ""

    def __str__(self) -> str:
        return self.display or self.name or "<unnamed>"


@dataclass(frozen=True)
class ElementContainer:
    """A declaration tree paired with the metadata that identifies it."""

    element: Declaration
    metadata: Optional[MetadataInformation] = None
