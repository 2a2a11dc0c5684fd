"""Symbol provider exceptions: manifests and source trees that cannot be loaded."""

from pathlib import Path
from typing import Optional

from .base import ApiCompatError


class ProviderError(ApiCompatError):
    """Base class for errors raised while building a declaration tree."""

    pass


class ManifestError(ProviderError):
    """Raised when a JSON surface manifest is malformed."""

    def __init__(self, path: Optional[Path], reason: str):
        location = str(path) if path is not None else "<memory>"
        super().__init__(
            f"Invalid surface manifest: {location}",
            details={"path": location, "reason": reason},
        )
        self.path = path
        self.reason = reason


class ParsingError(ProviderError):
    """Raised when a source file cannot be parsed."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Failed to parse source file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class UnsupportedSourceError(ProviderError):
    """Raised when no provider can load the given path."""

    def __init__(self, path: Path):
        super().__init__(
            f"Unsupported surface source: {path}",
            details={"path": str(path), "expected": "JSON manifest or Python package directory"},
        )
        self.path = path
