"""Symbol provider protocol and path-based provider selection."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, Union

from ..exceptions import ProviderError, UnsupportedSourceError
from ..symbols.containers import ElementContainer
from ..symbols.model import Declaration

Source = Union[str, Path]


class SymbolProvider(Protocol):
    """Turns an on-disk surface into an immutable declaration tree.

    Providers do all I/O and validation; the engine only ever sees
    well-formed trees.
    """

    name: str

    def load(self, source: Source) -> Declaration: ...

    def load_container(self, source: Source, display: Optional[str] = None) -> ElementContainer: ...


def provider_for(source: Source) -> SymbolProvider:
    """Pick a provider by path type.

    ``*.json`` files are manifests; directories and ``*.py`` files are
    Python sources.

    Raises:
        ProviderError: If the path does not exist
        UnsupportedSourceError: If no provider handles the path
    """
    from .json_manifest import JsonManifestProvider
    from .python_source import PythonSourceProvider

    path = Path(source)
    if not path.exists():
        raise ProviderError(f"Surface source not found: {path}", details={"path": str(path)})
    if path.is_file() and path.suffix == ".json":
        return JsonManifestProvider()
    if path.is_dir() or path.suffix == ".py":
        return PythonSourceProvider()
    raise UnsupportedSourceError(path)


def load_container(source: Source, display: Optional[str] = None) -> ElementContainer:
    """Load ``source`` with whichever provider handles it."""
    return provider_for(source).load_container(source, display)
