"""Symbol providers: build declaration trees from manifests and Python sources."""

from .base import SymbolProvider, load_container, provider_for
from .json_manifest import JsonManifestProvider
from .python_source import PythonSourceProvider

__all__ = [
    "JsonManifestProvider",
    "PythonSourceProvider",
    "SymbolProvider",
    "load_container",
    "provider_for",
]
