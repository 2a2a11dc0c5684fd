"""Accessibility filter — decides which declarations form the observable surface."""

from __future__ import annotations

from .model import Accessibility, Declaration

# Visible to any consumer of the assembly.
_ALWAYS_OBSERVABLE = frozenset(
    {
        Accessibility.PUBLIC,
        Accessibility.PROTECTED,
        Accessibility.PROTECTED_INTERNAL,
    }
)

# Visible to friend assemblies; part of the surface only on request.
_INTERNAL = frozenset(
    {
        Accessibility.INTERNAL,
        Accessibility.PRIVATE_PROTECTED,
    }
)


def is_observable(declaration: Declaration, include_internal_symbols: bool = False) -> bool:
    """Return True if ``declaration`` is part of the observable surface.

    Public (and protected) declarations are always observable.  Internal ones
    are observable only when ``include_internal_symbols`` is set.  Private
    declarations never are.
    """
    access = declaration.accessibility
    if access in _ALWAYS_OBSERVABLE:
        return True
    if access in _INTERNAL:
        return include_internal_symbols
    return False
