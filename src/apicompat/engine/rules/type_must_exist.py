"""TYPE_MUST_EXIST (CP0001) — assemblies and types on the left must exist on the right.

A type satisfied through a forwarding record counts as present; forwarding
establishes existence only, so the matcher does not descend into it.
"""

from __future__ import annotations

from ...symbols.model import DeclarationKind
from ..differences import DiagnosticIds
from .base import MustExistRule


class TypeMustExist(MustExistRule):
    """Detects assemblies, types and nested types removed on the right."""

    rule_id = DiagnosticIds.TYPE_MUST_EXIST
    applies_to = frozenset(
        {
            DeclarationKind.ASSEMBLY,
            DeclarationKind.TYPE,
            DeclarationKind.NESTED_TYPE,
        }
    )
