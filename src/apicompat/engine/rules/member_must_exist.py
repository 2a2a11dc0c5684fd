"""MEMBER_MUST_EXIST (CP0002) — members on the left must exist on the right.

Members match by full signature: an overload whose parameter list changed
has a different identity and is reported as removed.
"""

from __future__ import annotations

from ...symbols.model import DeclarationKind
from ..differences import DiagnosticIds
from .base import MustExistRule


class MemberMustExist(MustExistRule):
    """Detects methods, fields, properties and events removed on the right."""

    rule_id = DiagnosticIds.MEMBER_MUST_EXIST
    applies_to = frozenset({DeclarationKind.MEMBER})
