"""Data models for compatibility differences and per-right comparison results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..exceptions import ApiCompatError
from ..symbols.containers import MetadataInformation


class DiagnosticIds:
    """Rule identifiers; also the keys used by suppression configuration."""

    TYPE_MUST_EXIST = "CP0001"
    MEMBER_MUST_EXIST = "CP0002"


class DifferenceType(str, Enum):
    """Direction of a difference between left and right."""

    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


@dataclass(frozen=True)
class CompatDifference:
    """One reportable incompatibility.

    Equality is field-wise: two differences are equal iff rule id, message,
    kind and target all match.  Suppression and tests rely on this.
    """

    rule_id: str
    message: str
    difference_type: DifferenceType
    target: str  # declaration identity, e.g. "T:NS.Second"

    def __str__(self) -> str:
        return f"{self.rule_id}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {
            "rule_id": self.rule_id,
            "message": self.message,
            "difference_type": self.difference_type.value,
            "target": self.target,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing the left tree against one right tree.

    ``differences`` is what survived suppression; ``suppressed`` keeps what the
    filters removed so stale suppression entries can be reported.  ``error``
    is only set when the fan-out runs with strict isolation and this right
    failed, in which case both lists are empty.
    """

    left: MetadataInformation
    right: MetadataInformation
    differences: tuple[CompatDifference, ...] = ()
    suppressed: tuple[CompatDifference, ...] = field(default=(), compare=False)
    error: Optional[ApiCompatError] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_tuple(self) -> tuple[MetadataInformation, MetadataInformation, list[CompatDifference]]:
        """The ``(left, right, differences)`` triple of the fan-out API."""
        return self.left, self.right, list(self.differences)
