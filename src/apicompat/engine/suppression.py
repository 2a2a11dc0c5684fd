"""Difference suppression: global rule-id filter plus (rule id, target) filter.

Both filters are set-membership tests and never edit a difference.  What
they drop is handed back alongside what they keep, so callers can report
suppression entries that no longer match anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..config import ComparerSettings, SuppressionEntry, parse_rule_ids, parse_suppressions
from .differences import CompatDifference, ComparisonResult


@dataclass(frozen=True)
class Suppressor:
    """Immutable pair of suppression filters.

    Attributes:
        no_warn: Rule ids dropped everywhere
        ignored: Exact (rule id, target) pairs to drop
    """

    no_warn: frozenset[str] = field(default_factory=frozenset)
    ignored: frozenset[SuppressionEntry] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Frozen: normalise through object.__setattr__
        object.__setattr__(self, "no_warn", parse_rule_ids(self.no_warn))
        object.__setattr__(self, "ignored", parse_suppressions(self.ignored))

    @classmethod
    def from_settings(cls, settings: ComparerSettings) -> Suppressor:
        return cls(settings.no_warn, settings.ignored_differences)

    def is_suppressed(self, difference: CompatDifference) -> bool:
        if difference.rule_id.upper() in self.no_warn:
            return True
        return (difference.rule_id.upper(), difference.target) in self.ignored

    def apply(
        self, differences: Iterable[CompatDifference]
    ) -> tuple[list[CompatDifference], list[CompatDifference]]:
        """Split ``differences`` into (kept, suppressed), both in input order."""
        kept: list[CompatDifference] = []
        suppressed: list[CompatDifference] = []
        for difference in differences:
            (suppressed if self.is_suppressed(difference) else kept).append(difference)
        return kept, suppressed

    def filter(self, differences: Iterable[CompatDifference]) -> list[CompatDifference]:
        return self.apply(differences)[0]


def stale_suppressions(
    settings: ComparerSettings,
    results: Iterable[ComparisonResult],
) -> list[SuppressionEntry]:
    """Specific suppression entries that matched no difference in any result.

    Global (rule-id) suppressions are not reported: suppressing a whole rule
    class is a policy, not a claim about one declaration.
    """
    used = {
        (d.rule_id.upper(), d.target)
        for result in results
        for d in result.suppressed
    }
    return sorted(entry for entry in settings.ignored_differences if entry not in used)
