"""Rule protocol and the inputs a rule is evaluated against."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol

from ...symbols.accessibility import is_observable
from ...symbols.identity import kind_name, strip_prefix
from ...symbols.model import Declaration, DeclarationKind
from ..differences import CompatDifference, DifferenceType

if TYPE_CHECKING:
    from ...config import ComparerSettings


@dataclass(frozen=True)
class Match:
    """A left declaration paired with its right counterpart, if any.

    Attributes:
        identity: Identity of the left declaration
        left: The left declaration (always present)
        right: Counterpart found directly or through an alias, else None
        via_alias: True when ``right`` was found through a forwarding record
    """

    identity: str
    left: Declaration
    right: Optional[Declaration] = None
    via_alias: bool = False

    @property
    def matched(self) -> bool:
        return self.right is not None


@dataclass(frozen=True)
class RuleContext:
    """Read-only state shared by every rule evaluation of one comparison."""

    settings: ComparerSettings

    @property
    def include_internal_symbols(self) -> bool:
        return self.settings.include_internal_symbols


class Rule(Protocol):
    """A stateless compatibility check.

    Rules never see right-only declarations and never mutate their inputs.
    """

    rule_id: str
    applies_to: frozenset[DeclarationKind]

    def evaluate(self, match: Match, context: RuleContext) -> list[CompatDifference]: ...


class MustExistRule:
    """Reports a left declaration that has no right counterpart.

    Subclasses choose the rule id and the declaration kinds they cover.
    """

    rule_id: str = ""
    applies_to: frozenset[DeclarationKind] = frozenset()

    def evaluate(self, match: Match, context: RuleContext) -> list[CompatDifference]:
        if match.matched:
            return []
        if not is_observable(match.left, context.include_internal_symbols):
            return []
        return [
            CompatDifference(
                self.rule_id,
                self.message(match),
                DifferenceType.REMOVED,
                match.identity,
            )
        ]

    def message(self, match: Match) -> str:
        return (
            f"{kind_name(match.left)} '{strip_prefix(match.identity)}' "
            "exists on the left but not on the right"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rule_id})"
