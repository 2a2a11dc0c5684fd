"""Tree matcher: walks a left and a right declaration tree in lock-step.

For every container level all right-hand children are indexed by identity,
whatever their accessibility (the policy filters the left side only),
then each observable left child is paired with its counterpart (direct
lookup first, forwarding records second) and handed to every rule that
applies to its kind.  Only types matched directly on both sides are
descended into, so nothing is reported below a missing or forwarded type.

Differences come out in left insertion order (depth-first, pre-order); the
output is never sorted.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..config import DEFAULT_SETTINGS, ComparerSettings
from ..logging_config import get_logger
from ..symbols.accessibility import is_observable
from ..symbols.identity import identity_of
from ..symbols.model import Declaration, DeclarationKind
from .aliases import AliasTable, ResolvedAlias
from .differences import CompatDifference
from .rules import Match, Rule, RuleContext, default_rules

logger = get_logger(__name__)


class TreeMatcher:
    """Pairs declarations by identity and evaluates rules over the pairs.

    A matcher holds only its rule list and settings, both read-only, so one
    instance can serve several comparisons at once.
    """

    def __init__(
        self,
        rules: Optional[Sequence[Rule]] = None,
        settings: ComparerSettings = DEFAULT_SETTINGS,
    ):
        self.rules: tuple[Rule, ...] = tuple(default_rules() if rules is None else rules)
        self.settings = settings
        self._context = RuleContext(settings)

    # ── Entry points ─────────────────────────────────────────────────

    def match_assemblies(self, left: Declaration, right: Declaration) -> list[CompatDifference]:
        """Raw (unsuppressed) differences between two assembly trees."""
        right_aliases = AliasTable.for_assembly(right)
        left_aliases = AliasTable.for_assembly(left)
        logger.debug(
            f"Matching {left.name} -> {right.name} "
            f"({len(left_aliases)} left / {len(right_aliases)} right aliases)"
        )

        differences: list[CompatDifference] = []
        right_namespaces = self._namespaces(right)

        seen_namespaces: set[str] = set()
        for left_ns in left.children:
            seen_namespaces.add(left_ns.name)
            if not self._observable(left_ns):
                continue
            right_ns = right_namespaces.get(left_ns.name)
            right_index = self._index(right_ns, (right_ns,) if right_ns else ())
            declared = self._walk(
                left_ns.children, (left_ns,), right_index, right_aliases, differences
            )
            self._match_left_aliases(
                left_aliases.in_namespace(left_ns.name),
                declared,
                right_index,
                right_aliases,
                differences,
            )

        # Forwarded types whose namespace declares nothing on the left
        for ns_name in left_aliases.namespaces():
            if ns_name in seen_namespaces:
                continue
            right_ns = right_namespaces.get(ns_name)
            self._match_left_aliases(
                left_aliases.in_namespace(ns_name),
                set(),
                self._index(right_ns, (right_ns,) if right_ns else ()),
                right_aliases,
                differences,
            )

        return differences

    def match_assembly_sets(
        self,
        left: Iterable[Declaration],
        right: Iterable[Declaration],
    ) -> list[CompatDifference]:
        """Raw differences between two assembly sets, paired by assembly name.

        A left assembly with no right counterpart goes through the rules at
        assembly granularity and is not descended into.  Right-only
        assemblies are ignored.
        """
        right_by_name: dict[str, Declaration] = {}
        for asm in right:
            right_by_name.setdefault(asm.name, asm)

        differences: list[CompatDifference] = []
        for left_asm in left:
            right_asm = right_by_name.get(left_asm.name)
            match = Match(identity_of(left_asm), left_asm, right_asm)
            differences.extend(self._evaluate(match))
            if right_asm is not None:
                differences.extend(self.match_assemblies(left_asm, right_asm))
        return differences

    # ── Walk ─────────────────────────────────────────────────────────

    def _walk(
        self,
        left_children: Iterable[Declaration],
        ancestors: tuple[Declaration, ...],
        right_index: dict[str, Declaration],
        right_aliases: AliasTable,
        out: list[CompatDifference],
    ) -> set[str]:
        """Match one container level and recurse into matched types.

        Returns the identities of every left child seen at this level, so
        left-side aliases can skip identities that are declared directly.
        """
        seen: set[str] = set()
        for child in left_children:
            identity = identity_of(child, ancestors)
            seen.add(identity)
            if not self._observable(child):
                continue

            right = right_index.get(identity)
            via_alias = False
            if right is None and child.is_type:
                right = self._resolve_alias(identity, right_aliases)
                via_alias = right is not None

            out.extend(self._evaluate(Match(identity, child, right, via_alias)))

            # Missing or forwarded: nothing below this node is compared
            if child.is_type and right is not None and not via_alias:
                self._walk(
                    child.children,
                    (*ancestors, child),
                    self._index(right, (*ancestors, right)),
                    right_aliases,
                    out,
                )
        return seen

    def _match_left_aliases(
        self,
        aliases: Iterable[ResolvedAlias],
        declared: set[str],
        right_index: dict[str, Declaration],
        right_aliases: AliasTable,
        out: list[CompatDifference],
    ) -> None:
        for alias in aliases:
            if alias.identity in declared or not self._observable(alias.target):
                continue
            right = right_index.get(alias.identity)
            via_alias = False
            if right is None:
                right = self._resolve_alias(alias.identity, right_aliases)
                via_alias = right is not None
            out.extend(self._evaluate(Match(alias.identity, alias.target, right, via_alias)))

    def _evaluate(self, match: Match) -> list[CompatDifference]:
        differences: list[CompatDifference] = []
        for rule in self.rules:
            if match.left.kind in rule.applies_to:
                differences.extend(rule.evaluate(match, self._context))
        return differences

    # ── Lookup helpers ───────────────────────────────────────────────

    def _observable(self, declaration: Declaration) -> bool:
        return is_observable(declaration, self.settings.include_internal_symbols)

    # The right side is indexed whatever its accessibility: a declaration
    # that narrowed its visibility still exists.

    @staticmethod
    def _namespaces(assembly: Declaration) -> dict[str, Declaration]:
        namespaces: dict[str, Declaration] = {}
        for ns in assembly.children:
            if ns.kind is DeclarationKind.NAMESPACE:
                namespaces.setdefault(ns.name, ns)
        return namespaces

    @staticmethod
    def _index(
        container: Optional[Declaration],
        ancestors: tuple[Declaration, ...],
    ) -> dict[str, Declaration]:
        """Identity -> child of ``container`` (first one wins)."""
        if container is None:
            return {}
        index: dict[str, Declaration] = {}
        for child in container.children:
            index.setdefault(identity_of(child, ancestors), child)
        return index

    @staticmethod
    def _resolve_alias(identity: str, aliases: AliasTable) -> Optional[Declaration]:
        resolved = aliases.resolve(identity)
        return resolved.target if resolved is not None else None
