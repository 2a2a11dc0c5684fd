"""ApiComparer: the public entry point of the difference engine.

Three forms are offered, all sharing one settings value and one rule list:

    comparer = ApiComparer(ComparerSettings(include_internal_symbols=True))

    # left tree vs right tree
    diffs = comparer.get_differences(left_asm, right_asm)

    # assembly set vs assembly set (paired by name)
    diffs = comparer.get_differences([a1, a2], [b1, b2])

    # one left vs N rights -> [(left_meta, right_meta, diffs), ...] in input order
    rows = comparer.get_differences(left_container, right_containers)

Every difference passes through the suppression filters before it is
returned.  Right-hand comparisons share no mutable state, so the fan-out
runs them on a thread pool when ``settings.workers`` > 1.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Sequence, Union

from ..config import DEFAULT_SETTINGS, ComparerSettings
from ..exceptions import InvalidInputError, RightComparisonError
from ..logging_config import get_logger
from ..symbols.containers import ElementContainer, MetadataInformation
from ..symbols.model import Declaration, DeclarationKind
from .differences import CompatDifference, ComparisonResult
from .matcher import TreeMatcher
from .rules import Rule, default_rules
from .suppression import Suppressor

logger = get_logger(__name__)

FanOutRow = tuple[MetadataInformation, MetadataInformation, list[CompatDifference]]


class ApiComparer:
    """Compares a left surface against one or many right surfaces.

    Settings are fixed at construction; build a new comparer to change them.
    """

    def __init__(
        self,
        settings: Optional[ComparerSettings] = None,
        rules: Optional[Sequence[Rule]] = None,
    ):
        self.settings = settings or DEFAULT_SETTINGS
        self.rules: tuple[Rule, ...] = tuple(default_rules() if rules is None else rules)
        self._matcher = TreeMatcher(self.rules, self.settings)
        self._suppressor = Suppressor.from_settings(self.settings)

    # ── Dispatch ─────────────────────────────────────────────────────

    def get_differences(
        self, left: Any, right: Any
    ) -> Union[list[CompatDifference], list[FanOutRow]]:
        """Compare by argument shape.

        - ``(Declaration, Declaration)``: one assembly pair
        - ``(ElementContainer, sequence of ElementContainer)``: fan-out
        - ``(sequence of Declaration, sequence of Declaration)``: assembly sets

        Raises:
            InvalidInputError: If the arguments match none of the forms
        """
        if isinstance(left, Declaration) and isinstance(right, Declaration):
            return self.compare_assemblies(left, right)
        if isinstance(left, ElementContainer):
            if not _is_sequence(right):
                raise InvalidInputError("right", "fan-out expects a sequence of containers")
            return [result.as_tuple() for result in self.compare_fan_out(left, right)]
        if _is_sequence(left) and _is_sequence(right):
            return self.compare_assembly_sets(left, right)
        raise InvalidInputError(
            "left",
            f"unsupported argument types {type(left).__name__}, {type(right).__name__}",
        )

    # ── Forms ────────────────────────────────────────────────────────

    def compare_assemblies(self, left: Declaration, right: Declaration) -> list[CompatDifference]:
        """Suppressed difference list for one left/right assembly pair."""
        _require_assembly("left", left)
        _require_assembly("right", right)
        kept, _ = self._suppressor.apply(self._matcher.match_assemblies(left, right))
        return kept

    def compare_assembly_sets(
        self,
        left: Sequence[Declaration],
        right: Sequence[Declaration],
    ) -> list[CompatDifference]:
        """Element-wise comparison of two assembly sets, concatenated in left order."""
        for i, asm in enumerate(left):
            _require_assembly(f"left[{i}]", asm)
        for i, asm in enumerate(right):
            _require_assembly(f"right[{i}]", asm)
        kept, _ = self._suppressor.apply(self._matcher.match_assembly_sets(left, right))
        return kept

    def compare_fan_out(
        self,
        left: ElementContainer,
        rights: Sequence[ElementContainer],
    ) -> list[ComparisonResult]:
        """Compare ``left`` against every right, one result per right in input order.

        A right with no metadata is labelled ``target-<i>``.  With
        ``strict_isolation`` a failing right becomes a result carrying a
        :class:`RightComparisonError`; otherwise the failure propagates.

        Raises:
            InvalidInputError: If the left container, its metadata, or any
                right container is missing
        """
        if left is None or left.element is None:
            raise InvalidInputError("left", "a left container with a tree is required")
        if left.metadata is None:
            raise InvalidInputError("left", "left metadata is required")
        _require_assembly("left", left.element)

        jobs: list[tuple[int, ElementContainer, MetadataInformation]] = []
        for i, right in enumerate(rights):
            if right is None or right.element is None:
                raise InvalidInputError(f"rights[{i}]", "a right container with a tree is required")
            jobs.append((i, right, right.metadata or _ordinal_metadata(right.element, i)))

        logger.debug(
            f"Fan-out: {left.metadata} against {len(jobs)} right(s)"
            + (f" on {self.settings.workers} workers" if self.settings.parallel else "")
        )

        def run(job: tuple[int, ElementContainer, MetadataInformation]) -> ComparisonResult:
            return self._compare_one(left, *job)

        if self.settings.parallel and len(jobs) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.workers) as executor:
                # map() yields in submission order regardless of completion order
                return list(executor.map(run, jobs))
        return [run(job) for job in jobs]

    def _compare_one(
        self,
        left: ElementContainer,
        position: int,
        right: ElementContainer,
        right_meta: MetadataInformation,
    ) -> ComparisonResult:
        left_meta = left.metadata
        try:
            _require_assembly(f"rights[{position}]", right.element)
            raw = self._matcher.match_assemblies(left.element, right.element)
        except Exception as e:
            if not self.settings.strict_isolation:
                raise
            error = RightComparisonError(position, str(right_meta), e)
            logger.warning(str(error))
            return ComparisonResult(left_meta, right_meta, error=error)

        kept, suppressed = self._suppressor.apply(raw)
        logger.debug(
            f"{right_meta}: {len(raw)} raw, {len(suppressed)} suppressed, {len(kept)} reported"
        )
        return ComparisonResult(left_meta, right_meta, tuple(kept), tuple(suppressed))


def _ordinal_metadata(tree: Declaration, position: int) -> MetadataInformation:
    return MetadataInformation(tree.name, "", f"target-{position}")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _require_assembly(argument: str, tree: Any) -> None:
    if not isinstance(tree, Declaration):
        raise InvalidInputError(argument, f"expected a Declaration, got {type(tree).__name__}")
    if tree.kind is not DeclarationKind.ASSEMBLY:
        raise InvalidInputError(argument, f"expected an assembly root, got {tree.kind.value}")


__all__ = ["ApiComparer", "FanOutRow"]
