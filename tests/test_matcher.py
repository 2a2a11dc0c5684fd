"""Tests for engine/matcher.py - lock-step walk, recursion control and ordering."""

import pytest

from apicompat.config import ComparerSettings
from apicompat.engine.differences import CompatDifference, DiagnosticIds, DifferenceType
from apicompat.engine.matcher import TreeMatcher
from apicompat.engine.rules import Match, MemberMustExist, RuleContext, TypeMustExist
from apicompat.symbols.factory import (
    INTERNAL,
    PRIVATE,
    assembly,
    field,
    forward,
    method,
    namespace,
    type_decl,
)
from apicompat.symbols.model import DeclarationKind


def targets(differences):
    return [d.target for d in differences]


class RecordingRule:
    """Rule that records every match it sees and reports nothing."""

    rule_id = "TEST01"
    applies_to = frozenset(DeclarationKind)

    def __init__(self):
        self.seen: list[Match] = []

    def evaluate(self, match, context):
        self.seen.append(match)
        return []


class TestRecursionControl:
    def test_missing_container_hides_descendants(self):
        left = assembly(
            "A",
            namespace("NS", type_decl("First", type_decl("FirstNested", type_decl("SecondNested")))),
        )
        right = assembly("A", namespace("NS", type_decl("First")))

        differences = TreeMatcher().match_assemblies(left, right)

        assert targets(differences) == ["T:NS.First.FirstNested"]

    def test_matched_types_are_descended(self):
        left = assembly("A", namespace("NS", type_decl("T", method("a"), type_decl("N", field("x")))))
        right = assembly("A", namespace("NS", type_decl("T", type_decl("N"))))

        assert targets(TreeMatcher().match_assemblies(left, right)) == [
            "M:NS.T.a()",
            "F:NS.T.N.x",
        ]

    def test_forwarded_type_is_not_descended(self):
        left = assembly("A", namespace("NS", type_decl("Moved", method("Run"))))
        right = assembly("A", aliases=[forward(type_decl("Moved"), "NS")])

        assert TreeMatcher().match_assemblies(left, right) == []

    def test_filtered_left_type_is_not_descended(self):
        left = assembly(
            "A", namespace("NS", type_decl("Hidden", type_decl("Public"), accessibility=INTERNAL))
        )
        right = assembly("A", namespace("NS"))

        assert TreeMatcher().match_assemblies(left, right) == []


class TestOrdering:
    def test_depth_first_in_insertion_order(self):
        left = assembly(
            "A",
            namespace("B.NS", type_decl("Zed", method("m2"), method("m1")), type_decl("Alpha")),
            namespace("A.NS", type_decl("Gamma")),
        )
        right = assembly("A", namespace("B.NS", type_decl("Zed")))

        assert targets(TreeMatcher().match_assemblies(left, right)) == [
            "M:B.NS.Zed.m2()",
            "M:B.NS.Zed.m1()",
            "T:B.NS.Alpha",
            "T:A.NS.Gamma",
        ]

    def test_rules_run_in_list_order(self):
        left = assembly("A", namespace("NS", type_decl("T")))
        right = assembly("A", namespace("NS"))

        class Second(TypeMustExist):
            rule_id = "ZZ9999"

        differences = TreeMatcher([Second(), TypeMustExist()]).match_assemblies(left, right)

        assert [d.rule_id for d in differences] == ["ZZ9999", DiagnosticIds.TYPE_MUST_EXIST]


class TestNamespaces:
    def test_namespaces_are_never_reported(self):
        left = assembly("A", namespace("Gone", type_decl("T"), type_decl("U")))
        right = assembly("A")

        differences = TreeMatcher().match_assemblies(left, right)

        assert targets(differences) == ["T:Gone.T", "T:Gone.U"]
        assert all(d.message.startswith("Type ") for d in differences)

    def test_internal_namespace_is_skipped_on_left(self):
        left = assembly("A", namespace("pkg._impl", type_decl("Engine"), accessibility=INTERNAL))
        right = assembly("A")

        assert TreeMatcher().match_assemblies(left, right) == []

    def test_namespace_made_internal_on_right_still_matches(self):
        left = assembly("A", namespace("pkg.api", type_decl("Client")))
        right = assembly("A", namespace("pkg.api", type_decl("Client"), accessibility=INTERNAL))

        assert TreeMatcher().match_assemblies(left, right) == []


class TestRightSideAccessibility:
    def test_type_made_private_on_right_still_exists(self):
        left = assembly("A", namespace("NS", type_decl("T")))
        right = assembly("A", namespace("NS", type_decl("T", accessibility=PRIVATE)))

        assert TreeMatcher().match_assemblies(left, right) == []

    def test_members_of_a_narrowed_type_are_still_compared(self):
        left = assembly("A", namespace("NS", type_decl("T", method("Run"))))
        right = assembly("A", namespace("NS", type_decl("T", accessibility=INTERNAL)))

        assert targets(TreeMatcher().match_assemblies(left, right)) == ["M:NS.T.Run()"]

    def test_alias_to_internal_target_resolves(self):
        left = assembly("A", namespace("NS", type_decl("T")))
        right = assembly("A", aliases=[forward(type_decl("T", accessibility=INTERNAL), "NS")])

        assert TreeMatcher().match_assemblies(left, right) == []


class TestAliasResolution:
    def test_direct_match_is_preferred_over_alias(self):
        rule = RecordingRule()
        left = assembly("A", namespace("NS", type_decl("T", method("m"))))
        right = assembly(
            "A",
            namespace("NS", type_decl("T", method("m"))),
            aliases=[forward(type_decl("T"), "NS")],
        )

        TreeMatcher([rule]).match_assemblies(left, right)

        type_match = next(m for m in rule.seen if m.identity == "T:NS.T")
        assert type_match.via_alias is False
        assert any(m.identity == "M:NS.T.m()" for m in rule.seen)

    def test_alias_match_is_flagged(self):
        rule = RecordingRule()
        target = type_decl("T")
        left = assembly("A", namespace("NS", type_decl("T")))
        right = assembly("A", aliases=[forward(target, "NS")])

        TreeMatcher([rule]).match_assemblies(left, right)

        (match,) = rule.seen
        assert match.via_alias is True
        assert match.right is target

    def test_alias_under_new_name_resolves_by_forwarded_identity(self):
        left = assembly("A", namespace("Api", type_decl("Facade")))
        right = assembly(
            "A",
            namespace("Core", type_decl("Impl")),
            aliases=[forward(type_decl("Impl"), "Api", name="Facade", target_namespace="Core")],
        )

        assert TreeMatcher().match_assemblies(left, right) == []

    def test_outcome_is_the_same_with_or_without_direct_lookup_first(self):
        left = assembly("A", namespace("NS", type_decl("T", method("m"))))
        forwarded_only = assembly("A", aliases=[forward(type_decl("T", method("m")), "NS")])
        forwarded_twice = assembly(
            "A",
            namespace("Other"),
            aliases=[forward(type_decl("T", method("m")), "NS")],
        )

        matcher = TreeMatcher()
        assert matcher.match_assemblies(left, forwarded_only) == []
        assert matcher.match_assemblies(left, forwarded_twice) == []


class TestLeftAliases:
    def test_left_aliases_follow_declared_types_of_their_namespace(self):
        left = assembly(
            "A",
            namespace("NS", type_decl("Declared")),
            namespace("Other", type_decl("O")),
            aliases=[forward(type_decl("Forwarded"), "NS")],
        )
        right = assembly("A")

        assert targets(TreeMatcher().match_assemblies(left, right)) == [
            "T:NS.Declared",
            "T:NS.Forwarded",
            "T:Other.O",
        ]

    def test_aliases_without_declared_namespace_come_last(self):
        left = assembly(
            "A",
            namespace("NS", type_decl("Declared")),
            aliases=[forward(type_decl("Lonely"), "Elsewhere")],
        )
        right = assembly("A")

        assert targets(TreeMatcher().match_assemblies(left, right)) == [
            "T:NS.Declared",
            "T:Elsewhere.Lonely",
        ]

    def test_alias_shadowed_by_declaration_is_ignored(self):
        left = assembly(
            "A",
            namespace("NS", type_decl("T")),
            aliases=[forward(type_decl("T"), "NS")],
        )
        right = assembly("A")

        assert targets(TreeMatcher().match_assemblies(left, right)) == ["T:NS.T"]

    def test_left_alias_satisfied_by_right_declaration(self):
        left = assembly("A", aliases=[forward(type_decl("T"), "NS")])
        right = assembly("A", namespace("NS", type_decl("T")))

        assert TreeMatcher().match_assemblies(left, right) == []


class TestPolicyMonotonicity:
    @pytest.fixture
    def trees(self):
        left = assembly(
            "A",
            namespace(
                "NS",
                type_decl("Pub", method("a"), method("b", accessibility=INTERNAL)),
                type_decl("Int", type_decl("Deep"), accessibility=INTERNAL),
                type_decl("Priv", accessibility=PRIVATE),
            ),
        )
        right = assembly("A", namespace("NS", type_decl("Pub")))
        return left, right

    def test_including_internal_only_adds_differences(self, trees):
        left, right = trees
        public = TreeMatcher(settings=ComparerSettings()).match_assemblies(left, right)
        internal = TreeMatcher(
            settings=ComparerSettings(include_internal_symbols=True)
        ).match_assemblies(left, right)

        assert set(public) <= set(internal)
        assert targets(internal) == ["M:NS.Pub.a()", "M:NS.Pub.b()", "T:NS.Int"]

    @pytest.mark.parametrize(
        "right_access, right_namespace_access",
        [(INTERNAL, None), (PRIVATE, None), (None, INTERNAL)],
    )
    def test_narrowed_right_side_is_matched_under_both_policies(
        self, right_access, right_namespace_access
    ):
        left = assembly("A", namespace("NS", type_decl("T", method("Run"))))
        type_kwargs = {"accessibility": right_access} if right_access else {}
        ns_kwargs = {"accessibility": right_namespace_access} if right_namespace_access else {}
        right = assembly("A", namespace("NS", type_decl("T", **type_kwargs), **ns_kwargs))

        public = TreeMatcher(settings=ComparerSettings()).match_assemblies(left, right)
        internal = TreeMatcher(
            settings=ComparerSettings(include_internal_symbols=True)
        ).match_assemblies(left, right)

        assert set(public) <= set(internal)
        assert targets(public) == targets(internal) == ["M:NS.T.Run()"]


class TestAssemblySets:
    def test_missing_assembly_is_reported_once(self):
        left = [
            assembly("Core", namespace("NS", type_decl("T"))),
            assembly("Extras", namespace("X", type_decl("U"))),
        ]
        right = [assembly("Core", namespace("NS", type_decl("T"))), assembly("New")]

        differences = TreeMatcher().match_assembly_sets(left, right)

        assert differences == [
            CompatDifference(
                DiagnosticIds.TYPE_MUST_EXIST,
                "Assembly 'Extras' exists on the left but not on the right",
                DifferenceType.REMOVED,
                "A:Extras",
            )
        ]

    def test_assemblies_pair_by_name_not_position(self):
        left = [assembly("One", namespace("A", type_decl("T"))), assembly("Two")]
        right = [assembly("Two"), assembly("One", namespace("A"))]

        assert targets(TreeMatcher().match_assembly_sets(left, right)) == ["T:A.T"]


class TestRuleContract:
    def test_must_exist_rules_ignore_matched_pairs(self):
        t = type_decl("T")
        context = RuleContext(ComparerSettings())
        assert TypeMustExist().evaluate(Match("T:NS.T", t, t), context) == []

    def test_must_exist_rules_respect_left_policy(self):
        member = method("m", accessibility=INTERNAL)
        assert MemberMustExist().evaluate(Match("M:NS.T.m()", member), RuleContext(ComparerSettings())) == []

    def test_rules_cover_disjoint_kinds(self):
        assert not (TypeMustExist.applies_to & MemberMustExist.applies_to)
