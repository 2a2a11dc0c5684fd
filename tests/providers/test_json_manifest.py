"""Tests for providers/json_manifest.py."""

import json

import pytest

from apicompat.engine import ApiComparer
from apicompat.exceptions import ManifestError
from apicompat.providers import JsonManifestProvider
from apicompat.symbols import Accessibility, DeclarationKind, MemberKind
from apicompat.symbols.factory import (
    INTERNAL,
    assembly,
    event,
    field,
    forward,
    method,
    namespace,
    prop,
    type_decl,
)

MANIFEST = {
    "assembly": "CompatTests",
    "version": "1.2.0",
    "namespaces": [
        {
            "name": "CompatTests",
            "children": [
                {
                    "kind": "type",
                    "name": "First",
                    "children": [
                        {"kind": "method", "name": "Run", "parameters": ["int"]},
                        {"kind": "type", "name": "FirstNested", "accessibility": "internal"},
                    ],
                },
                {"kind": "field", "name": "Version"},
            ],
        }
    ],
    "aliases": [
        {
            "namespace": "CompatTests",
            "name": "Moved",
            "target_namespace": "Other",
            "target": {"kind": "type", "name": "Moved"},
        }
    ],
}


@pytest.fixture
def provider():
    return JsonManifestProvider()


class TestLoading:
    def test_loads_tree_and_metadata(self, provider):
        container = provider.loads(json.dumps(MANIFEST))

        tree = container.element
        assert tree.kind is DeclarationKind.ASSEMBLY
        assert container.metadata.name == "CompatTests"
        assert container.metadata.version == "1.2.0"
        assert container.metadata.display == "CompatTests"

        (ns,) = tree.children
        first, version = ns.children
        assert first.kind is DeclarationKind.TYPE
        assert first.children[0].member_kind is MemberKind.METHOD
        assert first.children[0].parameters == ("int",)
        assert first.children[1].kind is DeclarationKind.NESTED_TYPE
        assert first.children[1].accessibility is Accessibility.INTERNAL
        assert version.member_kind is MemberKind.FIELD

        (alias,) = tree.aliases
        assert (alias.namespace, alias.name, alias.target_namespace) == (
            "CompatTests",
            "Moved",
            "Other",
        )

    def test_load_from_file_uses_display(self, provider, tmp_path):
        path = tmp_path / "ref.json"
        path.write_text(json.dumps(MANIFEST))

        container = provider.load_container(path, display="ref")

        assert str(container.metadata) == "ref"
        assert provider.load(path) == container.element

    def test_defaults(self, provider):
        container = provider.from_dict(
            {"assembly": "A", "namespaces": [{"name": "NS", "children": [{"name": "T"}]}]}
        )
        (t,) = container.element.children[0].children
        assert t.kind is DeclarationKind.TYPE
        assert t.accessibility is Accessibility.PUBLIC
        assert container.metadata.version == ""


class TestMalformedManifests:
    @pytest.mark.parametrize(
        "data",
        [
            [],
            {},
            {"assembly": ""},
            {"assembly": "A", "namespaces": {}},
            {"assembly": "A", "namespaces": [{"children": [{"kind": "type"}]}]},
            {"assembly": "A", "namespaces": [{"children": [{"kind": "macro", "name": "m"}]}]},
            {"assembly": "A", "namespaces": [{"children": [{"name": "T", "accessibility": "secret"}]}]},
            {"assembly": "A", "namespaces": [{"children": [{"kind": "field", "name": "f", "parameters": ["int"]}]}]},
            {"assembly": "A", "namespaces": [{"children": [{"kind": "method", "name": "f", "children": [{"name": "T"}]}]}]},
            {"assembly": "A", "aliases": [{"namespace": "NS", "target": {"kind": "method", "name": "f"}}]},
            {"assembly": "A", "aliases": [{"namespace": "NS"}]},
        ],
    )
    def test_raises_manifest_error(self, provider, data):
        with pytest.raises(ManifestError):
            provider.from_dict(data)

    def test_invalid_json(self, provider):
        with pytest.raises(ManifestError, match="Invalid surface manifest"):
            provider.loads("{")

    def test_unreadable_file(self, provider, tmp_path):
        with pytest.raises(ManifestError):
            provider.load(tmp_path / "missing.json")


class TestDuplicateIdentities:
    SPLIT = {
        "assembly": "A",
        "namespaces": [
            {"name": "NS", "children": [{"name": "X"}]},
            {"name": "Other", "children": [{"name": "Z"}]},
            {"name": "NS", "children": [{"name": "Y"}]},
        ],
    }

    def test_same_named_namespaces_are_merged_in_order(self, provider):
        tree = provider.from_dict(self.SPLIT).element

        assert [ns.name for ns in tree.children] == ["NS", "Other"]
        assert [t.name for t in tree.children[0].children] == ["X", "Y"]

    def test_split_namespace_manifest_compares_clean_against_itself(self, provider):
        left = provider.from_dict(self.SPLIT).element
        right = provider.from_dict(self.SPLIT).element

        assert ApiComparer().get_differences(left, right) == []

    def test_type_repeated_across_namespace_entries(self, provider):
        data = {
            "assembly": "A",
            "namespaces": [
                {"name": "NS", "children": [{"name": "X"}]},
                {"name": "NS", "children": [{"name": "X"}]},
            ],
        }
        with pytest.raises(ManifestError, match="duplicate declaration 'X' in 'NS'"):
            provider.from_dict(data)

    def test_member_repeated_in_one_type(self, provider):
        data = {
            "assembly": "A",
            "namespaces": [
                {
                    "name": "NS",
                    "children": [
                        {
                            "name": "T",
                            "children": [
                                {"kind": "method", "name": "Run", "parameters": ["int"]},
                                {"kind": "method", "name": "Run", "parameters": ["int"]},
                            ],
                        }
                    ],
                }
            ],
        }
        with pytest.raises(ManifestError, match=r"duplicate declaration 'Run\(int\)' in 'T'"):
            provider.from_dict(data)

    def test_overloads_are_distinct_declarations(self, provider):
        data = {
            "assembly": "A",
            "namespaces": [
                {
                    "name": "NS",
                    "children": [
                        {
                            "name": "T",
                            "children": [
                                {"kind": "method", "name": "Run", "parameters": ["int"]},
                                {"kind": "method", "name": "Run", "parameters": ["string"]},
                            ],
                        }
                    ],
                }
            ],
        }
        tree = provider.from_dict(data).element

        assert len(tree.children[0].child("T").children) == 2

    def test_conflicting_namespace_accessibility(self, provider):
        data = {
            "assembly": "A",
            "namespaces": [
                {"name": "NS"},
                {"name": "NS", "accessibility": "internal"},
            ],
        }
        with pytest.raises(ManifestError, match="conflicting accessibility"):
            provider.from_dict(data)


class TestDumping:
    def test_round_trip_preserves_tree(self, provider, tmp_path):
        shared = type_decl("Moved", method("Go"))
        tree = assembly(
            "Lib",
            namespace(
                "Lib",
                type_decl(
                    "Widget",
                    method("Run", "int", "string"),
                    method("Reset"),
                    field("Count"),
                    prop("Item", "int"),
                    prop("Name"),
                    event("Changed"),
                    type_decl("Inner", accessibility=INTERNAL),
                ),
            ),
            namespace("Lib.util", method("helper"), accessibility=INTERNAL),
            aliases=[forward(shared, "Lib", target_namespace="Lib.impl")],
        )
        path = tmp_path / "out" / "lib.json"

        provider.dump(tree, path, version="3.1")
        container = provider.load_container(path)

        assert container.element == tree
        assert container.metadata.version == "3.1"

    def test_public_accessibility_is_omitted(self, provider):
        data = provider.to_dict(assembly("A", namespace("NS", type_decl("T"))))
        assert data["namespaces"][0]["children"][0] == {"kind": "type", "name": "T"}

    def test_dumped_manifest_compares_clean_against_source(self, provider):
        tree = assembly("A", namespace("NS", type_decl("T", method("f", "x"))))
        reloaded = provider.loads(provider.dumps(tree)).element
        assert ApiComparer().get_differences(tree, reloaded) == []

    def test_only_assemblies_can_be_dumped(self, provider):
        with pytest.raises(ValueError):
            provider.to_dict(namespace("NS"))
