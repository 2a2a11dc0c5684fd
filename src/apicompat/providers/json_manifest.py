"""JSON surface manifests.

A manifest is a plain-data rendering of one declaration tree::

    {
      "assembly": "CompatTests",
      "version": "1.2.0",
      "namespaces": [
        {
          "name": "CompatTests",
          "children": [
            {"kind": "type", "name": "First", "children": [
              {"kind": "method", "name": "Run", "parameters": ["int"]},
              {"kind": "type", "name": "FirstNested", "accessibility": "internal"}
            ]}
          ]
        }
      ],
      "aliases": [
        {"namespace": "CompatTests", "name": "Moved",
         "target_namespace": "Other", "target": {"kind": "type", "name": "Moved"}}
      ]
    }

``accessibility`` defaults to ``public``; ``parameters`` applies to methods and
indexed properties.  Namespace entries sharing a name are merged in order;
two declarations with the same identity in one container are rejected.
Manifests round-trip through :meth:`JsonManifestProvider.dump`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from ..exceptions import ManifestError
from ..logging_config import get_logger
from ..symbols import factory
from ..symbols.containers import ElementContainer, MetadataInformation
from ..symbols.identity import identity_of, strip_prefix
from ..symbols.model import Accessibility, Alias, Declaration, DeclarationKind, MemberKind
from .base import Source

logger = get_logger(__name__)

_MEMBER_BUILDERS = {
    MemberKind.METHOD.value: factory.method,
    MemberKind.PROPERTY.value: factory.prop,
}


class JsonManifestProvider:
    """Loads and writes JSON surface manifests."""

    name = "json"

    def load(self, source: Source) -> Declaration:
        return self.load_container(source).element

    def load_container(self, source: Source, display: Optional[str] = None) -> ElementContainer:
        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestError(path, str(e)) from e
        container = self.loads(text, path=path, display=display)
        logger.debug(f"Loaded manifest {path} ({container.metadata})")
        return container

    def loads(
        self,
        text: str,
        path: Optional[Path] = None,
        display: Optional[str] = None,
    ) -> ElementContainer:
        """Parse manifest text into a tree plus its metadata.

        Raises:
            ManifestError: If the text is not JSON or does not describe a valid tree
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ManifestError(path, f"not valid JSON: {e}") from e
        return self.from_dict(data, path=path, display=display)

    def from_dict(
        self,
        data: Any,
        path: Optional[Path] = None,
        display: Optional[str] = None,
    ) -> ElementContainer:
        if not isinstance(data, dict):
            raise ManifestError(path, "top level must be an object")
        try:
            name = _require_str(data, "assembly")
            version = str(data.get("version", ""))
            namespaces = _merge_namespaces(_namespace(ns) for ns in _list(data, "namespaces"))
            aliases = [_alias(a) for a in _list(data, "aliases")]
            tree = factory.assembly(name, *namespaces, aliases=aliases)
        except (KeyError, TypeError, ValueError) as e:
            raise ManifestError(path, _describe(e)) from e

        metadata = MetadataInformation(name, version, display or name)
        return ElementContainer(tree, metadata)

    # ── Writing ──────────────────────────────────────────────────────

    def to_dict(self, tree: Declaration, version: str = "") -> dict[str, Any]:
        """Plain-data rendering of an assembly tree."""
        if tree.kind is not DeclarationKind.ASSEMBLY:
            raise ValueError(f"expected an assembly root, got {tree.kind.value}")
        data: dict[str, Any] = {"assembly": tree.name}
        if version:
            data["version"] = version
        data["namespaces"] = [_dump_namespace(ns) for ns in tree.children]
        if tree.aliases:
            data["aliases"] = [_dump_alias(a) for a in tree.aliases]
        return data

    def dumps(self, tree: Declaration, version: str = "") -> str:
        return json.dumps(self.to_dict(tree, version), indent=2) + "\n"

    def dump(self, tree: Declaration, path: Source, version: str = "") -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(self.dumps(tree, version), encoding="utf-8")
        logger.info(f"Wrote manifest for {tree.name} to {p}")


# ── Parsing helpers ──────────────────────────────────────────────────


def _require_str(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{key}' must be a non-empty string")
    return value


def _list(data: dict, key: str) -> list:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a list")
    return value


def _accessibility(data: dict) -> Accessibility:
    return Accessibility(data.get("accessibility", Accessibility.PUBLIC.value))


def _namespace(data: Any) -> Declaration:
    if not isinstance(data, dict):
        raise TypeError("namespace entries must be objects")
    name = data.get("name", "")
    if not isinstance(name, str):
        raise TypeError("namespace name must be a string")
    children = [_child(c) for c in _list(data, "children")]
    return factory.namespace(name, *children, accessibility=_accessibility(data))


def _child(data: Any) -> Declaration:
    if not isinstance(data, dict):
        raise TypeError("declaration entries must be objects")
    kind = data.get("kind", "type")
    name = _require_str(data, "name")
    access = _accessibility(data)

    if kind == "type":
        children = [_child(c) for c in _list(data, "children")]
        _require_unique(children, name)
        return factory.type_decl(name, *children, accessibility=access)

    member_kind = MemberKind(kind)
    if data.get("children"):
        raise ValueError(f"member '{name}' cannot own children")
    parameters = [str(p) for p in _list(data, "parameters")]
    builder = _MEMBER_BUILDERS.get(member_kind.value)
    if builder is not None:
        return builder(name, *parameters, accessibility=access)
    if parameters:
        raise ValueError(f"{member_kind.value} '{name}' cannot take parameters")
    if member_kind is MemberKind.FIELD:
        return factory.field(name, accessibility=access)
    return factory.event(name, accessibility=access)


def _merge_namespaces(namespaces: Iterable[Declaration]) -> list[Declaration]:
    """Fold same-named namespace entries into the first one, children in order."""
    merged: dict[str, Declaration] = {}
    for ns in namespaces:
        first = merged.get(ns.name)
        if first is None:
            merged[ns.name] = ns
            continue
        if first.accessibility is not ns.accessibility:
            raise ValueError(f"namespace '{ns.name}' is declared with conflicting accessibility")
        merged[ns.name] = factory.namespace(
            ns.name, *first.children, *ns.children, accessibility=first.accessibility
        )
    for ns in merged.values():
        _require_unique(ns.children, ns.name or "<global namespace>")
    return list(merged.values())


def _require_unique(children: Iterable[Declaration], container: str) -> None:
    seen: set[str] = set()
    for child in children:
        identity = identity_of(child)
        if identity in seen:
            raise ValueError(f"duplicate declaration '{strip_prefix(identity)}' in '{container}'")
        seen.add(identity)


def _alias(data: Any) -> Alias:
    if not isinstance(data, dict):
        raise TypeError("alias entries must be objects")
    target = _child(data["target"])
    if not target.is_type:
        raise ValueError(f"alias '{data.get('name', target.name)}' must target a type")
    namespace = data.get("namespace", "")
    return factory.forward(
        target,
        namespace,
        name=data.get("name"),
        target_namespace=data.get("target_namespace", namespace),
    )


def _describe(error: Exception) -> str:
    if isinstance(error, KeyError):
        return f"missing required key {error}"
    return str(error)


# ── Dumping helpers ──────────────────────────────────────────────────


def _with_access(data: dict[str, Any], declaration: Declaration) -> dict[str, Any]:
    if declaration.accessibility is not Accessibility.PUBLIC:
        data["accessibility"] = declaration.accessibility.value
    return data


def _dump_namespace(ns: Declaration) -> dict[str, Any]:
    data = _with_access({"name": ns.name}, ns)
    data["children"] = [_dump_child(c) for c in ns.children]
    return data


def _dump_child(declaration: Declaration) -> dict[str, Any]:
    if declaration.is_type:
        data = _with_access({"kind": "type", "name": declaration.name}, declaration)
        if declaration.children:
            data["children"] = [_dump_child(c) for c in declaration.children]
        return data

    data = _with_access(
        {"kind": declaration.member_kind.value, "name": declaration.name}, declaration
    )
    if declaration.member_kind is MemberKind.METHOD or declaration.parameters:
        data["parameters"] = list(declaration.parameters)
    return data


def _dump_alias(alias: Alias) -> dict[str, Any]:
    return {
        "namespace": alias.namespace,
        "name": alias.name,
        "target_namespace": alias.target_namespace,
        "target": _dump_child(alias.target),
    }
