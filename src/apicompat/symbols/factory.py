"""Helpers for building declaration trees by hand.

Used by the JSON manifest provider and throughout the tests::

    forwarded = type_decl("ForwardedTestType")
    tree = assembly(
        "CompatTests",
        namespace("CompatTests", type_decl("First", type_decl("FirstNested"))),
        aliases=[forward(forwarded, "CompatTests")],
    )

Types passed as children of another type become nested types automatically.
A single declaration may be shared by several trees (e.g. a forwarded type
living in a referenced assembly), since trees are immutable.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Sequence

from .containers import ElementContainer, MetadataInformation
from .model import Accessibility, Alias, Declaration, DeclarationKind, MemberKind

PUBLIC = Accessibility.PUBLIC
INTERNAL = Accessibility.INTERNAL
PRIVATE = Accessibility.PRIVATE
PROTECTED = Accessibility.PROTECTED


def _as_nested(declaration: Declaration) -> Declaration:
    if declaration.kind is DeclarationKind.TYPE:
        return replace(declaration, kind=DeclarationKind.NESTED_TYPE)
    return declaration


def assembly(
    name: str,
    *namespaces: Declaration,
    aliases: Iterable[Alias] = (),
) -> Declaration:
    """Build an assembly root from namespaces and forwarding records."""
    for ns in namespaces:
        if ns.kind is not DeclarationKind.NAMESPACE:
            raise ValueError(f"assembly children must be namespaces, got {ns.kind.value} '{ns.name}'")
    return Declaration(
        kind=DeclarationKind.ASSEMBLY,
        name=name,
        children=tuple(namespaces),
        aliases=tuple(aliases),
    )


def namespace(
    name: str,
    *children: Declaration,
    accessibility: Accessibility = PUBLIC,
) -> Declaration:
    return Declaration(
        kind=DeclarationKind.NAMESPACE,
        name=name,
        accessibility=accessibility,
        children=tuple(children),
    )


def type_decl(
    name: str,
    *children: Declaration,
    accessibility: Accessibility = PUBLIC,
) -> Declaration:
    """Build a type; type children are turned into nested types."""
    return Declaration(
        kind=DeclarationKind.TYPE,
        name=name,
        accessibility=accessibility,
        children=tuple(_as_nested(c) for c in children),
    )


def _member(
    name: str,
    member_kind: MemberKind,
    parameters: Sequence[str],
    accessibility: Accessibility,
) -> Declaration:
    return Declaration(
        kind=DeclarationKind.MEMBER,
        name=name,
        accessibility=accessibility,
        member_kind=member_kind,
        parameters=tuple(parameters),
    )


def method(name: str, *parameters: str, accessibility: Accessibility = PUBLIC) -> Declaration:
    return _member(name, MemberKind.METHOD, parameters, accessibility)


def field(name: str, accessibility: Accessibility = PUBLIC) -> Declaration:
    return _member(name, MemberKind.FIELD, (), accessibility)


def prop(name: str, *parameters: str, accessibility: Accessibility = PUBLIC) -> Declaration:
    return _member(name, MemberKind.PROPERTY, parameters, accessibility)


def event(name: str, accessibility: Accessibility = PUBLIC) -> Declaration:
    return _member(name, MemberKind.EVENT, (), accessibility)


def forward(
    target: Declaration,
    namespace: str,
    name: Optional[str] = None,
    target_namespace: Optional[str] = None,
) -> Alias:
    """Forward ``namespace.name`` to ``target``.

    ``name`` defaults to the target's own name and ``target_namespace`` to
    ``namespace``, which is the plain type-forwarding case.
    """
    return Alias(
        namespace=namespace,
        name=name or target.name,
        target=target,
        target_namespace=namespace if target_namespace is None else target_namespace,
    )


def containers(
    trees: Iterable[Declaration],
    prefix: str = "target",
) -> list[ElementContainer]:
    """Wrap trees with ordinal metadata (``<prefix>-0``, ``<prefix>-1``, ...)."""
    return [
        ElementContainer(tree, MetadataInformation("", "", f"{prefix}-{i}"))
        for i, tree in enumerate(trees)
    ]
