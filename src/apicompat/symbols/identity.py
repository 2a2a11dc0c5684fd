"""Stable identity strings for declarations.

An identity names a declaration uniquely within its tree and stays the same
across builds as long as the declaration keeps its name and signature.  This
is what lets a (rule id, identity) pair act as a suppression key across runs.

Format (documentation-comment ID style):
  ASSEMBLY          -> A:<assembly name>
  NAMESPACE         -> N:<namespace>
  TYPE/NESTED_TYPE  -> T:<namespace>.<Outer>.<Inner>
  METHOD            -> M:<namespace>.<Type>.<name>(<p1>,<p2>)
  FIELD             -> F:<namespace>.<Type>.<name>
  PROPERTY          -> P:<namespace>.<Type>.<name>[(<p1>,...)]  (indexers keep parameters)
  EVENT             -> E:<namespace>.<Type>.<name>

The global namespace is the empty string and contributes no segment.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .model import Declaration, DeclarationKind, MemberKind

_KIND_PREFIXES = {
    DeclarationKind.ASSEMBLY: "A",
    DeclarationKind.NAMESPACE: "N",
    DeclarationKind.TYPE: "T",
    DeclarationKind.NESTED_TYPE: "T",
}

_MEMBER_PREFIXES = {
    MemberKind.METHOD: "M",
    MemberKind.FIELD: "F",
    MemberKind.PROPERTY: "P",
    MemberKind.EVENT: "E",
}

_KIND_NAMES = {
    DeclarationKind.ASSEMBLY: "Assembly",
    DeclarationKind.NAMESPACE: "Namespace",
    DeclarationKind.TYPE: "Type",
    DeclarationKind.NESTED_TYPE: "Type",
    DeclarationKind.MEMBER: "Member",
}


def qualify(namespace: str, names: Iterable[str]) -> str:
    """Join a namespace and a chain of type/member names with dots."""
    parts = [namespace] if namespace else []
    parts.extend(names)
    return ".".join(parts)


def type_identity(namespace: str, *names: str) -> str:
    """Identity of a (possibly nested) type given its namespace and name chain."""
    return f"T:{qualify(namespace, names)}"


def signature_fragment(declaration: Declaration) -> str:
    """Signature suffix of a member: always present for methods, only for indexed properties."""
    if declaration.member_kind is MemberKind.METHOD:
        return f"({','.join(declaration.parameters)})"
    if declaration.member_kind is MemberKind.PROPERTY and declaration.parameters:
        return f"({','.join(declaration.parameters)})"
    return ""


def identity_of(declaration: Declaration, ancestors: Sequence[Declaration] = ()) -> str:
    """Compute the identity of ``declaration`` given its ancestor chain.

    Args:
        declaration: The declaration to name.
        ancestors: Enclosing declarations from the root downwards (the
            assembly may or may not be included; it never contributes to a
            type or member identity).

    Returns:
        The identity string.  Pure function of position and shape.
    """
    kind = declaration.kind
    if kind is DeclarationKind.ASSEMBLY:
        return f"A:{declaration.name}"
    if kind is DeclarationKind.NAMESPACE:
        return f"N:{declaration.name}"

    namespace = ""
    enclosing: list[str] = []
    for ancestor in ancestors:
        if ancestor.kind is DeclarationKind.NAMESPACE:
            namespace = ancestor.name
        elif ancestor.is_type:
            enclosing.append(ancestor.name)

    qualified = qualify(namespace, [*enclosing, declaration.name])
    if declaration.is_member:
        prefix = _MEMBER_PREFIXES[declaration.member_kind]
        return f"{prefix}:{qualified}{signature_fragment(declaration)}"
    return f"{_KIND_PREFIXES[kind]}:{qualified}"


def strip_prefix(identity: str) -> str:
    """Drop the ``X:`` kind prefix from an identity."""
    head, sep, rest = identity.partition(":")
    if sep and len(head) == 1:
        return rest
    return identity


def kind_name(declaration: Declaration) -> str:
    """Human-readable kind used in difference messages ("Type", "Member", ...)."""
    return _KIND_NAMES[declaration.kind]
