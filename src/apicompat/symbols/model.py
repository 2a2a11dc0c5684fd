"""Declaration tree models — the surface handed to the engine by a symbol provider.

A tree is rooted at an ASSEMBLY declaration whose children are namespaces.
Namespaces own types (and, for module-based surfaces, free members); types
own nested types and members.  Members are leaves.

Trees are immutable: the engine never mutates them, so one tree can be shared
by any number of comparisons, including concurrent ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


class Accessibility(str, Enum):
    """Declared accessibility of a declaration."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PROTECTED_INTERNAL = "protected_internal"
    INTERNAL = "internal"
    PRIVATE_PROTECTED = "private_protected"
    PRIVATE = "private"


class DeclarationKind(str, Enum):
    """Position of a declaration in the surface tree."""

    ASSEMBLY = "assembly"
    NAMESPACE = "namespace"
    TYPE = "type"
    NESTED_TYPE = "nested_type"
    MEMBER = "member"


class MemberKind(str, Enum):
    """Shape of a member; selects the identity prefix and signature encoding."""

    METHOD = "method"
    FIELD = "field"
    PROPERTY = "property"
    EVENT = "event"


TYPE_KINDS = frozenset({DeclarationKind.TYPE, DeclarationKind.NESTED_TYPE})


@dataclass(frozen=True)
class Declaration:
    """One node of a surface tree.

    Attributes:
        kind: Assembly, namespace, type, nested type or member
        name: Local (unqualified) name; namespaces carry their dotted name
        accessibility: Declared accessibility
        children: Ordered child declarations (provider insertion order)
        member_kind: Shape of a member (None for non-members)
        parameters: Signature fragment for methods and indexers
        aliases: Forwarding records (assemblies only)
    """

    kind: DeclarationKind
    name: str
    accessibility: Accessibility = Accessibility.PUBLIC
    children: tuple[Declaration, ...] = ()
    member_kind: Optional[MemberKind] = None
    parameters: tuple[str, ...] = ()
    aliases: tuple[Alias, ...] = ()

    def __post_init__(self) -> None:
        if self.kind is DeclarationKind.MEMBER:
            if self.member_kind is None:
                raise ValueError(f"member '{self.name}' requires a member_kind")
            if self.children:
                raise ValueError(f"member '{self.name}' cannot own children")
        elif self.member_kind is not None:
            raise ValueError(f"{self.kind.value} '{self.name}' cannot carry a member_kind")
        if self.aliases and self.kind is not DeclarationKind.ASSEMBLY:
            raise ValueError("aliases can only be attached to an assembly")

    @property
    def is_type(self) -> bool:
        return self.kind in TYPE_KINDS

    @property
    def is_member(self) -> bool:
        return self.kind is DeclarationKind.MEMBER

    def types(self) -> Iterator[Declaration]:
        """Iterate over the type-level children, in declaration order."""
        return (c for c in self.children if c.is_type)

    def members(self) -> Iterator[Declaration]:
        """Iterate over the member children, in declaration order."""
        return (c for c in self.children if c.is_member)

    def child(self, name: str) -> Optional[Declaration]:
        """Return the first child with the given local name, or None."""
        for c in self.children:
            if c.name == name:
                return c
        return None


@dataclass(frozen=True)
class Alias:
    """Assembly-level forwarding record.

    States that the type ``namespace.name`` is provided by ``target``, which
    is really declared in ``target_namespace`` (possibly in another assembly).

    Attributes:
        namespace: Namespace the forwarded identity belongs to
        name: Local name under which the type is forwarded
        target: The real declaration the alias stands in for
        target_namespace: Namespace where ``target`` is actually declared
    """

    namespace: str
    name: str
    target: Declaration
    target_namespace: str

    def __post_init__(self) -> None:
        if not self.target.is_type:
            raise ValueError(f"alias '{self.name}' must forward to a type, got {self.target.kind.value}")
