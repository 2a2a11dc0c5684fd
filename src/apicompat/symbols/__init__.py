"""Declaration trees: model, identity, accessibility and construction helpers."""

from .accessibility import is_observable
from .containers import ElementContainer, MetadataInformation
from .identity import identity_of, kind_name, strip_prefix, type_identity
from .model import (
    Accessibility,
    Alias,
    Declaration,
    DeclarationKind,
    MemberKind,
)

__all__ = [
    "Accessibility",
    "Alias",
    "Declaration",
    "DeclarationKind",
    "ElementContainer",
    "MemberKind",
    "MetadataInformation",
    "identity_of",
    "is_observable",
    "kind_name",
    "strip_prefix",
    "type_identity",
]
