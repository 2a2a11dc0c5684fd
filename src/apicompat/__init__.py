"""
apicompat - API Compatibility Difference Engine

Compares the public surface of a previous build ("left") against one or more
new builds ("right") and reports every observable declaration that went
missing, with rule-level and per-declaration suppression.
"""

__version__ = "0.3.0"
__author__ = "Naman Agarwal"

from .config import ComparerSettings, load_settings
from .engine import (
    ApiComparer,
    CompatDifference,
    ComparisonResult,
    DiagnosticIds,
    DifferenceType,
)
from .symbols import (
    Accessibility,
    Alias,
    Declaration,
    DeclarationKind,
    ElementContainer,
    MemberKind,
    MetadataInformation,
)

__all__ = [
    "ApiComparer",  # Main entry point
    "ComparerSettings",
    "load_settings",
    "CompatDifference",
    "ComparisonResult",
    "DiagnosticIds",
    "DifferenceType",
    "Accessibility",
    "Alias",
    "Declaration",
    "DeclarationKind",
    "ElementContainer",
    "MemberKind",
    "MetadataInformation",
]
