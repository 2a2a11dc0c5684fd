"""Difference engine: matching, rules, suppression and fan-out comparison."""

from .aliases import AliasTable, ResolvedAlias
from .comparer import ApiComparer, FanOutRow
from .differences import (
    CompatDifference,
    ComparisonResult,
    DiagnosticIds,
    DifferenceType,
)
from .matcher import TreeMatcher
from .rules import MemberMustExist, Rule, TypeMustExist, default_rules
from .suppression import Suppressor, stale_suppressions
from .suppression_file import load_suppression_file, write_suppression_file

__all__ = [
    "AliasTable",
    "ApiComparer",
    "CompatDifference",
    "ComparisonResult",
    "DiagnosticIds",
    "DifferenceType",
    "FanOutRow",
    "MemberMustExist",
    "ResolvedAlias",
    "Rule",
    "Suppressor",
    "TreeMatcher",
    "TypeMustExist",
    "default_rules",
    "load_suppression_file",
    "stale_suppressions",
    "write_suppression_file",
]
