"""Compatibility rules evaluated by the tree matcher."""

from .base import Match, MustExistRule, Rule, RuleContext
from .member_must_exist import MemberMustExist
from .type_must_exist import TypeMustExist


def default_rules() -> list[Rule]:
    """The active rule list, in evaluation order."""
    return [TypeMustExist(), MemberMustExist()]


__all__ = [
    "Match",
    "MemberMustExist",
    "MustExistRule",
    "Rule",
    "RuleContext",
    "TypeMustExist",
    "default_rules",
]
