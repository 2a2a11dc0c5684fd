"""Comparison exceptions: contract violations and per-right failures."""

from typing import Optional

from .base import ApiCompatError


class ComparisonError(ApiCompatError):
    """Base class for errors raised while comparing surfaces."""

    pass


class InvalidInputError(ComparisonError):
    """Raised when a tree, container or metadata handed to the engine is absent or malformed.

    This is a programming-contract violation, not a recoverable condition.
    """

    def __init__(self, argument: str, reason: str):
        super().__init__(
            f"Invalid comparison input '{argument}': {reason}",
            details={"argument": argument, "reason": reason},
        )
        self.argument = argument
        self.reason = reason


class RightComparisonError(ComparisonError):
    """Wraps a failure comparing the left surface against one right surface."""

    def __init__(self, position: int, display: str, cause: Optional[BaseException] = None):
        reason = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown failure"
        super().__init__(
            f"Comparison against right #{position} ({display}) failed",
            details={"position": str(position), "display": display, "reason": reason},
        )
        self.position = position
        self.display = display
        self.cause = cause
