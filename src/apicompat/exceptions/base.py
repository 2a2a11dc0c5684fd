"""Base exception for apicompat."""

from typing import Any, Dict, Optional


class ApiCompatError(Exception):
    """Base exception for all apicompat errors.

    ``details`` holds the structured context of the failure (paths, argument
    names, right positions).  A ``reason`` entry, when present, is shown right
    after the message; the remaining entries follow in parentheses.  JSON
    reports emit :meth:`to_dict` instead of the rendered string.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = dict(details or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": dict(self.details),
        }

    def __str__(self) -> str:
        text = self.message
        if "reason" in self.details:
            text = f"{text}: {self.details['reason']}"
        context = ", ".join(f"{k}={v}" for k, v in self.details.items() if k != "reason")
        return f"{text} ({context})" if context else text
