"""Configuration exceptions: settings files, suppression lists."""

from pathlib import Path
from typing import Any

from .base import ApiCompatError


class ConfigurationError(ApiCompatError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class SuppressionFileError(ConfigurationError):
    """Raised when a suppression file cannot be read or is malformed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Invalid suppression file: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
