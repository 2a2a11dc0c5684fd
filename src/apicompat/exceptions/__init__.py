"""Exception hierarchy for apicompat."""

from .base import ApiCompatError
from .comparison import (
    ComparisonError,
    InvalidInputError,
    RightComparisonError,
)
from .config import (
    ConfigurationError,
    InvalidConfigError,
    SuppressionFileError,
)
from .providers import (
    ManifestError,
    ParsingError,
    ProviderError,
    UnsupportedSourceError,
)

__all__ = [
    "ApiCompatError",
    "ComparisonError",
    "InvalidInputError",
    "RightComparisonError",
    "ConfigurationError",
    "InvalidConfigError",
    "SuppressionFileError",
    "ProviderError",
    "ManifestError",
    "ParsingError",
    "UnsupportedSourceError",
]
