"""Configuration loading and management for apicompat.

Configuration sources are merged in priority order:
    1. Defaults (defined in ComparerSettings)
    2. Global config (~/.apicompat.toml)
    3. Project config (./apicompat.toml)
    4. Explicit config file
    5. Environment variables (APICOMPAT_* prefix)
    6. Keyword overrides (typically CLI flags)

A settings value is read once when a comparison starts and threaded through
every call; nothing in the engine reads ambient state.

Example:
    >>> settings = load_settings(include_internal_symbols=True, no_warn="CP0001;CP0002")
    >>> sorted(settings.no_warn)
    ['CP0001', 'CP0002']
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Literal, Optional, Union, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

SuppressionEntry = tuple[str, str]

_RULE_ID_SEPARATORS = re.compile(r"[,;\s]+")


def parse_rule_ids(value: Union[str, Iterable[str], None]) -> frozenset[str]:
    """Normalise a rule-id list into a set.

    Accepts None, a string separated by commas, semicolons or whitespace,
    or any iterable of ids.  Empty entries are dropped; ids are stripped and
    upper-cased so ``"cp0001; CP0002,"`` and ``["CP0001", "CP0002"]`` agree.
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items: Iterable[str] = _RULE_ID_SEPARATORS.split(value)
    else:
        items = value
    return frozenset(item.strip().upper() for item in items if item and item.strip())


def parse_suppressions(entries: Iterable[Any]) -> frozenset[SuppressionEntry]:
    """Normalise specific suppressions given as pairs or ``{rule_id, target}`` tables."""
    result: set[SuppressionEntry] = set()
    for entry in entries:
        if isinstance(entry, dict):
            rule_id = entry.get("rule_id")
            target = entry.get("target")
        elif isinstance(entry, (tuple, list)) and len(entry) == 2:
            rule_id, target = entry
        else:
            raise InvalidConfigError("suppressions", entry, "expected (rule_id, target) pair")
        if not isinstance(rule_id, str) or not isinstance(target, str) or not rule_id.strip():
            raise InvalidConfigError("suppressions", entry, "rule_id and target must be strings")
        result.add((rule_id.strip().upper(), target.strip()))
    return frozenset(result)


@dataclass(frozen=True)
class ComparerSettings:
    """Options for one comparison run.

    Attributes:
        Surface policy:
            include_internal_symbols: Treat internal declarations as observable

        Suppression:
            no_warn: Rule ids suppressed everywhere
            ignored_differences: (rule id, declaration identity) pairs suppressed
            suppression_file: JSON file whose entries were merged into
                ignored_differences (kept for baseline regeneration)

        Fan-out:
            workers: Parallel right-hand comparisons (None or 1 = sequential)
            strict_isolation: Capture a failing right as an errored result
                instead of aborting the whole fan-out

        Output control:
            verbosity: Logging verbosity level
    """

    include_internal_symbols: bool = False

    no_warn: frozenset[str] = field(default_factory=frozenset)
    ignored_differences: frozenset[SuppressionEntry] = field(default_factory=frozenset)
    suppression_file: Optional[str] = None

    workers: Optional[int] = None
    strict_isolation: bool = False

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Normalise collection fields and validate values."""
        # Frozen: normalise through object.__setattr__
        object.__setattr__(self, "no_warn", parse_rule_ids(self.no_warn))
        object.__setattr__(
            self, "ignored_differences", parse_suppressions(self.ignored_differences)
        )

        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of: quiet, normal, verbose")

    @property
    def parallel(self) -> bool:
        return self.workers is not None and self.workers > 1


DEFAULT_SETTINGS = ComparerSettings()


def load_settings(config_file: Optional[Path] = None, **overrides) -> ComparerSettings:
    """Load settings with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options don't mask file values.

    Returns:
        Validated ComparerSettings instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        SuppressionFileError: If the configured suppression file is malformed

    Example:
        >>> settings = load_settings(config_file=Path("apicompat.toml"))
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".apicompat.toml"
    if global_config.exists():
        merged.update(_load_config_file(global_config))

    project_config = Path.cwd() / "apicompat.toml"
    if project_config.exists():
        merged.update(_load_config_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_config_file(config_file))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    # [[suppressions]] tables from TOML land under "suppressions"
    specific = set(parse_suppressions(merged.pop("suppressions", ())))
    specific |= parse_suppressions(merged.pop("ignored_differences", ()))

    suppression_file = merged.get("suppression_file")
    if suppression_file:
        from .engine.suppression_file import load_suppression_file

        specific |= load_suppression_file(Path(suppression_file))

    merged["ignored_differences"] = frozenset(specific)

    try:
        return ComparerSettings(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(str(e))


def _load_config_file(path: Path) -> dict[str, Any]:
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load settings from APICOMPAT_* environment variables.

    Supported environment variables:
        APICOMPAT_INCLUDE_INTERNAL_SYMBOLS: bool (true/false/1/0)
        APICOMPAT_NO_WARN: rule ids separated by , or ;
        APICOMPAT_SUPPRESSION_FILE: path
        APICOMPAT_WORKERS: int
        APICOMPAT_STRICT_ISOLATION: bool
        APICOMPAT_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any APICOMPAT_* vars found.
    """
    type_hints = get_type_hints(ComparerSettings)

    result: dict[str, Any] = {}

    for field_name in ComparerSettings.__dataclass_fields__:
        env_key = f"APICOMPAT_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value or None if the field can't be set from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if origin is Union and type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is frozenset:
        item_args = getattr(type_hint, "__args__", ())
        if item_args and item_args[0] is str:
            return parse_rule_ids(value)
        # Suppression pairs are too structured for an env var
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
