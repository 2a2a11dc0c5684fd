"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import ComparerSettings, load_settings
from ..providers import load_container
from ..symbols.containers import ElementContainer

console = Console()

# Exit codes
EXIT_OK = 0
EXIT_DIFFERENCES = 1
EXIT_ERROR = 2


def resolve_settings(
    config: Optional[Path] = None,
    include_internal: bool = False,
    no_warn: Optional[str] = None,
    suppression_file: Optional[Path] = None,
    workers: Optional[int] = None,
    strict_isolation: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> ComparerSettings:
    """Build settings from CLI options.

    Flags that are off are left unset so config files and environment
    variables still apply.
    """
    overrides = {}
    if include_internal:
        overrides["include_internal_symbols"] = True
    if no_warn:
        overrides["no_warn"] = no_warn
    if suppression_file is not None:
        overrides["suppression_file"] = str(suppression_file)
    if workers is not None:
        overrides["workers"] = workers
    if strict_isolation:
        overrides["strict_isolation"] = True
    return load_settings(config_file=config, verbose=verbose, quiet=quiet, **overrides)


def flag_verbosity(verbose: bool = False, quiet: bool = False) -> str:
    """Verbosity named by the -v/-q flags; --quiet wins when both are given."""
    if quiet:
        return "quiet"
    return "verbose" if verbose else "normal"


def load_surface(path: Path) -> ElementContainer:
    """Load a manifest or package, labelled with the path it came from."""
    return load_container(path, display=str(path))
