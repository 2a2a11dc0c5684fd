"""Compare command."""

from pathlib import Path
from typing import List, Optional

import typer

from . import app
from ._common import (
    EXIT_DIFFERENCES,
    EXIT_ERROR,
    EXIT_OK,
    console,
    flag_verbosity,
    load_surface,
    resolve_settings,
)
from ._output import DifferenceFormatter
from ..engine import ApiComparer, stale_suppressions, write_suppression_file
from ..exceptions import ApiCompatError
from ..logging_config import setup_logging


@app.command()
def compare(
    left: Path = typer.Argument(
        ...,
        help="Baseline surface: JSON manifest or Python package directory",
        exists=True,
        readable=True,
    ),
    rights: List[Path] = typer.Argument(
        ...,
        help="One or more surfaces to check against the baseline",
        exists=True,
        readable=True,
    ),
    include_internal: bool = typer.Option(
        False,
        "--include-internal",
        help="Treat internal declarations as part of the surface",
    ),
    no_warn: Optional[str] = typer.Option(
        None,
        "--no-warn",
        help="Rule ids to suppress everywhere, e.g. 'CP0001;CP0002'",
    ),
    suppression_file: Optional[Path] = typer.Option(
        None,
        "--suppression-file",
        "-s",
        help="JSON file of (rule_id, target) suppressions",
        dir_okay=False,
    ),
    generate_suppression_file: bool = typer.Option(
        False,
        "--generate-suppression-file",
        help="Write every difference found to --suppression-file and exit",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Compare right surfaces in parallel",
        min=1,
        max=32,
    ),
    strict_isolation: bool = typer.Option(
        False,
        "--strict-isolation",
        help="Report a failing right surface instead of aborting the run",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging and list suppressed differences",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
):
    """
    Check that every public declaration of LEFT still exists in each RIGHT.

    Exits 0 when all surfaces are compatible, 1 when differences remain,
    and 2 on input errors.

    [bold cyan]Examples:[/bold cyan]

      apicompat compare baseline.json build/mypkg

      apicompat compare old.json net8.json net9.json --no-warn CP0002

      apicompat compare old.json new.json -s suppressions.json --generate-suppression-file
    """
    setup_logging(flag_verbosity(verbose, quiet))

    if generate_suppression_file and suppression_file is None:
        console.print("[red]Error:[/red] --generate-suppression-file requires --suppression-file")
        raise typer.Exit(EXIT_ERROR)

    try:
        settings = resolve_settings(
            config=config,
            include_internal=include_internal,
            suppression_file=suppression_file,
            no_warn=no_warn,
            workers=workers,
            strict_isolation=strict_isolation,
            verbose=verbose,
            quiet=quiet,
        )
        # Config files and APICOMPAT_VERBOSITY may raise or lower the level
        setup_logging(settings.verbosity)
        left_surface = load_surface(left)
        right_surfaces = [load_surface(r) for r in rights]
        results = ApiComparer(settings).compare_fan_out(left_surface, right_surfaces)
    except ApiCompatError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)

    if generate_suppression_file:
        found = [d for r in results for d in (*r.differences, *r.suppressed)]
        count = write_suppression_file(suppression_file, found)
        console.print(f"[green]Wrote {count} suppression(s) to {suppression_file}[/green]")
        raise typer.Exit(EXIT_OK)

    formatter = DifferenceFormatter(console)
    formatter.render(
        results,
        fmt="json" if json_output else "rich",
        stale=stale_suppressions(settings, results),
        verbose=verbose,
    )

    if any(not r.ok for r in results):
        raise typer.Exit(EXIT_ERROR)
    if any(r.differences for r in results):
        raise typer.Exit(EXIT_DIFFERENCES)
    raise typer.Exit(EXIT_OK)
