"""Dump command: capture a surface as a JSON manifest."""

from pathlib import Path
from typing import Optional

import typer

from . import app
from ._common import EXIT_ERROR, console, flag_verbosity, load_surface
from ..exceptions import ApiCompatError
from ..logging_config import setup_logging
from ..providers import JsonManifestProvider


@app.command()
def dump(
    path: Path = typer.Argument(
        ...,
        help="JSON manifest or Python package directory",
        exists=True,
        readable=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the manifest here instead of stdout",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging",
    ),
):
    """
    Write the declaration tree of PATH as a JSON manifest.

    Check the manifest in as the baseline of a release, then compare new
    builds against it.
    """
    setup_logging(flag_verbosity(verbose))

    try:
        surface = load_surface(path)
    except ApiCompatError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)

    provider = JsonManifestProvider()
    version = surface.metadata.version if surface.metadata else ""
    if output is None:
        print(provider.dumps(surface.element, version), end="")
        return

    provider.dump(surface.element, output, version)
    console.print(f"[green]Manifest for {surface.element.name} written to {output}[/green]")
