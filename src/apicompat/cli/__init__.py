"""CLI entry point — registers all subcommands."""

import typer

from ._common import console

app = typer.Typer(
    name="apicompat",
    help="apicompat - detect public API removed between builds",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from .. import __version__

        console.print(f"[bold cyan]apicompat[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Compare the public surface of a baseline build against new builds.

    Each surface is a JSON manifest or a Python package directory.
    """


# Import subcommands to register them
from .compare import compare as _compare  # noqa: F401, E402
from .dump import dump as _dump  # noqa: F401, E402


def main() -> None:
    app()
