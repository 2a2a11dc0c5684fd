"""Rich terminal formatter for comparison results.

Renders one section per right-hand surface with a table of differences,
plus a summary line and any stale suppression entries.
"""

import json
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import SuppressionEntry
from ..engine.differences import ComparisonResult, DifferenceType
from ..symbols.containers import MetadataInformation

_TYPE_COLORS = {
    DifferenceType.REMOVED: "red",
    DifferenceType.CHANGED: "yellow",
    DifferenceType.ADDED: "green",
}


def _label(meta: MetadataInformation) -> str:
    if meta.version:
        return f"{meta} ({meta.name} {meta.version})"
    return str(meta)


class DifferenceFormatter:
    """Render comparison results to a Rich console.

    Usage::

        formatter = DifferenceFormatter()
        formatter.render(results)                # default: rich console
        formatter.render(results, fmt="json")    # machine-readable JSON
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    # ── Public API ───────────────────────────────────────────────────────

    def render(
        self,
        results: Sequence[ComparisonResult],
        fmt: str = "rich",
        stale: Sequence[SuppressionEntry] = (),
        verbose: bool = False,
    ) -> None:
        """Render the results to the console.

        Args:
            results: One result per right surface, in input order.
            fmt: ``"rich"`` for terminal, ``"json"`` for machine-readable output.
            stale: Specific suppressions that matched nothing.
            verbose: If True, also list suppressed differences.
        """
        if fmt == "json":
            self._render_json(results, stale)
        else:
            self._render_rich(results, stale, verbose=verbose)

    # ── JSON output ──────────────────────────────────────────────────────

    def _render_json(
        self,
        results: Sequence[ComparisonResult],
        stale: Sequence[SuppressionEntry],
    ) -> None:
        output = {
            "left": self._meta_to_dict(results[0].left) if results else None,
            "results": [self._result_to_dict(r) for r in results],
            "stale_suppressions": [
                {"rule_id": rule_id, "target": target} for rule_id, target in stale
            ],
            "total": sum(len(r.differences) for r in results),
        }
        print(json.dumps(output, indent=2))

    @staticmethod
    def _meta_to_dict(meta: MetadataInformation) -> dict:
        return {"name": meta.name, "version": meta.version, "display": meta.display}

    def _result_to_dict(self, result: ComparisonResult) -> dict:
        return {
            "right": self._meta_to_dict(result.right),
            "differences": [d.to_dict() for d in result.differences],
            "suppressed": len(result.suppressed),
            "error": result.error.to_dict() if result.error is not None else None,
        }

    # ── Rich terminal output ─────────────────────────────────────────────

    def _render_rich(
        self,
        results: Sequence[ComparisonResult],
        stale: Sequence[SuppressionEntry],
        verbose: bool = False,
    ) -> None:
        con = self._console
        if not results:
            con.print("[dim]No right-hand surfaces compared.[/dim]")
            return

        con.print()
        con.print(
            f"[bold cyan]API COMPATIBILITY[/bold cyan] "
            f"[dim]{_label(results[0].left)}[/dim] -> {len(results)} surface(s)"
        )

        for result in results:
            con.print()
            con.print(f"[bold]{_label(result.right)}[/bold]")

            if result.error is not None:
                con.print(f"  [red]Comparison failed:[/red] {result.error}")
                continue

            if not result.differences:
                con.print("  [green]Compatible[/green]")
            else:
                con.print(self._differences_table(result))

            if result.suppressed:
                con.print(f"  [dim]{len(result.suppressed)} suppressed[/dim]")
                if verbose:
                    for d in result.suppressed:
                        con.print(f"    [dim]{d.rule_id} {d.target}[/dim]")

        if stale:
            con.print()
            con.print(f"[yellow]{len(stale)} suppression(s) matched nothing:[/yellow]")
            for rule_id, target in stale:
                con.print(f"  [dim]{rule_id}[/dim] {target}")

        # ── Summary line ─────────────────────────────────────────────
        total = sum(len(r.differences) for r in results)
        failed = sum(1 for r in results if not r.ok)
        parts = [f"[red]{total} difference(s)[/red]" if total else "[green]0 differences[/green]"]
        if failed:
            parts.append(f"[red]{failed} failed[/red]")
        con.print()
        con.print("  ".join(parts))

    @staticmethod
    def _differences_table(result: ComparisonResult) -> Table:
        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("Rule", no_wrap=True)
        table.add_column("Kind", no_wrap=True)
        table.add_column("Target", overflow="fold")
        table.add_column("Message", overflow="fold")
        for d in result.differences:
            color = _TYPE_COLORS.get(d.difference_type, "white")
            table.add_row(
                d.rule_id,
                f"[{color}]{d.difference_type.value}[/{color}]",
                escape(d.target),
                escape(d.message),
            )
        return table
