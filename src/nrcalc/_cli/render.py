"""Rendering of iteration traces and the example gallery.

Presentation only: values are rounded here through ``IterationRecord.display``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from nrcalc._format import DEFAULT_DECIMALS

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nrcalc._examples import ExampleProblem
    from nrcalc._method import Method
    from nrcalc._models import IterationRecord


def _error_style(text: str) -> str:
    """Highlight non-finite values instead of hiding them."""
    if text.startswith(("NaN", "Infinity", "-Infinity")):
        return f"[bold red]{text}[/bold red]"
    return text


def build_trace_table(
    records: Sequence[IterationRecord],
    method: Method,
    decimals: int = DEFAULT_DECIMALS,
) -> Table:
    """Build a table with one row per iteration.

    The f''(x) column is only shown for methods that use the second derivative.
    """
    show_fppx = method.uses_second_derivative

    table = Table(show_header=True, header_style="bold cyan", title=f"[bold]{method.label}[/bold]")
    table.add_column("i", justify="right", style="dim")
    table.add_column("x_i", justify="right")
    table.add_column("f(x_i)", justify="right")
    table.add_column("f'(x_i)", justify="right")
    if show_fppx:
        table.add_column("f''(x_i)", justify="right")
    table.add_column("x_i+1", justify="right", style="bold")
    table.add_column("Ea", justify="right", style="yellow")
    table.add_column("Et", justify="right", style="green")

    for record in records:
        row = record.display(decimals)
        cells = [str(row.iteration), row.x, row.fx, row.fpx]
        if show_fppx:
            cells.append(row.fppx or "-")
        cells.extend([row.x_next, row.ea, row.et])
        table.add_row(*(_error_style(cell) for cell in cells))

    return table


def build_examples_table(examples: Sequence[ExampleProblem]) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("f(x)")
    table.add_column("x0", justify="right")
    table.add_column("Method")
    table.add_column("Description", style="dim")

    for number, example in enumerate(examples, start=1):
        table.add_row(
            str(number),
            escape(example.title),
            escape(example.expression),
            f"{example.initial_guess:g}",
            example.method.label,
            escape(example.description),
        )

    return table
