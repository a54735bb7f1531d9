"""Console renderer for quick inspection of a layout."""

import click

from ledgergrid.domain.entities import OverviewLayout, RowKind
from ledgergrid.render.base import Renderer

_INDENT = {
    RowKind.HEADER: "",
    RowKind.CATEGORY: "  ",
    RowKind.SUBTOTAL: "",
    RowKind.NET: "",
    RowKind.BLANK: "",
}


class ConsoleRenderer(Renderer):
    """Echoes the row outline, optionally with the first month's formula."""

    def __init__(self, show_formulas: bool = False):
        self.show_formulas = show_formulas

    def render(self, layout: OverviewLayout) -> None:
        click.echo(f"\n{layout.sheet_name} ({layout.last_row} rows)")
        click.echo("=" * 60)
        for row in layout.rows:
            if row.kind == RowKind.BLANK:
                click.echo("")
                continue
            line = f"{row.row_number:>4}  {_INDENT[row.kind]}{row.label}"
            if row.kind == RowKind.SUBTOTAL or row.kind == RowKind.NET:
                line = click.style(line, bold=True)
            click.echo(line)
            if self.show_formulas and row.cell_formulas:
                click.echo(f"        {row.cell_formulas[0]}")
