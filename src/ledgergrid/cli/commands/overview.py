"""Overview generation commands."""

import dataclasses
from pathlib import Path

import click
from ledgergrid.cache.store import CacheStore
from ledgergrid.cli.error_handling import handle_domain_error
from ledgergrid.domain.errors import DomainError
from ledgergrid.domain.overview import OverviewService, SummaryAnalyzer
from ledgergrid.ledger.csv_source import CsvLedgerSource
from ledgergrid.notifications import ClickNotifier
from ledgergrid.render.console import ConsoleRenderer
from ledgergrid.render.csv_renderer import CsvGridRenderer
from ledgergrid.render.xlsx_renderer import XlsxGridRenderer


def _create_service(ctx, ledger: str, output: str, year, console: bool) -> OverviewService:
    """Wire an OverviewService from the CLI context."""
    config = ctx.obj["config"]
    if year is not None:
        config = dataclasses.replace(config, year=year)
    state = ctx.obj["state"]

    if console:
        renderer = ConsoleRenderer(show_formulas=True)
    elif Path(output).suffix.lower() == ".csv":
        renderer = CsvGridRenderer(output)
    else:
        renderer = XlsxGridRenderer(output)
    return OverviewService(
        config=config,
        ledger=CsvLedgerSource(ledger, name=config.transactions_sheet),
        cache=CacheStore(config.cache, durable=state.durable_cache),
        renderer=renderer,
        settings=state.settings,
        notifier=ClickNotifier(),
        analyzer=SummaryAnalyzer(),
    )


ledger_option = click.option(
    "--ledger",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Ledger CSV export (header row with Date, Type, Category, Amount)",
)
output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default="overview.xlsx",
    show_default=True,
    help="Destination workbook (.xlsx), or a .csv file for a plain grid",
)
year_option = click.option("--year", type=int, help="Report year (defaults to config)")
console_option = click.option(
    "--console", is_flag=True, help="Print the layout instead of writing a file"
)


@click.group()
def overview_group():
    """Generate the financial overview."""
    pass


@overview_group.command("generate")
@ledger_option
@output_option
@year_option
@console_option
@click.pass_context
def generate(ctx, ledger: str, output: str, year: int | None, console: bool):
    """Generate the overview grid from a ledger.

    Examples:
        ledgergrid overview generate --ledger transactions.csv
        ledgergrid overview generate --ledger transactions.csv -o 2024.xlsx --year 2024
        ledgergrid overview generate --ledger transactions.csv -o 2024.csv
    """
    service = _create_service(ctx, ledger, output, year, console)

    try:
        result = service.build()
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    if not console:
        click.echo(f"Wrote {result.last_row} rows to {output}")


@overview_group.command("toggle-subcategories")
@click.option("--on/--off", "show", default=None, help="Set instead of flipping the preference")
@ledger_option
@output_option
@year_option
@console_option
@click.pass_context
def toggle_subcategories(
    ctx, show: bool | None, ledger: str, output: str, year: int | None, console: bool
):
    """Show or hide sub-categories and regenerate the overview."""
    service = _create_service(ctx, ledger, output, year, console)
    new_value = show if show is not None else not service.show_subcategories()

    try:
        service.on_preference_toggled(new_value)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Sub-categories {'shown' if new_value else 'hidden'}")


def register_commands(cli):
    """Register overview commands with main CLI."""
    cli.add_command(overview_group, name="overview")
