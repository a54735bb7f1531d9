"""Main CLI entry point."""

import click
from ledgergrid.config import load_config
from ledgergrid.database.factories import create_sqlite_state
from ledgergrid.domain.errors import ConfigError
from ledgergrid.logging_setup import configure_logging
from ledgergrid.cli.error_handling import handle_domain_error

# Import and register all commands at module level
from ledgergrid.cli.commands import (
    overview,
    settings,
    cache,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to state database file (overrides LEDGERGRID_DB_PATH environment variable)",
    envvar="LEDGERGRID_DB_PATH",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(),
    help="JSON file overriding the default configuration (or LEDGERGRID_CONFIG)",
    envvar="LEDGERGRID_CONFIG",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, config_path: str | None, verbose: bool):
    """Ledgergrid - Formula-driven financial overview generator.

    Turns a ledger of dated, typed and categorized transactions into a
    monthly overview grid with totals, averages and net calculations.
    """
    ctx.ensure_object(dict)

    # Only touch config and state when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        configure_logging("DEBUG" if verbose else None)
        try:
            ctx.obj["config"] = load_config(config_path)
        except ConfigError as e:
            handle_domain_error(ctx, e)

        state = create_sqlite_state(database_path=db_path)
        ctx.obj["state"] = state
        ctx.call_on_close(state.close)


# Register all commands
overview.register_commands(cli)
settings.register_commands(cli)
cache.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
