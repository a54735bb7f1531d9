"""CLI error handling helpers."""

import click

from ledgergrid.domain.errors import DomainError
from ledgergrid.logging_setup import get_logger

_logger = get_logger("ledgergrid.cli")


def handle_domain_error(ctx: click.Context, error: DomainError | OSError) -> None:
    """Render a domain or ledger access error and exit with failure."""
    _logger.debug("Command %s failed", ctx.info_name, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
