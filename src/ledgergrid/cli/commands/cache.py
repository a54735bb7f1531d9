"""Cache maintenance commands."""

import click
from ledgergrid.cache.store import CacheStore


@click.group()
def cache_group():
    """Manage the overview cache."""
    pass


@cache_group.command("clear")
@click.pass_context
def clear_cache(ctx):
    """Remove every cached overview derivation from the state database."""
    config = ctx.obj["config"]
    store = CacheStore(config.cache, durable=ctx.obj["state"].durable_cache)

    if not store.enabled:
        click.echo("Cache is disabled in the configuration; nothing to clear")
        return

    store.invalidate_all()
    click.echo(f"Cleared {len(config.cache.known_keys())} cache keys")


def register_commands(cli):
    """Register cache commands with main CLI."""
    cli.add_command(cache_group, name="cache")
