"""Preference management commands."""

import click


@click.group()
def settings_group():
    """Manage stored preferences."""
    pass


@settings_group.command("list")
@click.pass_context
def list_settings(ctx):
    """List all stored preferences."""
    store = ctx.obj["state"].settings

    preferences = store.get_all_preferences()
    if not preferences:
        click.echo("No preferences stored. Defaults are in effect.")
        return

    click.echo("\nPreferences:")
    for key, value in sorted(preferences.items()):
        click.echo(f"  {key}: {value}")


@settings_group.command("reset")
@click.confirmation_option(prompt="Reset all preferences to their defaults?")
@click.pass_context
def reset_settings(ctx):
    """Reset all preferences to their defaults."""
    ctx.obj["state"].settings.reset_all_preferences()
    click.echo("All preferences reset to defaults")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
