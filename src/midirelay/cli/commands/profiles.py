"""Trigger profile commands."""

import click

from ._shared import handle_errors, open_relay


@click.group(name="profiles")
def profiles_group():
    """Save and restore named sets of triggers."""
    pass


@profiles_group.command(name="list")
@click.pass_context
@handle_errors
def list_profiles(ctx):
    """List saved profiles."""
    with open_relay(ctx) as relay:
        names = relay.list_profiles()

    if not names:
        click.echo("No profiles saved.")
    for name in names:
        click.echo(f"  {name}")


@profiles_group.command(name="save")
@click.argument("name")
@click.pass_context
@handle_errors
def save_profile(ctx, name: str):
    """Save the current triggers as a profile."""
    with open_relay(ctx) as relay:
        triggers = relay.save_profile(name)
    click.echo(f"Saved profile '{name}' ({len(triggers)} trigger(s))")


@profiles_group.command(name="load")
@click.argument("name")
@click.pass_context
@handle_errors
def load_profile(ctx, name: str):
    """Replace the current triggers with a saved profile."""
    with open_relay(ctx) as relay:
        loaded = relay.load_profile(name)
    if not loaded:
        raise click.ClickException(f"Profile not found: {name}")
    click.echo(f"Loaded profile '{name}'")


@profiles_group.command(name="delete")
@click.argument("name")
@click.pass_context
@handle_errors
def delete_profile(ctx, name: str):
    """Delete a saved profile."""
    with open_relay(ctx) as relay:
        deleted = relay.delete_profile(name)
    if not deleted:
        raise click.ClickException(f"Profile not found: {name}")
    click.echo(f"Deleted profile '{name}'")
