"""MIDI port commands."""

import click

from midirelay.models import PortDirection

from ._shared import handle_errors, open_relay


@click.group(name="ports")
def ports_group():
    """MIDI port commands."""
    pass


@ports_group.command(name="list")
@click.pass_context
@handle_errors
def list_ports(ctx):
    """List MIDI ports with their open/enabled state."""
    with open_relay(ctx) as relay:
        ports = relay.ports.scan(create_virtual=False)

    inputs = [p for p in ports if p.direction is PortDirection.INPUT]
    outputs = [p for p in ports if p.direction is PortDirection.OUTPUT]

    click.echo("MIDI Input Ports:\n")
    if not inputs:
        click.echo("  No MIDI input ports found.")
    for i, port in enumerate(inputs):
        state = "enabled" if port.enabled else "disabled"
        click.echo(f"  [{i}] {port.name} ({state})")

    click.echo("\nMIDI Output Ports:\n")
    if not outputs:
        click.echo("  No MIDI output ports found.")
    for i, port in enumerate(outputs):
        click.echo(f"  [{i}] {port.name}")


@ports_group.command(name="toggle")
@click.argument("name")
@click.pass_context
@handle_errors
def toggle_port(ctx, name: str):
    """Enable or disable automatic opening of an input port."""
    with open_relay(ctx) as relay:
        enabled = relay.toggle_port(name)
    click.echo(f"{name}: {'enabled' if enabled else 'disabled'}")
