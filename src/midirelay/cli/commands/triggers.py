"""Trigger management commands."""

import json

import click

from midirelay.exceptions import MidiValidationError

from ._shared import handle_errors, open_relay


@click.group(name="triggers")
def triggers_group():
    """Manage triggers (MIDI in -> webhook or MIDI out)."""
    pass


@triggers_group.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Print the raw trigger definitions")
@click.pass_context
@handle_errors
def list_triggers(ctx, as_json: bool):
    """List configured triggers."""
    with open_relay(ctx) as relay:
        triggers = relay.list_triggers()

    if as_json:
        click.echo(json.dumps([t.model_dump(exclude_none=True) for t in triggers], indent=2))
        return

    if not triggers:
        click.echo("No triggers configured.")
        return

    for trigger in triggers:
        source = f"{trigger.midicommand} on {trigger.midiport or '*'}"
        target = trigger.url if trigger.outputport is None else trigger.outputport
        flag = "" if trigger.is_armed else " (inactive)"
        click.echo(f"  {trigger.id}: {source} -> {trigger.actiontype} {target}{flag}")


@triggers_group.command(name="add")
@click.argument("definition")
@click.pass_context
@handle_errors
def add_trigger(ctx, definition: str):
    """
    Add a trigger from a JSON definition.

    \b
    Example:
      midirelay triggers add '{"midicommand": "noteon", "midiport": "*", "note": 60,
                               "actiontype": "midi", "outputport": "IAC Bus 2"}'
    """
    try:
        data = json.loads(definition)
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="DEFINITION")
    if not isinstance(data, dict):
        raise click.BadParameter("must be a JSON object", param_hint="DEFINITION")

    with open_relay(ctx) as relay:
        try:
            trigger = relay.add_trigger(data)
        except MidiValidationError as e:
            for error in e.errors:
                click.echo(f"  - {error}", err=True)
            raise click.ClickException("Invalid trigger")

    click.echo(f"Trigger added: {trigger.id}")


@triggers_group.command(name="delete")
@click.argument("trigger_id")
@click.pass_context
@handle_errors
def delete_trigger(ctx, trigger_id: str):
    """Delete a trigger by id."""
    with open_relay(ctx) as relay:
        deleted = relay.delete_trigger(trigger_id)
    if not deleted:
        raise click.ClickException(f"Trigger not found: {trigger_id}")
    click.echo(f"Trigger deleted: {trigger_id}")


@triggers_group.command(name="test")
@click.argument("trigger_id")
@click.pass_context
@handle_errors
def test_trigger(ctx, trigger_id: str):
    """Call an HTTP trigger's webhook once and show the response."""
    with open_relay(ctx) as relay:
        outcome = relay.test_trigger(trigger_id)

    if not outcome.success:
        status = f" (status {outcome.status})" if outcome.status is not None else ""
        raise click.ClickException(f"{outcome.error}{status}")

    click.echo(f"{outcome.method} {outcome.url} -> {outcome.status} {outcome.status_text or ''}".rstrip())
    if outcome.body:
        click.echo(outcome.body)
