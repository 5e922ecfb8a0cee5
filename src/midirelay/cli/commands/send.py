"""Send a single MIDI message."""

from typing import Optional

import click

from midirelay.exceptions import MidiValidationError
from midirelay.models import VALID_MIDI_COMMANDS

from ._shared import handle_errors, open_relay


@click.command(name="send")
@click.argument("midicommand", type=click.Choice(VALID_MIDI_COMMANDS, case_sensitive=False))
@click.option("--port", "-p", "midiport", required=True, help="Output port name")
@click.option("--channel", type=int, default=None, help="MIDI channel (0-15)")
@click.option("--note", type=int, default=None, help="Note number (0-127)")
@click.option("--velocity", type=int, default=None, help="Velocity (0-127)")
@click.option("--controller", type=int, default=None, help="Controller number (0-127)")
@click.option("--value", type=int, default=None, help="Value (0-127, pitchbend 0-16383)")
@click.option("--message", default=None, help='Sysex bytes, e.g. "240,67,16,247"')
@click.option("--device-id", default=None, help="MSC device id (0-111, 'all' or 'g1'-'g15')")
@click.option("--format", "command_format", default=None, help="MSC command format, e.g. lighting.general")
@click.option("--msc-command", "command", default=None, help="MSC command, e.g. go")
@click.option("--cue", default=None, help="MSC cue number")
@click.option("--cue-list", default=None, help="MSC cue list")
@click.option("--cue-path", default=None, help="MSC cue path")
@click.pass_context
@handle_errors
def send(ctx, midicommand: str, **fields: Optional[object]):
    """
    Send one MIDI message.

    \b
    Examples:
      midirelay send noteon --port "IAC Bus 1" --channel 0 --note 60 --velocity 100
      midirelay send cc --port "IAC Bus 1" --channel 0 --controller 7 --value 90
      midirelay send msc --port "IAC Bus 1" --device-id all --format lighting.general \\
          --msc-command go --cue 5
    """
    request = {"midicommand": midicommand, **{k: v for k, v in fields.items() if v is not None}}

    with open_relay(ctx) as relay:
        try:
            result = relay.send_midi(request)
        except MidiValidationError as e:
            for error in e.errors:
                click.echo(f"  - {error}", err=True)
            raise click.ClickException("Invalid MIDI request")

    if not result.ok:
        raise click.ClickException(f"{result.status.value}: {result.error or ''}".rstrip(": "))

    click.echo(f"Sent to {request['midiport']}: {' '.join(f'{b:02X}' for b in result.message)}")
