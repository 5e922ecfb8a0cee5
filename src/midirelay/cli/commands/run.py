"""Run the relay in the foreground."""

import logging
import time

import click

from midirelay.models import PortDirection

from ._shared import EchoLogSink, handle_errors, open_relay

logger = logging.getLogger(__name__)


@click.command(name="run")
@click.option("--notify/--no-notify", default=False, help="Announce available outputs on start")
@click.pass_context
@handle_errors
def run(ctx, notify: bool):
    """
    Start the relay and stream the activity log.

    Opens every enabled input port, creates the virtual port pair and
    fires triggers until Ctrl+C.
    """
    with open_relay(ctx) as relay:
        relay.register_log_sink(EchoLogSink())
        ports = relay.start(show_notification=notify)

        opened = [p.name for p in ports if p.direction is PortDirection.INPUT and p.opened]
        click.echo(f"Listening on {len(opened)} input(s): {', '.join(opened) or 'none'}")
        click.echo(f"{len(relay.list_triggers())} trigger(s) loaded")
        click.echo("\nPress Ctrl+C to stop\n")

        try:
            while True:
                time.sleep(0.1)
        except KeyboardInterrupt:
            logger.info("Relay interrupted by user")
            click.echo("\nShutting down...", err=True)
