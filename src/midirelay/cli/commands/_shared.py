"""Helpers shared by the CLI commands."""

import functools
import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import click

from midirelay.core import RelayEngine
from midirelay.exceptions import MidiRelayError, format_error_for_display
from midirelay.models import LogEntry, RelayConfig
from midirelay.services import ConfigService

logger = logging.getLogger(__name__)


def load_config(ctx: click.Context) -> ConfigService[RelayConfig]:
    return ConfigService.from_file(RelayConfig, ctx.obj["config_path"])


@contextmanager
def open_relay(ctx: click.Context) -> Iterator[RelayEngine]:
    """Relay engine for one command; ports are closed on exit."""
    with RelayEngine(load_config(ctx)) as relay:
        yield relay


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Show relay errors without a traceback and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except MidiRelayError as e:
            logger.error(f"{func.__name__} failed: {e.technical_message}")
            click.echo(f"ERROR: {format_error_for_display(e)}", err=True)
            sys.exit(1)
        except Exception as e:
            logger.exception(f"Error running {func.__name__}")
            click.echo(f"ERROR: {format_error_for_display(e)}", err=True)
            ctx = click.get_current_context(silent=True)
            if ctx is not None and ctx.obj:
                click.echo(f"For details, check the log file: {ctx.obj.get('log_path')}", err=True)
            sys.exit(1)

    return wrapper


def format_entry(entry: LogEntry) -> str:
    timestamp = entry.timestamp.astimezone().strftime("%H:%M:%S.%f")[:-3]
    return f"[{timestamp}] {entry.direction.value:<7} {entry.port} {entry.command} {entry.data}"


class EchoLogSink:
    """Prints activity log entries as they are appended."""

    def publish(self, entry: LogEntry) -> None:
        click.echo(format_entry(entry))
