"""Protocols for the relay's outbound collaborators.

Implementations are called from relay threads (the receive consumer and
the action workers) and must not block.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from midirelay.models import LogEntry, MidiEvent


@runtime_checkable
class LogSink(Protocol):
    """Receives every activity log entry as it is appended (e.g. a live websocket feed)."""

    def publish(self, entry: "LogEntry") -> None:
        ...


@runtime_checkable
class EventSink(Protocol):
    """Receives every decoded incoming MIDI event, independent of trigger matching."""

    def publish(self, event: "MidiEvent") -> None:
        ...


@runtime_checkable
class NotificationSink(Protocol):
    """Shows user-facing notifications. Fire-and-forget; failures are ignored."""

    def notify(self, title: str, body: str) -> None:
        ...
