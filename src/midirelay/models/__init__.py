"""Data models for the MIDI relay."""

from .activity import LogEntry
from .config import DEFAULT_CONFIG_PATH, RelayConfig
from .enums import (
    NOTE_COMMANDS,
    VALID_MIDI_COMMANDS,
    WILDCARD,
    ActionType,
    LogDirection,
    MidiCommand,
    PortDirection,
    SendStatus,
)
from .event import MidiEvent
from .port import PortDescriptor, PortInfo
from .request import MidiValue, OutboundMidiRequest
from .results import HttpOutcome, SendResult
from .trigger import Trigger, new_trigger_id

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "NOTE_COMMANDS",
    "VALID_MIDI_COMMANDS",
    "WILDCARD",
    "ActionType",
    "HttpOutcome",
    "LogDirection",
    "LogEntry",
    "MidiCommand",
    "MidiEvent",
    "MidiValue",
    "OutboundMidiRequest",
    "PortDescriptor",
    "PortDirection",
    "PortInfo",
    "RelayConfig",
    "SendResult",
    "SendStatus",
    "Trigger",
    "new_trigger_id",
]
