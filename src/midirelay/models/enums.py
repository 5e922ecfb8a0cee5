"""Enumerations for the MIDI relay."""

from enum import Enum
from typing import Optional


class MidiCommand(str, Enum):
    """MIDI message types understood by the relay."""

    NOTE_ON = "noteon"
    NOTE_OFF = "noteoff"
    CC = "cc"
    PC = "pc"
    PRESSURE = "pressure"
    PITCH_BEND = "pitchbend"
    SYSEX = "sysex"
    MSC = "msc"  # MIDI Show Control, carried in a universal real-time sysex
    UNKNOWN = "unknown"  # Unrecognized status byte, never relayed

    @classmethod
    def parse(cls, value: object) -> Optional["MidiCommand"]:
        """
        Parse a command name, case-insensitively.

        Returns:
            The command, or None if the name is not a relayable command
        """
        if isinstance(value, cls):
            return None if value is cls.UNKNOWN else value
        if not isinstance(value, str):
            return None
        try:
            command = cls(value.strip().lower())
        except ValueError:
            return None
        return None if command is cls.UNKNOWN else command


class ActionType(str, Enum):
    """What a trigger does when it matches."""

    HTTP = "http"
    MIDI = "midi"

    @classmethod
    def parse(cls, value: object) -> Optional["ActionType"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class LogDirection(str, Enum):
    """Activity log entry categories."""

    TX = "TX"
    RX = "RX"
    TRIGGER = "TRIGGER"
    APP_ERR = "APP-ERR"


class PortDirection(str, Enum):
    """MIDI port direction."""

    INPUT = "in"
    OUTPUT = "out"


class SendStatus(str, Enum):
    """Outcome of an outbound MIDI send."""

    SENT = "midi-sent-successfully"
    INVALID_COMMAND = "invalid-midi-command"
    ERROR = "error"


VALID_MIDI_COMMANDS: tuple[str, ...] = tuple(
    command.value for command in MidiCommand if command is not MidiCommand.UNKNOWN
)

# Commands whose events carry a note number
NOTE_COMMANDS = frozenset({MidiCommand.NOTE_ON, MidiCommand.NOTE_OFF})

WILDCARD = "*"
