"""Conversion between raw MIDI bytes and relay events/requests."""

import logging
from collections.abc import Sequence
from typing import Optional

from midirelay.models import MidiCommand, MidiEvent, OutboundMidiRequest

from .msc import SYSEX_START, build_msc, is_msc, parse_msc

logger = logging.getLogger(__name__)

# Data bytes required after the status byte, per channel message status nibble
_DATA_LENGTHS = {
    0x80: 2,
    0x90: 2,
    0xA0: 2,
    0xB0: 2,
    0xC0: 1,
    0xD0: 1,
    0xE0: 2,
}


def decode(data: Sequence[int], port: str = "") -> Optional[MidiEvent]:
    """
    Decode one complete MIDI message.

    Args:
        data: Message bytes, status byte first
        port: Name of the port the message arrived on

    Returns:
        The decoded event, None for empty input. Unrecognized or truncated
        messages decode to an event of type MidiCommand.UNKNOWN.
    """
    if not data:
        return None

    raw = tuple(int(b) & 0xFF for b in data)
    status = raw[0]
    kind = status & 0xF0
    channel = status & 0x0F

    required = _DATA_LENGTHS.get(kind)
    if required is not None and len(raw) < required + 1:
        return MidiEvent(port=port, type=MidiCommand.UNKNOWN, raw=raw)

    match kind:
        case 0x80:
            return MidiEvent(
                port=port, type=MidiCommand.NOTE_OFF, channel=channel,
                note=raw[1], velocity=raw[2], raw=raw,
            )
        case 0x90:
            # Note on with velocity 0 is a note off
            command = MidiCommand.NOTE_ON if raw[2] > 0 else MidiCommand.NOTE_OFF
            return MidiEvent(
                port=port, type=command, channel=channel,
                note=raw[1], velocity=raw[2], raw=raw,
            )
        case 0xB0:
            return MidiEvent(
                port=port, type=MidiCommand.CC, channel=channel,
                controller=raw[1], value=raw[2], raw=raw,
            )
        case 0xC0:
            return MidiEvent(port=port, type=MidiCommand.PC, channel=channel, value=raw[1], raw=raw)
        case 0xD0:
            return MidiEvent(port=port, type=MidiCommand.PRESSURE, channel=channel, value=raw[1], raw=raw)
        case 0xE0:
            return MidiEvent(
                port=port, type=MidiCommand.PITCH_BEND, channel=channel,
                value=raw[1] | (raw[2] << 7), raw=raw,
            )
        case 0xF0 if status == SYSEX_START:
            if is_msc(raw):
                device_id, command_format, command = parse_msc(raw)
                return MidiEvent(
                    port=port, type=MidiCommand.MSC, raw=raw,
                    device_id=device_id, command_format=command_format, command=command,
                )
            return MidiEvent(port=port, type=MidiCommand.SYSEX, raw=raw)
        case _:
            # Polyphonic aftertouch, system common/realtime, stray data bytes
            return MidiEvent(port=port, type=MidiCommand.UNKNOWN, raw=raw)


def parse_sysex(message: str | Sequence[int] | None) -> list[int]:
    """
    Parse sysex bytes given as "240, 67, 16, 247" or a list of integers.

    Raises:
        ValueError: If an entry is not an integer
    """
    if message is None:
        return []
    if isinstance(message, str):
        return [int(part.strip()) for part in message.split(",") if part.strip()]
    return [int(b) for b in message]


def _int(value: int | str | None, default: Optional[int] = None) -> int:
    if value is None or value == "":
        if default is None:
            raise ValueError("missing value")
        return default
    return int(value)


def encode(request: OutboundMidiRequest) -> Optional[list[int]]:
    """
    Encode an outbound request into MIDI bytes.

    Returns:
        Message bytes, or None if the request's command is not recognized

    Raises:
        ValueError: If a required field is missing or not an integer
    """
    command = MidiCommand.parse(request.midicommand)

    match command:
        case MidiCommand.NOTE_ON:
            return [
                0x90 + _int(request.channel),
                _int(request.note),
                _int(request.velocity, default=127),
            ]
        case MidiCommand.NOTE_OFF:
            return [
                0x80 + _int(request.channel),
                _int(request.note),
                _int(request.velocity, default=0),
            ]
        case MidiCommand.CC:
            return [0xB0 + _int(request.channel), _int(request.controller), _int(request.value)]
        case MidiCommand.PC:
            return [0xC0 + _int(request.channel), _int(request.value)]
        case MidiCommand.PRESSURE:
            return [0xD0 + _int(request.channel), _int(request.value)]
        case MidiCommand.PITCH_BEND:
            value = _int(request.value)
            return [0xE0 + _int(request.channel), value & 0x7F, (value >> 7) & 0x7F]
        case MidiCommand.SYSEX:
            return parse_sysex(request.message)
        case MidiCommand.MSC:
            return build_msc(
                request.device_id,
                request.command_format,
                request.command,
                request.cue,
                request.cue_list,
                request.cue_path,
            )
        case MidiCommand.UNKNOWN | None:
            logger.debug(f"Cannot encode unknown MIDI command: {request.midicommand!r}")
            return None
