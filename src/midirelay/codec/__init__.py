"""MIDI byte codec: raw bytes to events, requests to raw bytes, MSC."""

from .messages import decode, encode, parse_sysex
from .msc import (
    COMMAND_FORMATS,
    COMMANDS,
    build_msc,
    is_msc,
    parse_msc,
    resolve_command,
    resolve_command_format,
    resolve_device_id,
)

__all__ = [
    "COMMANDS",
    "COMMAND_FORMATS",
    "build_msc",
    "decode",
    "encode",
    "is_msc",
    "parse_msc",
    "parse_sysex",
    "resolve_command",
    "resolve_command_format",
    "resolve_device_id",
]
