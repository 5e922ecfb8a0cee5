"""MIDI port management."""

from .registry import PortRegistry
from .transport import (
    InputHandle,
    MidiTransport,
    MidoInputHandle,
    MidoOutputHandle,
    MidoTransport,
    OutputHandle,
)

__all__ = [
    "InputHandle",
    "MidiTransport",
    "MidoInputHandle",
    "MidoOutputHandle",
    "MidoTransport",
    "OutputHandle",
    "PortRegistry",
]
