"""MIDI Relay: bridge MIDI ports, triggers and HTTP webhooks."""

__version__ = "0.1.0"

from .core import RelayEngine
from .models import MidiEvent, OutboundMidiRequest, RelayConfig, Trigger
from .services import ConfigService

__all__ = [
    "ConfigService",
    "MidiEvent",
    "OutboundMidiRequest",
    "RelayConfig",
    "RelayEngine",
    "Trigger",
]
