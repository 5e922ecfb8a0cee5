"""Decoded MIDI event model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import MidiCommand


class MidiEvent(BaseModel):
    """A MIDI message received on a port, decoded into named fields."""

    model_config = ConfigDict(frozen=True)

    port: str = Field(default="", description="Name of the port the message arrived on")
    type: MidiCommand = Field(description="Message type derived from the status byte")
    channel: int | None = Field(default=None, description="MIDI channel (0-15), None for sysex/msc")
    note: int | None = None
    velocity: int | None = None
    controller: int | None = None
    value: int | None = Field(default=None, description="cc/pc/pressure value or 14-bit pitch bend")
    raw: tuple[int, ...] = Field(description="Received bytes, unmodified")
    device_id: int | None = Field(default=None, description="MSC device id byte")
    command_format: int | None = Field(default=None, description="MSC command format byte")
    command: int | None = Field(default=None, description="MSC command byte")

    @property
    def is_known(self) -> bool:
        """Whether the event is a relayable message type."""
        return self.type is not MidiCommand.UNKNOWN

    def to_log_data(self) -> dict[str, Any]:
        """Fields recorded in the activity log and sent to event sinks."""
        data = self.model_dump(mode="json", exclude_none=True)
        data["raw"] = list(self.raw)
        return data
