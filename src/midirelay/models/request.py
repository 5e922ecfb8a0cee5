"""Outbound MIDI request model."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

MidiValue = int | str | None


class OutboundMidiRequest(BaseModel):
    """
    Intent to send one MIDI message to an output port.

    Numeric fields accept integers or numeric strings (as submitted by
    forms); the validator range-checks them before encoding. `command` is
    the MSC command name, the MIDI message type lives in `midicommand`.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    midiport: str | None = Field(default=None, description="Output port name")
    midicommand: str | None = Field(default=None, description="noteon, noteoff, cc, pc, ...")
    channel: MidiValue = None
    note: MidiValue = None
    velocity: MidiValue = None
    controller: MidiValue = None
    value: MidiValue = None
    message: str | list[int] | None = Field(
        default=None, description="Sysex bytes, as a comma-separated string or list"
    )

    # MIDI Show Control
    device_id: int | str | None = Field(
        default=None, validation_alias=AliasChoices("device_id", "deviceId", "deviceid")
    )
    command_format: str | None = Field(
        default=None, validation_alias=AliasChoices("command_format", "commandFormat", "commandformat")
    )
    command: str | None = None
    cue: str | int | float | None = None
    cue_list: str | int | float | None = Field(
        default=None, validation_alias=AliasChoices("cue_list", "cueList", "cuelist")
    )
    cue_path: str | int | float | None = Field(
        default=None, validation_alias=AliasChoices("cue_path", "cuePath", "cuepath")
    )
