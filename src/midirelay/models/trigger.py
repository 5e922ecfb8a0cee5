"""Trigger rule model."""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import ActionType, MidiCommand
from .request import MidiValue


def new_trigger_id() -> str:
    """Generate an opaque trigger id."""
    return f"trigger-{uuid.uuid4().hex[:8]}"


class Trigger(BaseModel):
    """
    A persisted rule mapping incoming MIDI events to an action.

    Match criteria left empty, or set to "*", match any value. Unknown
    `midicommand` or `actiontype` values are kept as-is but leave the
    trigger inert: it never matches and never executes.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(default="", description="Opaque id, assigned once on creation")

    # Match criteria
    midicommand: str = ""
    midiport: str | None = Field(default=None, description="Input port name, '*' for any")
    channel: MidiValue = None
    note: MidiValue = None
    velocity: MidiValue = None
    controller: MidiValue = None
    value: MidiValue = None

    # Action
    actiontype: str = ""
    url: str | None = None
    method: str | None = None
    jsondata: str | None = None
    outputport: str | None = None
    outputcommand: str | None = None
    outputchannel: MidiValue = None
    outputnote: MidiValue = None
    outputvelocity: MidiValue = None
    outputcontroller: MidiValue = None
    outputvalue: MidiValue = None

    @property
    def command_type(self) -> Optional[MidiCommand]:
        return MidiCommand.parse(self.midicommand)

    @property
    def action(self) -> Optional[ActionType]:
        return ActionType.parse(self.actiontype)

    @property
    def is_armed(self) -> bool:
        """Whether the trigger takes part in matching."""
        return self.command_type is not None and self.action is not None
