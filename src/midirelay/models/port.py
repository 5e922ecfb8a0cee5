"""MIDI port descriptors."""

from pydantic import BaseModel, Field

from .enums import PortDirection


class PortDescriptor(BaseModel):
    """A port as reported by the MIDI transport."""

    name: str
    direction: PortDirection
    manufacturer: str = ""


class PortInfo(BaseModel):
    """A port as tracked by the relay."""

    name: str
    direction: PortDirection
    opened: bool = False
    manufacturer: str = ""
    enabled: bool = Field(default=True, description="Inputs only: auto-open on scan")
