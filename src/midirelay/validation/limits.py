"""Protocol ranges for MIDI parameters."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldLimit:
    """Inclusive range of a MIDI parameter."""

    min: int
    max: int
    name: str  # Label used in error messages


MIDI_LIMITS: dict[str, FieldLimit] = {
    "channel": FieldLimit(0, 15, "Channel"),
    "note": FieldLimit(0, 127, "Note"),
    "velocity": FieldLimit(0, 127, "Velocity"),
    "value": FieldLimit(0, 127, "Value"),
    "controller": FieldLimit(0, 127, "Controller"),
    "program": FieldLimit(0, 127, "Program"),
    "pitchbend": FieldLimit(0, 16383, "Pitch Bend"),
}
