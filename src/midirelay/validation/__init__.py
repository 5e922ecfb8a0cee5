"""Range and presence checks for outbound requests and triggers."""

from .limits import MIDI_LIMITS, FieldLimit
from .validator import (
    FieldResult,
    ValidationResult,
    is_missing,
    parse_int,
    validate_field,
    validate_outbound_request,
    validate_trigger,
)

__all__ = [
    "MIDI_LIMITS",
    "FieldLimit",
    "FieldResult",
    "ValidationResult",
    "is_missing",
    "parse_int",
    "validate_field",
    "validate_outbound_request",
    "validate_trigger",
]
