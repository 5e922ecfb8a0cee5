"""Validation of outbound MIDI requests and trigger definitions.

Every check aggregates all failures instead of stopping at the first one,
so a form can show every problem at once.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel

from midirelay.models import VALID_MIDI_COMMANDS, WILDCARD, ActionType, MidiCommand

from .limits import MIDI_LIMITS

# Per-command fields: (field name, limit name, required)
_REQUEST_FIELDS: dict[MidiCommand, tuple[tuple[str, str, bool], ...]] = {
    MidiCommand.NOTE_ON: (("channel", "channel", True), ("note", "note", True), ("velocity", "velocity", False)),
    MidiCommand.NOTE_OFF: (("channel", "channel", True), ("note", "note", True), ("velocity", "velocity", False)),
    MidiCommand.CC: (("channel", "channel", True), ("controller", "controller", True), ("value", "value", True)),
    MidiCommand.PC: (("channel", "channel", True), ("value", "value", True)),
    MidiCommand.PRESSURE: (("channel", "channel", True), ("value", "value", True)),
    MidiCommand.PITCH_BEND: (("channel", "channel", True), ("value", "pitchbend", True)),
}


@dataclass(slots=True)
class FieldResult:
    """Result of checking a single parameter."""

    valid: bool
    value: int | str | None = None
    error: Optional[str] = None


@dataclass(slots=True)
class ValidationResult:
    """Result of checking a whole request or trigger."""

    valid: bool
    errors: list[str] = field(default_factory=list)


def parse_int(value: Any) -> Optional[int]:
    """
    Parse an integer from an int, an integral float or a numeric string.

    The whole string must be an integer: "60abc" and "12.5" are rejected,
    not read as their leading digits.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def is_missing(value: Any) -> bool:
    return value is None or value == ""


def _as_dict(obj: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    return dict(obj)


def validate_field(name: str, value: Any, allow_wildcard: bool = False) -> FieldResult:
    """
    Check one MIDI parameter against its protocol range.

    Args:
        name: Parameter name, a key of MIDI_LIMITS
        value: Value to check; integers and numeric strings are accepted
        allow_wildcard: Accept "*" unchanged

    Returns:
        FieldResult with the parsed integer, or an error message naming the
        parameter, its range and the offending value
    """
    if allow_wildcard and value == WILDCARD:
        return FieldResult(valid=True, value=WILDCARD)

    limits = MIDI_LIMITS.get(name)
    if limits is None:
        return FieldResult(valid=False, error=f"Unknown MIDI parameter: {name}")

    number = parse_int(value)
    if number is None:
        return FieldResult(
            valid=False,
            error=f"{limits.name} must be a number ({limits.min}-{limits.max}), got: {value}",
        )

    if number < limits.min or number > limits.max:
        return FieldResult(
            valid=False,
            error=f"{limits.name} must be {limits.min}-{limits.max}, got: {number}",
        )

    return FieldResult(valid=True, value=number)


def _check_command(data: dict[str, Any], errors: list[str], list_valid: bool) -> Optional[MidiCommand]:
    raw = data.get("midicommand")
    if is_missing(raw):
        errors.append("midicommand is required")
        return None

    command = MidiCommand.parse(raw)
    if command is None:
        message = f"Invalid midicommand: {raw}"
        if list_valid:
            message += f". Valid commands: {', '.join(VALID_MIDI_COMMANDS)}"
        errors.append(message)
    return command


def validate_outbound_request(request: Mapping[str, Any] | BaseModel | None) -> ValidationResult:
    """
    Check a request to send MIDI before it is encoded.

    Wildcards are never allowed: every field must be a concrete value.
    """
    if request is None:
        return ValidationResult(valid=False, errors=["MIDI object is required"])

    data = _as_dict(request)
    errors: list[str] = []

    command = _check_command(data, errors, list_valid=True)

    if is_missing(data.get("midiport")):
        errors.append("midiport is required")

    for field_name, limit_name, required in _REQUEST_FIELDS.get(command, ()):
        value = data.get(field_name)
        if is_missing(value):
            if required:
                errors.append(f"{field_name} is required for {command.value}")
            continue
        result = validate_field(limit_name, value)
        if not result.valid:
            errors.append(result.error)

    return ValidationResult(valid=not errors, errors=errors)


def validate_trigger(trigger: Mapping[str, Any] | BaseModel | None) -> ValidationResult:
    """
    Check a trigger definition.

    Match criteria are optional (absent means any value); when present they
    may be "*" or must lie in the protocol range.
    """
    if trigger is None:
        return ValidationResult(valid=False, errors=["Trigger object is required"])

    data = _as_dict(trigger)
    errors: list[str] = []

    command = _check_command(data, errors, list_valid=False)

    for field_name, limit_name, _required in _REQUEST_FIELDS.get(command, ()):
        value = data.get(field_name)
        if is_missing(value):
            continue
        result = validate_field(limit_name, value, allow_wildcard=True)
        if not result.valid:
            errors.append(result.error)

    raw_action = data.get("actiontype")
    action = ActionType.parse(raw_action)
    if is_missing(raw_action):
        errors.append("actiontype is required")
    elif action is None:
        errors.append(f"Invalid actiontype: {raw_action}. Valid types: http, midi")

    match action:
        case ActionType.HTTP:
            if is_missing(data.get("url")):
                errors.append("url is required for http action")
            jsondata = data.get("jsondata")
            if not is_missing(jsondata):
                try:
                    json.loads(jsondata)
                except (TypeError, ValueError) as e:
                    errors.append(f"jsondata is not valid JSON: {e}")
        case ActionType.MIDI:
            if is_missing(data.get("outputport")):
                errors.append("outputport is required for midi action")
        case None:
            pass

    return ValidationResult(valid=not errors, errors=errors)
