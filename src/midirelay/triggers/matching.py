"""Matching incoming events against trigger criteria."""

from midirelay.models import NOTE_COMMANDS, WILDCARD, MidiCommand, MidiEvent, MidiValue, Trigger
from midirelay.validation import is_missing, parse_int


def _is_any(criterion: MidiValue) -> bool:
    return is_missing(criterion) or criterion == WILDCARD


def criterion_matches(criterion: MidiValue, actual: int | None) -> bool:
    """
    Check one numeric criterion.

    Absent, empty and "*" criteria match any value, including an absent
    one. A criterion that is not a number never matches.
    """
    if _is_any(criterion):
        return True
    expected = parse_int(criterion)
    return expected is not None and expected == actual


def port_matches(criterion: str | None, port: str) -> bool:
    return _is_any(criterion) or criterion == port


def matches(trigger: Trigger, event: MidiEvent) -> bool:
    """
    Whether an event satisfies every criterion of a trigger.

    Checks run in order (command, port, channel, note, velocity,
    controller, value) and stop at the first failure. Inert triggers
    never match.
    """
    if not trigger.is_armed or trigger.command_type is not event.type:
        return False
    if not port_matches(trigger.midiport, event.port):
        return False
    if not criterion_matches(trigger.channel, event.channel):
        return False
    if event.type in NOTE_COMMANDS and not criterion_matches(trigger.note, event.note):
        return False
    if not criterion_matches(trigger.velocity, event.velocity):
        return False
    if event.type is MidiCommand.CC and not criterion_matches(trigger.controller, event.controller):
        return False
    return criterion_matches(trigger.value, event.value)
