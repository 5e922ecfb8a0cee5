"""Tests for trigger matching."""

import pytest

from midirelay.codec import decode
from midirelay.models import MidiCommand, MidiEvent, Trigger
from midirelay.triggers import criterion_matches, matches, port_matches


def http_trigger(**fields) -> Trigger:
    return Trigger(actiontype="http", url="http://localhost/hook", **fields)


@pytest.mark.unit
class TestCriterion:
    """Test single criterion comparison."""

    @pytest.mark.parametrize("criterion", [None, "", "*"])
    def test_any(self, criterion):
        assert criterion_matches(criterion, 5)
        assert criterion_matches(criterion, None)

    def test_numeric_and_string_numbers(self):
        assert criterion_matches(60, 60)
        assert criterion_matches("60", 60)
        assert not criterion_matches(60, 61)

    def test_non_numeric_never_matches(self):
        assert not criterion_matches("C4", 60)

    def test_port(self):
        assert port_matches("*", "Keys In")
        assert port_matches(None, "Keys In")
        assert port_matches("Keys In", "Keys In")
        assert not port_matches("Pads In", "Keys In")


@pytest.mark.unit
class TestMatches:
    """Test full trigger matching."""

    def test_wildcard_channel_note_trigger(self):
        trigger = http_trigger(midicommand="noteon", channel="*", note=60)

        for channel in (0, 9, 15):
            assert matches(trigger, decode([0x90 | channel, 60, 100], port="Keys In"))
        assert not matches(trigger, decode([0x90, 61, 100], port="Keys In"))

    def test_command_type_must_match(self):
        trigger = http_trigger(midicommand="noteon", note=60)
        assert not matches(trigger, decode([0x80, 60, 0]))

    def test_command_case_insensitive(self):
        trigger = http_trigger(midicommand="NoteOn", note=60)
        assert matches(trigger, decode([0x90, 60, 1]))

    def test_port_criterion(self):
        trigger = http_trigger(midicommand="cc", midiport="Pads In")
        assert matches(trigger, decode([0xB0, 1, 1], port="Pads In"))
        assert not matches(trigger, decode([0xB0, 1, 1], port="Keys In"))

    def test_channel_and_velocity(self):
        trigger = http_trigger(midicommand="noteon", channel=2, velocity=127)
        assert matches(trigger, decode([0x92, 10, 127]))
        assert not matches(trigger, decode([0x93, 10, 127]))
        assert not matches(trigger, decode([0x92, 10, 126]))

    def test_cc_controller_and_value(self):
        trigger = http_trigger(midicommand="cc", controller=7, value="100")
        assert matches(trigger, decode([0xB0, 7, 100]))
        assert not matches(trigger, decode([0xB0, 8, 100]))
        assert not matches(trigger, decode([0xB0, 7, 99]))

    def test_note_criterion_ignored_for_non_note_events(self):
        trigger = http_trigger(midicommand="cc", note=60, controller=1)
        assert matches(trigger, decode([0xB0, 1, 64]))

    def test_controller_criterion_ignored_for_non_cc_events(self):
        trigger = http_trigger(midicommand="pc", controller=5, value=3)
        assert matches(trigger, decode([0xC0, 3]))

    def test_value_criterion_against_absent_value(self):
        trigger = http_trigger(midicommand="noteon", value=1)
        assert not matches(trigger, decode([0x90, 60, 1]))

    def test_msc_matches_on_type_and_port(self):
        trigger = http_trigger(midicommand="msc", midiport="*")
        event = decode([0xF0, 0x7F, 0x7F, 0x02, 0x01, 0x01, 0xF7], port="Keys In")
        assert matches(trigger, event)

    def test_inert_triggers_never_match(self):
        event = MidiEvent(type=MidiCommand.NOTE_ON, channel=0, note=60, velocity=1, raw=(0x90, 60, 1))
        assert not matches(http_trigger(midicommand="clock"), event)
        assert not matches(Trigger(midicommand="noteon", actiontype="email"), event)
