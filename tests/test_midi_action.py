"""Tests for the MIDI-out action."""

from unittest.mock import Mock

import pytest

from midirelay.actions import MidiAction
from midirelay.codec import decode
from midirelay.exceptions import DispatchError, MidiValidationError
from midirelay.models import LogDirection, OutboundMidiRequest, SendResult, SendStatus, Trigger


def midi_trigger(**fields) -> Trigger:
    base = {"id": "t1", "midicommand": "noteon", "actiontype": "midi", "outputport": "Synth Out"}
    return Trigger(**{**base, **fields})


@pytest.mark.unit
class TestBuildRequest:
    """Test building the outbound request."""

    def test_output_fields_win(self):
        trigger = midi_trigger(note=60, outputcommand="cc", outputchannel=3, outputcontroller=7, outputvalue=90)
        request = MidiAction.build_request(trigger)

        assert request.midiport == "Synth Out"
        assert request.midicommand == "cc"
        assert (request.channel, request.controller, request.value) == (3, 7, 90)

    def test_falls_back_to_input_fields(self):
        trigger = midi_trigger(channel=1, note=60, velocity=100)
        request = MidiAction.build_request(trigger)

        assert request.midicommand == "noteon"
        assert (request.channel, request.note, request.velocity) == (1, 60, 100)

    def test_wildcards_take_event_values(self):
        trigger = midi_trigger(channel="*", note="*", outputvelocity="*")
        event = decode([0x95, 64, 33], port="Keys In")

        request = MidiAction.build_request(trigger, event)

        assert (request.channel, request.note, request.velocity) == (5, 64, 33)

    def test_wildcard_without_event_is_dropped(self):
        request = MidiAction.build_request(midi_trigger(channel="*", note=60))
        assert request.channel is None


@pytest.mark.unit
class TestRun:
    """Test running the action."""

    def test_success_logs_trigger_entry(self, activity_log):
        send = Mock(return_value=SendResult(status=SendStatus.SENT, message=[0x90, 60, 127]))
        action = MidiAction(send, activity_log)

        action.run(midi_trigger(channel=0, note=60))

        send.assert_called_once()
        assert isinstance(send.call_args.args[0], OutboundMidiRequest)
        entry = activity_log.entries()[-1]
        assert entry.direction is LogDirection.TRIGGER
        assert (entry.port, entry.command) == ("MIDI", "Synth Out")
        assert entry.data["note"] == 60

    def test_send_error_raises_dispatch_error(self, activity_log):
        send = Mock(return_value=SendResult(status=SendStatus.ERROR, error="Could not send MIDI port 'Synth Out'"))
        action = MidiAction(send, activity_log)

        with pytest.raises(DispatchError) as exc_info:
            action.run(midi_trigger(channel=0, note=60))

        assert exc_info.value.port == "MIDI Trigger"
        assert exc_info.value.command == "Synth Out"
        assert "Synth Out" in exc_info.value.data["error"]
        assert len(activity_log) == 0

    def test_invalid_request_raises_dispatch_error(self, activity_log):
        send = Mock(side_effect=MidiValidationError(["note is required for noteon"]))
        action = MidiAction(send, activity_log)

        with pytest.raises(DispatchError) as exc_info:
            action.run(midi_trigger(channel=0))

        assert "note is required for noteon" in exc_info.value.data["error"]
