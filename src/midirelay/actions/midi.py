"""MIDI-out trigger action."""

import logging
from typing import Callable, Optional

from midirelay.activity import ActivityLog
from midirelay.exceptions import DispatchError, MidiValidationError
from midirelay.models import WILDCARD, LogDirection, MidiEvent, OutboundMidiRequest, SendResult, Trigger
from midirelay.validation import is_missing

logger = logging.getLogger(__name__)

# (request field, trigger output field, trigger input field)
_FIELD_SOURCES = (
    ("channel", "outputchannel", "channel"),
    ("note", "outputnote", "note"),
    ("velocity", "outputvelocity", "velocity"),
    ("controller", "outputcontroller", "controller"),
    ("value", "outputvalue", "value"),
)


class MidiAction:
    """Sends a MIDI message in response to a trigger."""

    def __init__(self, send: Callable[[OutboundMidiRequest], SendResult], activity_log: ActivityLog):
        """
        Initialize the MIDI action.

        Args:
            send: The relay's outbound path (validate, encode, write, log)
            activity_log: Where successful sends are recorded
        """
        self._send = send
        self._log = activity_log

    @staticmethod
    def build_request(trigger: Trigger, event: Optional[MidiEvent] = None) -> OutboundMidiRequest:
        """
        Build the outbound request for a trigger.

        Each field comes from the trigger's output field, falling back to
        the matching input criterion. A "*" left after the fallback is
        replaced by the value carried by the incoming event.
        """
        fields: dict[str, object] = {
            "midiport": trigger.outputport,
            "midicommand": trigger.outputcommand or trigger.midicommand,
        }
        for name, output_field, input_field in _FIELD_SOURCES:
            value = getattr(trigger, output_field)
            if is_missing(value):
                value = getattr(trigger, input_field)
            if value == WILDCARD:
                value = getattr(event, name, None) if event is not None else None
            fields[name] = value
        return OutboundMidiRequest.model_validate(fields)

    def run(self, trigger: Trigger, event: Optional[MidiEvent] = None) -> SendResult:
        """
        Send the trigger's MIDI message.

        Raises:
            DispatchError: If the request is invalid or the send failed
        """
        port = trigger.outputport or ""
        request = self.build_request(trigger, event)
        try:
            result = self._send(request)
        except MidiValidationError as e:
            raise DispatchError(f"MIDI trigger failed: {e.user_message}", "MIDI Trigger", port) from e

        if not result.ok:
            error = result.error or result.status.value
            raise DispatchError(f"MIDI trigger failed: {error}", "MIDI Trigger", port)

        logger.info(f"MIDI trigger {trigger.id} sent to {port}")
        self._log.append(
            LogDirection.TRIGGER, "MIDI", port, request.model_dump(exclude_none=True)
        )
        return result
