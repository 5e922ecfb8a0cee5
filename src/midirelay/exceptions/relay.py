"""Relay pipeline exceptions.

- MidiValidationError: Outbound request or trigger parameters are malformed
- TransportError: A MIDI port could not be opened, closed or written
- DispatchError: A trigger action (HTTP or MIDI) failed
"""

from typing import Any, Optional

from .base import MidiRelayError


class MidiValidationError(MidiRelayError):
    """Request parameters are outside protocol ranges or missing."""

    def __init__(self, errors: list[str], subject: str = "MIDI request"):
        """
        Initialize validation error.

        Args:
            errors: Every validation failure found (not just the first)
            subject: What was being validated, for the message
        """
        super().__init__(
            user_message=f"Invalid {subject}: " + "; ".join(errors),
            recoverable=True,
            recovery_hint="Fix the listed parameters and try again",
        )
        self.errors = list(errors)


class TransportError(MidiRelayError):
    """MIDI port operation failed."""

    def __init__(self, port: str, operation: str, original_error: Optional[str] = None):
        """
        Initialize transport error.

        Args:
            port: Name of the MIDI port
            operation: What was attempted ("open", "send", ...)
            original_error: Error reported by the MIDI backend
        """
        technical = f"MIDI {operation} failed on '{port}'"
        if original_error:
            technical += f": {original_error}"

        super().__init__(
            user_message=f"Could not {operation} MIDI port '{port}'",
            technical_message=technical,
            recoverable=True,
            recovery_hint="Run 'midirelay ports list' to see available MIDI ports",
        )
        self.port = port
        self.operation = operation
        self.original_error = original_error


class DispatchError(MidiRelayError):
    """
    Trigger action failed.

    Carries the activity log coordinates (port, command, data) so the
    trigger engine can record the failure as an APP-ERR entry.
    """

    def __init__(self, message: str, port: str, command: str, data: Optional[dict[str, Any]] = None):
        super().__init__(user_message=message, recoverable=True)
        self.port = port
        self.command = command
        self.data = data if data is not None else {"error": message}
