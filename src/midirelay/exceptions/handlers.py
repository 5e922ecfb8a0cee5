"""Helpers that convert low-level errors into midirelay exceptions."""

from pydantic import ValidationError

from .base import MidiRelayError
from .config import ConfigFileInvalidError, ConfigValidationError


def wrap_pydantic_error(error: Exception, file_path: str) -> MidiRelayError:
    """
    Convert Pydantic validation errors to midirelay exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg
        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            return ConfigValidationError(
                field=".".join(str(loc) for loc in first_error.get("loc", ("unknown",))),
                value=first_error.get("input"),
                error_msg=first_error.get("msg", "validation failed"),
                file_path=file_path,
            )
        if errors:
            error_lines = [
                f"  - {'.'.join(str(loc) for loc in err.get('loc', ('unknown',)))}: "
                f"{err.get('msg', 'validation failed')}"
                for err in errors
            ]
            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
                file_path=file_path,
            )

    return ConfigValidationError(field="unknown", value=None, error_msg=error_msg, file_path=file_path)


def format_error_for_display(error: Exception) -> str:
    """Format any exception for CLI output."""
    if isinstance(error, MidiRelayError):
        return error.get_full_message()
    return f"Unexpected error: {error}"
