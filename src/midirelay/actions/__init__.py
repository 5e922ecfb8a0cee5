"""Trigger actions."""

from .http import ALLOWED_METHODS, HttpAction, describe_connection_error
from .midi import MidiAction

__all__ = ["ALLOWED_METHODS", "HttpAction", "MidiAction", "describe_connection_error"]
