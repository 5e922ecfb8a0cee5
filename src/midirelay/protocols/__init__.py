"""Protocol definitions for relay collaborators."""

from .sinks import EventSink, LogSink, NotificationSink

__all__ = ["EventSink", "LogSink", "NotificationSink"]
