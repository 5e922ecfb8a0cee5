"""Bounded activity log of relay events."""

import logging
from collections import deque
from threading import Lock
from typing import Any, Optional

from midirelay.models import LogDirection, LogEntry
from midirelay.protocols import LogSink
from midirelay.utils import ObserverManager

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 500


class ActivityLog:
    """
    Ring buffer of the most recent relay events.

    Appends come from several threads (receive consumer, action workers,
    API callers). A single lock guards the deque so eviction order is always
    oldest-first. Sinks are notified after the lock is released.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._lock = Lock()
        self._sinks = ObserverManager[LogSink](observer_type_name="log")

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def register_sink(self, sink: LogSink) -> None:
        self._sinks.register(sink)

    def unregister_sink(self, sink: LogSink) -> None:
        self._sinks.unregister(sink)

    def append(
        self,
        direction: LogDirection,
        port: str,
        command: str,
        data: Optional[dict[str, Any]] = None,
    ) -> LogEntry:
        """
        Record an event and publish it to the registered sinks.

        Returns:
            The stored entry
        """
        entry = LogEntry(direction=direction, port=port, command=command, data=data or {})
        with self._lock:
            self._entries.append(entry)

        self._sinks.notify("publish", entry)
        return entry

    def entries(self) -> list[LogEntry]:
        """Snapshot of the buffer, oldest first."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
