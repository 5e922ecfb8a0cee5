"""Activity log."""

from .log import DEFAULT_CAPACITY, ActivityLog

__all__ = ["DEFAULT_CAPACITY", "ActivityLog"]
