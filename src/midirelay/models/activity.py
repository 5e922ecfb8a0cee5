"""Activity log entry model."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from .enums import LogDirection


class LogEntry(BaseModel):
    """One relay event: a send, a receive, a trigger firing or an error."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    direction: LogDirection
    port: str
    command: str
    data: dict[str, Any] = Field(default_factory=dict)
