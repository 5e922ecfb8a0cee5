"""Results returned by outbound operations."""

from pydantic import BaseModel, Field

from .enums import SendStatus
from .request import OutboundMidiRequest


class SendResult(BaseModel):
    """Outcome of sending one MIDI message."""

    status: SendStatus
    request: OutboundMidiRequest | None = None
    message: list[int] = Field(default_factory=list, description="Bytes written to the port")
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is SendStatus.SENT


class HttpOutcome(BaseModel):
    """Outcome of one webhook call."""

    success: bool
    method: str = ""
    url: str = ""
    status: int | None = None
    status_text: str | None = None
    body: str | None = Field(default=None, description="First 500 characters of the response")
    error: str | None = None
