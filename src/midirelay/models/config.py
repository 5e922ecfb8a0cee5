"""Relay configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field

from .trigger import Trigger

DEFAULT_CONFIG_PATH = Path.home() / ".midirelay" / "config.json"


class RelayConfig(BaseModel):
    """Persisted relay settings, triggers and profiles."""

    triggers: list[Trigger] = Field(default_factory=list, description="Active trigger rules")
    disabled_inputs: list[str] = Field(
        default_factory=list, description="Input ports that are not opened automatically"
    )
    http_timeout: int = Field(default=5000, gt=0, description="Webhook timeout in milliseconds")
    profiles: dict[str, list[Trigger]] = Field(
        default_factory=dict, description="Named snapshots of the trigger list"
    )

    # MIDI settings
    virtual_port_name: str = Field(
        default="midi-relay-hub", description="Name of the virtual input/output pair"
    )
    midi_backend: str | None = Field(
        default=None, description="mido backend module (None = mido default, usually rtmidi)"
    )

    # Pipeline sizing
    receive_queue_size: int = Field(default=1024, gt=0, description="Pending received messages")
    dispatch_workers: int = Field(default=8, gt=0, description="Concurrent trigger actions")
    log_capacity: int = Field(default=500, gt=0, description="Activity log entries kept")
