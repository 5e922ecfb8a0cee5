"""Relay engine: owns every piece of relay state and wires the pipeline."""

import logging
import queue
import threading
from collections.abc import Mapping
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Optional

from midirelay.actions import HttpAction, MidiAction
from midirelay.activity import ActivityLog
from midirelay.codec import decode, encode
from midirelay.exceptions import MidiValidationError, TransportError
from midirelay.midi import MidiTransport, MidoTransport, PortRegistry
from midirelay.models import (
    ActionType,
    HttpOutcome,
    LogDirection,
    LogEntry,
    OutboundMidiRequest,
    PortDirection,
    PortInfo,
    RelayConfig,
    SendResult,
    SendStatus,
    Trigger,
)
from midirelay.protocols import EventSink, LogSink, NotificationSink
from midirelay.services import ConfigService, ProfileService
from midirelay.triggers import TriggerEngine
from midirelay.utils import ObserverManager
from midirelay.validation import validate_outbound_request

logger = logging.getLogger(__name__)

_STOP = object()


class RelayEngine:
    """
    The MIDI relay.

    Receive path: the transport callback only enqueues (port, bytes) into a
    bounded queue. A single consumer thread decodes, logs, publishes to
    event sinks and hands the event to the trigger engine, whose actions
    run on a worker pool and are never awaited by the consumer.

    Send path: validate, encode, write through the port registry (one lock
    per output port), log TX.

    Usage Example:
        ```python
        config = ConfigService.from_file(RelayConfig, DEFAULT_CONFIG_PATH)
        with RelayEngine(config) as relay:
            relay.start()
            relay.send_midi({"midiport": "IAC Bus 1", "midicommand": "noteon",
                             "channel": 0, "note": 60, "velocity": 100})
        ```
    """

    def __init__(
        self,
        config: ConfigService[RelayConfig],
        transport: Optional[MidiTransport] = None,
        executor: Optional[Executor] = None,
        session: Optional[Any] = None,
    ):
        """
        Initialize the relay.

        Args:
            config: Settings store (triggers, disabled inputs, timeout, profiles)
            transport: MIDI driver (defaults to mido with the configured backend)
            executor: Worker pool for trigger actions (defaults to a thread pool)
            session: requests-style object used for webhooks (defaults to `requests`)
        """
        self.config = config
        settings = config.get_config()

        self.activity_log = ActivityLog(capacity=settings.log_capacity)
        self._event_sinks = ObserverManager[EventSink](observer_type_name="event")
        self._notifications = ObserverManager[NotificationSink](observer_type_name="notification")

        self._queue: queue.Queue = queue.Queue(maxsize=settings.receive_queue_size)
        self._consumer: Optional[threading.Thread] = None
        self._is_running = False

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=settings.dispatch_workers, thread_name_prefix="midirelay-action"
        )

        self.transport = transport or MidoTransport(settings.midi_backend)
        self.ports = PortRegistry(
            self.transport,
            config,
            on_message=self._enqueue,
            notifications=self._notifications,
            virtual_port_name=settings.virtual_port_name,
        )

        self.http_action = HttpAction(config, self.activity_log, session=session)
        self.midi_action = MidiAction(self.send_midi, self.activity_log)
        self.triggers = TriggerEngine(
            config, self.activity_log, self._executor, self.http_action, self.midi_action
        )
        self.profiles = ProfileService(config, self.triggers.replace_all)

    # =================================================================
    # Lifecycle
    # =================================================================

    def start(self, show_notification: bool = False) -> list[PortInfo]:
        """
        Load triggers, start the receive consumer and open ports.

        Args:
            show_notification: Notify the list of available outputs

        Returns:
            The scanned ports
        """
        if self._is_running:
            logger.warning("Relay already running")
            return self.ports.ports()

        self.triggers.load()
        self._is_running = True
        self._consumer = threading.Thread(target=self._consume, name="midirelay-receive", daemon=True)
        self._consumer.start()

        ports = self.ports.scan()

        if show_notification:
            outputs = [p.name for p in ports if p.direction is PortDirection.OUTPUT]
            body = ", ".join(outputs) if outputs else "No MIDI outputs found"
            self._notifications.notify("notify", "MIDI Outputs", body)

        logger.info("MIDI relay started")
        return ports

    def stop(self) -> None:
        """Stop receiving, close every port and release the worker pool."""
        if self._is_running:
            self._is_running = False
            try:
                self._queue.put_nowait(_STOP)
            except queue.Full:
                pass  # the consumer polls _is_running
            if self._consumer and self._consumer.is_alive():
                self._consumer.join(timeout=1.0)
            self._consumer = None

        self.ports.close_all()

        if self._owns_executor:
            # In-flight webhooks finish on their own timeout
            self._executor.shutdown(wait=False, cancel_futures=True)

        logger.info("MIDI relay stopped")

    @property
    def is_running(self) -> bool:
        return self._is_running

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    # =================================================================
    # Receive path
    # =================================================================

    def _enqueue(self, port: str, data: list[int]) -> None:
        # Runs on the transport I/O thread
        try:
            self._queue.put_nowait((port, list(data)))
        except queue.Full:
            logger.warning(f"Receive queue full, dropping message from {port}")

    def _consume(self) -> None:
        while self._is_running:
            try:
                item = self._queue.get(timeout=0.5)
            except queue.Empty:
                continue
            if item is _STOP:
                break
            port, data = item
            try:
                self.handle_message(port, data)
            except Exception:
                logger.exception(f"Error handling MIDI message from {port}")

    def handle_message(self, port: str, data: list[int]) -> list[Future]:
        """
        Process one received message.

        Unknown messages are dropped silently. Known ones are logged (RX),
        published to event sinks and matched against the triggers.

        Returns:
            Futures of the trigger actions that were started
        """
        event = decode(data, port)
        if event is None or not event.is_known:
            return []

        self.activity_log.append(LogDirection.RX, port, event.type.value, event.to_log_data())
        self._event_sinks.notify("publish", event)
        return self.triggers.dispatch(event)

    # =================================================================
    # Send path
    # =================================================================

    def send_midi(
        self, request: OutboundMidiRequest | Mapping[str, Any], validate: bool = True
    ) -> SendResult:
        """
        Validate, encode and send one MIDI message.

        Args:
            request: Request model or plain dict
            validate: Run the validator first

        Returns:
            Result with status and the bytes written

        Raises:
            MidiValidationError: If the request fails validation
        """
        if validate:
            result = validate_outbound_request(request)
            if not result.valid:
                raise MidiValidationError(result.errors)

        if not isinstance(request, OutboundMidiRequest):
            request = OutboundMidiRequest.model_validate(dict(request))

        try:
            message = encode(request)
        except ValueError as e:
            logger.warning(f"Cannot encode MIDI request: {e}")
            return SendResult(status=SendStatus.ERROR, request=request, error=str(e))

        if message is None:
            return SendResult(status=SendStatus.INVALID_COMMAND, request=request)

        port = request.midiport or ""
        try:
            self.ports.send(port, message)
        except TransportError as e:
            logger.warning(e.technical_message)
            return SendResult(status=SendStatus.ERROR, request=request, error=str(e))

        self.activity_log.append(
            LogDirection.TX, port, request.midicommand or "", request.model_dump(exclude_none=True)
        )
        return SendResult(status=SendStatus.SENT, request=request, message=message)

    # =================================================================
    # Ports
    # =================================================================

    def scan(self) -> list[PortInfo]:
        """Rescan ports and reload triggers."""
        self.triggers.load()
        return self.ports.scan()

    def list_ports(self) -> list[PortInfo]:
        return self.ports.ports()

    def open_port(self, name: str) -> bool:
        return self.ports.open(name)

    def close_port(self, name: str) -> bool:
        return self.ports.close(name)

    def toggle_port(self, name: str) -> bool:
        return self.ports.toggle_enabled(name)

    # =================================================================
    # Triggers
    # =================================================================

    def add_trigger(self, trigger: Trigger | Mapping[str, Any]) -> Trigger:
        return self.triggers.add(trigger)

    def update_trigger(self, trigger: Trigger | Mapping[str, Any]) -> bool:
        return self.triggers.update(trigger)

    def delete_trigger(self, trigger_id: str) -> bool:
        return self.triggers.delete(trigger_id)

    def list_triggers(self) -> list[Trigger]:
        return self.triggers.list()

    def get_trigger(self, trigger_id: str) -> Optional[Trigger]:
        return self.triggers.get(trigger_id)

    def test_trigger(self, trigger_id: str) -> HttpOutcome:
        """
        Run an HTTP trigger's webhook once and return the outcome.

        Nothing is written to the activity log.
        """
        trigger = self.triggers.get(trigger_id)
        if trigger is None:
            return HttpOutcome(success=False, error="Trigger not found")
        if trigger.action is not ActionType.HTTP:
            return HttpOutcome(success=False, error="Test not supported for this action type")
        return self.http_action.request(trigger)

    # =================================================================
    # Profiles
    # =================================================================

    def save_profile(self, name: str) -> list[Trigger]:
        return self.profiles.save_profile(name)

    def load_profile(self, name: str) -> bool:
        return self.profiles.load_profile(name)

    def list_profiles(self) -> list[str]:
        return self.profiles.list_profiles()

    def delete_profile(self, name: str) -> bool:
        return self.profiles.delete_profile(name)

    # =================================================================
    # Activity log and sinks
    # =================================================================

    def log_entries(self) -> list[LogEntry]:
        return self.activity_log.entries()

    def register_log_sink(self, sink: LogSink) -> None:
        self.activity_log.register_sink(sink)

    def register_event_sink(self, sink: EventSink) -> None:
        self._event_sinks.register(sink)

    def register_notification_sink(self, sink: NotificationSink) -> None:
        self._notifications.register(sink)
