"""Registry of open MIDI ports."""

import logging
from collections.abc import Callable, Sequence
from threading import Lock
from typing import Optional

from midirelay.exceptions import TransportError
from midirelay.models import PortDescriptor, PortDirection, PortInfo
from midirelay.protocols import NotificationSink
from midirelay.services import ConfigService
from midirelay.utils import ObserverManager

from .transport import InputHandle, MidiTransport, OutputHandle

logger = logging.getLogger(__name__)

MessageCallback = Callable[[str, list[int]], None]


class PortRegistry:
    """
    Owns every open MIDI port handle.

    Inputs are opened on scan unless the user disabled them (the disabled
    set is persisted under `disabled_inputs`). Outputs are opened lazily on
    first send and cached; each output has its own lock so concurrent sends
    never interleave bytes on the same port.

    Port failures never propagate out of open/close/scan: they are logged
    as warnings and the port stays closed.
    """

    def __init__(
        self,
        transport: MidiTransport,
        config: ConfigService,
        on_message: MessageCallback,
        notifications: Optional[ObserverManager[NotificationSink]] = None,
        virtual_port_name: str = "midi-relay-hub",
    ):
        """
        Initialize the registry.

        Args:
            transport: Device driver
            config: Settings store holding `disabled_inputs`
            on_message: Called with (port name, bytes) for every received message.
                        Runs on the transport's I/O thread.
            notifications: Sinks for user-facing notifications
            virtual_port_name: Name of the virtual input/output pair
        """
        self._transport = transport
        self._config = config
        self._on_message = on_message
        self._notifications = notifications or ObserverManager[NotificationSink](observer_type_name="notification")
        self._virtual_port_name = virtual_port_name

        self._lock = Lock()
        self._inputs: dict[str, InputHandle] = {}
        self._outputs: dict[str, OutputHandle] = {}
        self._send_locks: dict[str, Lock] = {}
        self._known_inputs: dict[str, PortDescriptor] = {}
        self._known_outputs: dict[str, PortDescriptor] = {}
        self._virtual_created = False

    def _notify(self, title: str, body: str) -> None:
        self._notifications.notify("notify", title, body)

    # =================================================================
    # Discovery
    # =================================================================

    def scan(self, create_virtual: bool = True) -> list[PortInfo]:
        """
        Refresh the port list and open every enabled input.

        Args:
            create_virtual: Register the virtual port pair if not done yet

        Returns:
            Inputs then outputs, with current opened/enabled state
        """
        try:
            descriptors = self._transport.list_ports()
        except Exception as e:
            logger.error(f"Error scanning MIDI ports: {e}")
            descriptors = []

        inputs: dict[str, PortDescriptor] = {}
        outputs: dict[str, PortDescriptor] = {}
        for descriptor in descriptors:
            target = inputs if descriptor.direction is PortDirection.INPUT else outputs
            target.setdefault(descriptor.name, descriptor)

        with self._lock:
            self._known_inputs = inputs
            self._known_outputs = outputs
            to_open = [
                name for name in inputs
                if name not in self._inputs and self.is_enabled(name)
            ]

        for name in to_open:
            self.open(name)

        if create_virtual and not self._virtual_created:
            self.create_virtual_ports()

        ports = self.ports()
        logger.info(f"Scanned MIDI ports: {len(inputs)} input(s), {len(outputs)} output(s)")
        return ports

    def ports(self) -> list[PortInfo]:
        """Ports found by the last scan, with current state."""
        with self._lock:
            infos = [
                PortInfo(
                    name=name,
                    direction=PortDirection.INPUT,
                    opened=name in self._inputs,
                    manufacturer=descriptor.manufacturer,
                    enabled=self.is_enabled(name),
                )
                for name, descriptor in self._known_inputs.items()
            ]
            infos.extend(
                PortInfo(
                    name=name,
                    direction=PortDirection.OUTPUT,
                    opened=name in self._outputs,
                    manufacturer=descriptor.manufacturer,
                )
                for name, descriptor in self._known_outputs.items()
            )
        return infos

    def create_virtual_ports(self) -> bool:
        """
        Register the virtual input/output pair (best-effort).

        Messages sent to the virtual input by other applications enter the
        relay like any other input; the virtual output is a normal send target.
        """
        name = self._virtual_port_name
        try:
            virtual_in = self._transport.open_input(name, self._callback_for(name), virtual=True)
        except Exception as e:
            logger.warning(f"Virtual ports not supported or failed to create: {e}")
            self._notify("Virtual MIDI Port Error", "Unable to create virtual MIDI port.")
            return False

        try:
            virtual_out = self._transport.open_output(name, virtual=True)
        except Exception as e:
            logger.warning(f"Virtual output port failed to create: {e}")
            self._close_quietly(virtual_in)
            self._notify("Virtual MIDI Port Error", "Unable to create virtual MIDI port.")
            return False

        with self._lock:
            self._inputs[name] = virtual_in
            self._outputs[name] = virtual_out
            self._send_locks.setdefault(name, Lock())
            self._virtual_created = True

        logger.info(f"Virtual MIDI ports created: {name}")
        self._notify("Virtual MIDI Port", f"Virtual MIDI Port Created: {name}")
        return True

    # =================================================================
    # Inputs
    # =================================================================

    def is_enabled(self, name: str) -> bool:
        return name not in self._config.get("disabled_inputs", [])

    def is_open(self, name: str) -> bool:
        with self._lock:
            return name in self._inputs

    def _callback_for(self, name: str) -> Callable[[list[int]], None]:
        def callback(data: list[int]) -> None:
            self._on_message(name, data)
        return callback

    def open(self, name: str) -> bool:
        """
        Open an input port (no-op if already open).

        Returns:
            True if the port is open afterwards
        """
        with self._lock:
            if name in self._inputs:
                return True

        try:
            handle = self._transport.open_input(name, self._callback_for(name))
        except Exception as e:
            logger.warning(f"Error opening MIDI port {name}: {e}")
            return False

        with self._lock:
            if name in self._inputs:
                duplicate = handle
            else:
                self._inputs[name] = handle
                duplicate = None

        if duplicate is not None:
            self._close_quietly(duplicate)
            return True

        logger.info(f"MIDI input opened: {name}")
        self._notify(f"MIDI Port Opened: {name}", f"MIDI Port Opened: {name}")
        return True

    def close(self, name: str) -> bool:
        """
        Close an input port (no-op if not open).

        Returns:
            True if a handle was released
        """
        with self._lock:
            handle = self._inputs.pop(name, None)

        if handle is None:
            return False

        try:
            handle.close()
        except Exception as e:
            logger.warning(f"Error closing MIDI port {name}: {e}")
        logger.info(f"MIDI input closed: {name}")
        return True

    def toggle_enabled(self, name: str) -> bool:
        """
        Flip the persisted enabled flag of an input and open/close it.

        Returns:
            The new enabled state
        """
        def flip(disabled: list[str]) -> list[str]:
            if name in disabled:
                disabled.remove(name)
            else:
                disabled.append(name)
            return disabled

        enabled = name not in self._config.modify("disabled_inputs", flip)
        if enabled:
            self.open(name)
        else:
            self.close(name)
        return enabled

    # =================================================================
    # Outputs
    # =================================================================

    def _output(self, name: str) -> tuple[OutputHandle, Lock]:
        with self._lock:
            handle = self._outputs.get(name)
            if handle is None:
                try:
                    handle = self._transport.open_output(name)
                except Exception as e:
                    raise TransportError(name, "open", str(e)) from e
                self._outputs[name] = handle
                logger.info(f"MIDI output opened: {name}")
            return handle, self._send_locks.setdefault(name, Lock())

    def send(self, name: str, data: Sequence[int]) -> None:
        """
        Write one message to an output port, opening it if needed.

        Raises:
            TransportError: If the port cannot be opened or written
        """
        handle, send_lock = self._output(name)
        with send_lock:
            try:
                handle.send(data)
            except Exception as e:
                raise TransportError(name, "send", str(e)) from e

    # =================================================================
    # Shutdown
    # =================================================================

    @staticmethod
    def _close_quietly(handle: InputHandle | OutputHandle) -> None:
        try:
            handle.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing MIDI port: {e}")

    def close_all(self) -> None:
        """Close every handle and the transport (best-effort, errors swallowed)."""
        with self._lock:
            handles: list[InputHandle | OutputHandle] = [*self._inputs.values(), *self._outputs.values()]
            self._inputs.clear()
            self._outputs.clear()
            self._virtual_created = False

        for handle in handles:
            self._close_quietly(handle)

        try:
            self._transport.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing MIDI transport: {e}")

        logger.info("All MIDI ports closed")
