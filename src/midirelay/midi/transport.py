"""MIDI transport: the device I/O layer underneath the port registry."""

import logging
from collections.abc import Callable, Sequence
from typing import Optional, Protocol, runtime_checkable

import mido

from midirelay.models import PortDescriptor, PortDirection

logger = logging.getLogger(__name__)

ByteCallback = Callable[[list[int]], None]


@runtime_checkable
class InputHandle(Protocol):
    """An open input port. Messages are delivered to the callback given at open time."""

    def close(self) -> None:
        ...


@runtime_checkable
class OutputHandle(Protocol):
    """An open output port."""

    def send(self, data: Sequence[int]) -> None:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class MidiTransport(Protocol):
    """Device driver used by the port registry."""

    def list_ports(self) -> list[PortDescriptor]:
        ...

    def open_input(self, name: str, callback: ByteCallback, virtual: bool = False) -> InputHandle:
        ...

    def open_output(self, name: str, virtual: bool = False) -> OutputHandle:
        ...

    def close(self) -> None:
        ...


class MidoInputHandle:
    """Input port opened through mido, forwarding raw bytes."""

    def __init__(self, port: mido.ports.BaseInput):
        self._port = port

    @property
    def name(self) -> str:
        return self._port.name

    def close(self) -> None:
        self._port.close()


class MidoOutputHandle:
    """Output port opened through mido, accepting raw bytes."""

    def __init__(self, port: mido.ports.BaseOutput):
        self._port = port

    @property
    def name(self) -> str:
        return self._port.name

    def send(self, data: Sequence[int]) -> None:
        """
        Send one complete message.

        Raises:
            ValueError: If the bytes do not form a valid MIDI message
        """
        self._port.send(mido.Message.from_bytes(list(data)))

    def close(self) -> None:
        self._port.close()


class MidoTransport:
    """
    MidiTransport backed by mido.

    Args:
        backend: mido backend module, e.g. "mido.backends.rtmidi".
                 None uses mido's default (or the MIDO_BACKEND variable).
    """

    def __init__(self, backend: Optional[str] = None):
        self._backend = mido.Backend(backend, load=True) if backend else mido
        logger.debug(f"MidoTransport using backend: {backend or 'default'}")

    def list_ports(self) -> list[PortDescriptor]:
        ports = [
            PortDescriptor(name=name, direction=PortDirection.INPUT)
            for name in self._backend.get_input_names()
        ]
        ports.extend(
            PortDescriptor(name=name, direction=PortDirection.OUTPUT)
            for name in self._backend.get_output_names()
        )
        return ports

    def open_input(self, name: str, callback: ByteCallback, virtual: bool = False) -> MidoInputHandle:
        def _midi_callback(msg: mido.Message) -> None:
            # Runs on mido's I/O thread, keep it fast
            try:
                callback(msg.bytes())
            except Exception as e:
                logger.error(f"Error in MIDI input callback for {name}: {e}")

        port = self._backend.open_input(name, virtual=virtual, callback=_midi_callback)
        return MidoInputHandle(port)

    def open_output(self, name: str, virtual: bool = False) -> MidoOutputHandle:
        return MidoOutputHandle(self._backend.open_output(name, virtual=virtual))

    def close(self) -> None:
        # mido keeps no session state beyond the open ports
        logger.debug("MidoTransport closed")
