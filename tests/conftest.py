"""Pytest fixtures for tests."""

from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from midirelay.activity import ActivityLog
from midirelay.core import RelayEngine
from midirelay.models import PortDescriptor, PortDirection, RelayConfig
from midirelay.services import ConfigService


class FakeInput:
    """Input handle whose callback can be fired from tests."""

    def __init__(self, name: str, callback: Callable[[list[int]], None]):
        self.name = name
        self.callback = callback
        self.closed = False

    def receive(self, data: Sequence[int]) -> None:
        self.callback(list(data))

    def close(self) -> None:
        self.closed = True


class FakeOutput:
    """Output handle that records every message written to it."""

    def __init__(self, name: str, fail: bool = False):
        self.name = name
        self.sent: list[list[int]] = []
        self.closed = False
        self.fail = fail

    def send(self, data: Sequence[int]) -> None:
        if self.fail:
            raise OSError("device unplugged")
        self.sent.append(list(data))

    def close(self) -> None:
        self.closed = True


class FakeTransport:
    """In-memory MidiTransport."""

    def __init__(self, inputs: Sequence[str] = (), outputs: Sequence[str] = (), virtual: bool = True):
        self.input_names = list(inputs)
        self.output_names = list(outputs)
        self.supports_virtual = virtual
        self.inputs: dict[str, FakeInput] = {}
        self.outputs: dict[str, FakeOutput] = {}
        self.failing_outputs: set[str] = set()
        self.closed = False

    def list_ports(self) -> list[PortDescriptor]:
        ports = [PortDescriptor(name=n, direction=PortDirection.INPUT) for n in self.input_names]
        ports += [PortDescriptor(name=n, direction=PortDirection.OUTPUT) for n in self.output_names]
        return ports

    def open_input(self, name: str, callback, virtual: bool = False) -> FakeInput:
        if virtual and not self.supports_virtual:
            raise OSError("virtual ports not supported")
        if not virtual and name not in self.input_names:
            raise OSError(f"unknown input {name}")
        handle = FakeInput(name, callback)
        self.inputs[name] = handle
        return handle

    def open_output(self, name: str, virtual: bool = False) -> FakeOutput:
        if virtual and not self.supports_virtual:
            raise OSError("virtual ports not supported")
        if not virtual and name not in self.output_names:
            raise OSError(f"unknown output {name}")
        handle = FakeOutput(name, fail=name in self.failing_outputs)
        self.outputs[name] = handle
        return handle

    def close(self) -> None:
        self.closed = True


class ImmediateExecutor(Executor):
    """Runs submitted work synchronously so tests can assert right after dispatch."""

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


def make_response(status: int = 200, text: str = "ok", reason: str = "OK") -> Mock:
    response = Mock(spec=requests.Response)
    response.status_code = status
    response.reason = reason
    response.text = text
    response.encoding = "utf-8"
    response.iter_content.return_value = [text.encode("utf-8")] if text else []
    return response


@pytest.fixture
def config_service(tmp_path: Path) -> ConfigService[RelayConfig]:
    """Config store backed by a temporary file."""
    return ConfigService(RelayConfig, default_path=tmp_path / "config.json")


@pytest.fixture
def activity_log() -> ActivityLog:
    return ActivityLog()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(inputs=["Keys In", "Pads In"], outputs=["Synth Out", "Lights Out"])


@pytest.fixture
def session() -> Mock:
    """requests-style session returning 200 OK by default."""
    fake = Mock()
    fake.request.return_value = make_response()
    return fake


@pytest.fixture
def relay(config_service, transport, session):
    """Relay engine wired to fakes, with actions run inline."""
    engine = RelayEngine(config_service, transport=transport, executor=ImmediateExecutor(), session=session)
    yield engine
    engine.stop()
