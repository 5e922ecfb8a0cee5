"""Tests for the webhook action."""

import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import Mock

import pytest
import requests

from conftest import make_response
from midirelay.actions import HttpAction, describe_connection_error
from midirelay.exceptions import DispatchError
from midirelay.models import LogDirection, Trigger


def hook(**fields) -> Trigger:
    return Trigger(id="t1", midicommand="noteon", actiontype="http", url="http://localhost:8000/hook", **fields)


@pytest.fixture
def action(config_service, activity_log, session):
    return HttpAction(config_service, activity_log, session=session)


@pytest.mark.unit
class TestResolveMethod:
    """Test HTTP method selection."""

    def test_explicit_method(self):
        assert HttpAction.resolve_method(hook(method="put")) == "PUT"
        assert HttpAction.resolve_method(hook(method="DELETE", jsondata='{"a": 1}')) == "DELETE"

    def test_json_body_defaults_to_post(self):
        assert HttpAction.resolve_method(hook(jsondata='{"a": 1}')) == "POST"

    def test_default_get(self):
        assert HttpAction.resolve_method(hook()) == "GET"
        assert HttpAction.resolve_method(hook(method="TRACE")) == "GET"


@pytest.mark.unit
class TestRequest:
    """Test webhook calls."""

    def test_get_without_body(self, action, session):
        outcome = action.request(hook())

        assert outcome.success
        assert outcome.status == 200
        assert outcome.method == "GET"
        session.request.assert_called_once_with(
            "GET", "http://localhost:8000/hook", data=None, headers={}, timeout=5.0, stream=True
        )

    def test_json_body(self, action, session):
        action.request(hook(jsondata='{"scene": "é"}'))

        args, kwargs = session.request.call_args
        assert args[0] == "POST"
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert kwargs["data"] == '{"scene": "\\u00e9"}'.encode("utf-8")

    def test_post_without_body_sends_empty_object(self, action, session):
        action.request(hook(method="POST"))
        assert session.request.call_args.kwargs["data"] == b"{}"

    def test_invalid_json_makes_no_call(self, action, session):
        outcome = action.request(hook(jsondata="{nope"))

        assert not outcome.success
        assert outcome.error.startswith("Invalid JSON: ")
        session.request.assert_not_called()

    def test_configured_timeout(self, action, session, config_service):
        config_service.set("http_timeout", 250)
        action.request(hook())
        assert session.request.call_args.kwargs["timeout"] == 0.25

    def test_timeout_message(self, action, session):
        session.request.side_effect = requests.Timeout("read timed out")
        outcome = action.request(hook())
        assert outcome.error == "Timeout after 5000ms - server not responding"

    def test_refused_message(self, action, session):
        session.request.side_effect = requests.ConnectionError(ConnectionRefusedError(111, "Connection refused"))
        outcome = action.request(hook())
        assert outcome.error == "Connection refused - server not running on that port"

    def test_host_not_found_message(self, action, session):
        cause = socket.gaierror(-2, "Name or service not known")
        session.request.side_effect = requests.ConnectionError(cause)
        outcome = action.request(hook())
        assert outcome.error == "Host not found - check hostname/IP"

    def test_non_2xx(self, action, session):
        session.request.return_value = make_response(503, "down", "Service Unavailable")
        outcome = action.request(hook())

        assert not outcome.success
        assert outcome.status == 503
        assert outcome.status_text == "Service Unavailable"
        assert outcome.error == "Status Error: 503"
        session.request.assert_called_once()

    def test_body_preview_truncated(self, action, session):
        session.request.return_value = make_response(200, "x" * 2000)
        assert len(action.request(hook()).body) == 500


@pytest.mark.unit
class TestRun:
    """Test the action as run by triggers."""

    def test_success_logs_trigger_entry(self, action, activity_log):
        action.run(hook(method="PATCH"))

        entry = activity_log.entries()[-1]
        assert entry.direction is LogDirection.TRIGGER
        assert entry.port == "HTTP PATCH"
        assert entry.command == "http://localhost:8000/hook"
        assert entry.data == {"status": 200}

    def test_failure_raises_dispatch_error(self, action, session, activity_log):
        session.request.side_effect = requests.Timeout()

        with pytest.raises(DispatchError) as exc_info:
            action.run(hook())

        assert exc_info.value.data == {
            "error": "Timeout after 5000ms - server not responding",
            "status": "N/A",
        }
        assert len(activity_log) == 0

    def test_status_error_carries_status(self, action, session):
        session.request.return_value = make_response(404, "missing", "Not Found")
        with pytest.raises(DispatchError) as exc_info:
            action.run(hook())
        assert exc_info.value.data["status"] == 404


@pytest.mark.unit
class TestDescribeConnectionError:
    def test_passes_other_errors_through(self):
        assert describe_connection_error(requests.ConnectionError("weird")) == "weird"

    def test_nested_cause(self):
        try:
            try:
                raise ConnectionRefusedError(111, "nope")
            except ConnectionRefusedError as inner:
                raise requests.ConnectionError("pool failed") from inner
        except requests.ConnectionError as e:
            error = e
        assert describe_connection_error(error) == "Connection refused - server not running on that port"

    def test_session_defaults_to_requests(self, config_service, activity_log):
        assert HttpAction(config_service, activity_log)._session is requests

    def test_mock_session_is_used(self, config_service, activity_log):
        session = Mock()
        session.request.return_value = make_response(204, "")
        assert HttpAction(config_service, activity_log, session=session).request(hook()).success


@pytest.mark.unit
class TestOverallTimeout:
    """Test that the timeout bounds the whole call, body included."""

    def test_slow_body_is_aborted(self, action, session, config_service):
        config_service.set("http_timeout", 50)
        response = make_response(200)

        def trickle(chunk_size):
            for _ in range(10):
                time.sleep(0.02)
                yield b"x"

        response.iter_content.side_effect = trickle
        session.request.return_value = response

        outcome = action.request(hook())

        assert not outcome.success
        assert outcome.error == "Timeout after 50ms - server not responding"
        response.close.assert_called_once()

    def test_read_timeout_while_streaming(self, action, session):
        response = make_response(200)
        response.iter_content.side_effect = requests.ConnectionError("Read timed out.")
        session.request.return_value = response

        outcome = action.request(hook())

        assert not outcome.success
        assert outcome.error == "Read timed out."
        response.close.assert_called_once()

    def test_fast_body_is_read(self, action, session):
        response = make_response(200, "done")
        response.iter_content.return_value = [b"do", b"ne"]
        session.request.return_value = response

        outcome = action.request(hook())

        assert outcome.success
        assert outcome.body == "done"


class _TrickleHandler(BaseHTTPRequestHandler):
    """Sends a 10 byte body one byte at a time."""

    def do_GET(self):
        self.send_response(200)
        self.send_header("Content-Length", "10")
        self.end_headers()
        try:
            for _ in range(10):
                self.wfile.write(b"x")
                self.wfile.flush()
                time.sleep(0.1)
        except OSError:
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def trickle_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _TrickleHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/slow"
    server.shutdown()
    server.server_close()


@pytest.mark.integration
class TestSlowServer:
    """Test the deadline against a real socket."""

    def test_trickling_response_times_out(self, config_service, activity_log, trickle_server):
        config_service.set("http_timeout", 300)
        action = HttpAction(config_service, activity_log)
        trigger = Trigger(id="t1", midicommand="noteon", actiontype="http", url=trickle_server)

        started = time.monotonic()
        outcome = action.request(trigger)
        elapsed = time.monotonic() - started

        assert not outcome.success
        assert outcome.error == "Timeout after 300ms - server not responding"
        assert elapsed < 0.9
