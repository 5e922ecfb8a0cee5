"""Webhook trigger action."""

import json
import logging
import socket
import time
from typing import Any, Optional

import requests

from midirelay.activity import ActivityLog
from midirelay.exceptions import DispatchError
from midirelay.models import HttpOutcome, LogDirection, Trigger
from midirelay.services import ConfigService

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
BODY_METHODS = ("POST", "PUT", "PATCH")
DEFAULT_TIMEOUT_MS = 5000
BODY_PREVIEW_CHARS = 500
# Bytes are read one at a time so the deadline is checked as each one arrives;
# urllib3 blocks until a whole chunk is buffered.
CHUNK_SIZE = 1
# Only the preview is kept, and a UTF-8 character is at most 4 bytes
MAX_BODY_BYTES = BODY_PREVIEW_CHARS * 4


def _exception_chain(error: BaseException) -> list[BaseException]:
    """Collect an exception and everything it wraps (urllib3 nests deeply)."""
    seen: list[BaseException] = []
    pending: list[Any] = [error]
    while pending:
        current = pending.pop()
        if not isinstance(current, BaseException) or any(current is s for s in seen):
            continue
        seen.append(current)
        pending.extend([current.__cause__, current.__context__, getattr(current, "reason", None)])
        pending.extend(current.args)
    return seen


def describe_connection_error(error: BaseException) -> str:
    """Turn a connection failure into a short, actionable message."""
    chain = _exception_chain(error)
    text = " ".join(str(e) for e in chain)

    if any(isinstance(e, ConnectionRefusedError) for e in chain) or "refused" in text.lower():
        return "Connection refused - server not running on that port"
    if (
        any(isinstance(e, socket.gaierror) for e in chain)
        or "NameResolution" in text
        or "Name or service not known" in text
        or "getaddrinfo" in text
    ):
        return "Host not found - check hostname/IP"
    return str(error)


class HttpAction:
    """
    Sends a trigger's webhook.

    Each call carries its own timeout (`http_timeout`, milliseconds) and is
    never retried. The timeout bounds the whole call: connecting, waiting
    for the status line and reading the body all share one deadline.
    """

    def __init__(self, config: ConfigService, activity_log: ActivityLog, session: Optional[Any] = None):
        """
        Initialize the HTTP action.

        Args:
            config: Settings store holding `http_timeout`
            activity_log: Where successful calls are recorded
            session: Object with a requests-style `request()` method.
                Defaults to the `requests` module itself.
        """
        self._config = config
        self._log = activity_log
        self._session = session if session is not None else requests

    @staticmethod
    def resolve_method(trigger: Trigger) -> str:
        """
        Pick the HTTP method for a trigger.

        An explicit known method wins. Otherwise a trigger with a JSON body
        uses POST and one without uses GET.
        """
        method = (trigger.method or "").strip().upper()
        if method in ALLOWED_METHODS:
            return method
        return "POST" if trigger.jsondata else "GET"

    @property
    def timeout_ms(self) -> int:
        timeout = self._config.get("http_timeout", DEFAULT_TIMEOUT_MS)
        return timeout if timeout and timeout > 0 else DEFAULT_TIMEOUT_MS

    def request(self, trigger: Trigger) -> HttpOutcome:
        """
        Perform the webhook call. Never raises.

        Args:
            trigger: HTTP trigger with `url` and optional `method`/`jsondata`

        Returns:
            Outcome with status and a body preview, or an error message
        """
        method = self.resolve_method(trigger)
        url = trigger.url or ""

        body: Optional[str] = None
        if trigger.jsondata:
            try:
                body = json.dumps(json.loads(trigger.jsondata))
            except ValueError as e:
                return HttpOutcome(success=False, method=method, url=url, error=f"Invalid JSON: {e}")
        elif method in BODY_METHODS:
            body = "{}"

        headers = {"Content-Type": "application/json"} if body is not None else {}
        timeout_ms = self.timeout_ms
        timed_out = HttpOutcome(
            success=False, method=method, url=url,
            error=f"Timeout after {timeout_ms}ms - server not responding",
        )

        logger.debug(f"HTTP {method} {url} (timeout {timeout_ms}ms)")
        # requests' timeout applies per socket read, so a slow body needs its own deadline
        deadline = time.monotonic() + timeout_ms / 1000
        try:
            response = self._session.request(
                method,
                url,
                data=body.encode("utf-8") if body is not None else None,
                headers=headers,
                timeout=timeout_ms / 1000,
                stream=True,
            )
        except requests.Timeout:
            return timed_out
        except requests.ConnectionError as e:
            return HttpOutcome(success=False, method=method, url=url, error=describe_connection_error(e))
        except requests.RequestException as e:
            return HttpOutcome(success=False, method=method, url=url, error=str(e))

        try:
            content = self._read_body(response, deadline)
        except requests.RequestException as e:
            if isinstance(e, requests.Timeout) or time.monotonic() >= deadline:
                return timed_out
            return HttpOutcome(success=False, method=method, url=url, error=str(e))
        finally:
            response.close()

        if content is None:
            logger.warning(f"HTTP {method} {url} aborted after {timeout_ms}ms while reading the body")
            return timed_out

        success = 200 <= response.status_code < 300
        return HttpOutcome(
            success=success,
            method=method,
            url=url,
            status=response.status_code,
            status_text=response.reason,
            body=content.decode(response.encoding or "utf-8", errors="replace")[:BODY_PREVIEW_CHARS],
            error=None if success else f"Status Error: {response.status_code}",
        )

    @staticmethod
    def _read_body(response: Any, deadline: float) -> Optional[bytes]:
        """Read the start of a streamed body, or return None once the deadline passes."""
        content = bytearray()
        if time.monotonic() >= deadline:
            return None
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            content.extend(chunk)
            if time.monotonic() >= deadline:
                return None
            if len(content) >= MAX_BODY_BYTES:
                break
        return bytes(content)

    def run(self, trigger: Trigger) -> HttpOutcome:
        """
        Perform the webhook call as a trigger action.

        Raises:
            DispatchError: If the call failed or returned a non-2xx status
        """
        outcome = self.request(trigger)
        if not outcome.success:
            raise DispatchError(
                f"HTTP trigger failed: {outcome.error}",
                port=f"HTTP {outcome.method}",
                command=outcome.url,
                data={
                    "error": outcome.error,
                    "status": outcome.status if outcome.status is not None else "N/A",
                },
            )

        logger.info(f"HTTP {outcome.method} {outcome.url} -> {outcome.status}")
        self._log.append(LogDirection.TRIGGER, f"HTTP {outcome.method}", outcome.url, {"status": outcome.status})
        return outcome
