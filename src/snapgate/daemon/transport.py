"""Unix socket transport for the snapd REST API.

One call is one short-lived connection: the request is framed as HTTP/1.0,
the response is read until the daemon closes the socket, and the body is
decoded as JSON. There is no retry at this layer.
"""
from __future__ import annotations

import json
import logging
import socket
from typing import Any, Dict, Optional, Union

from ..common.logging_utils import extra_context, is_debug_enabled, Timer
from ..constants import Constants
from ..errors import ProtocolError

logger = logging.getLogger(__name__)

HEADER_BOUNDARY = b"\r\n\r\n"
HEADERS_JSON = {"Accept": "application/json", "Content-Type": "application/json"}

Body = Union[None, str, bytes, Dict[str, Any]]


def encode_body(body: Body) -> Optional[bytes]:
    """Encode a request body; dicts are serialized as JSON, strings as UTF-8."""
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


def frame_request(method: str, path: str, body: Optional[bytes] = None) -> bytes:
    """Build the raw HTTP/1.0 request bytes for one daemon call."""
    lines = [f"{method} {path} HTTP/1.0"]
    lines.extend(f"{key}: {value}" for key, value in HEADERS_JSON.items())
    if body is not None:
        lines.append(f"Content-Length: {len(body)}")
    head = ("\r\n".join(lines) + "\r\n\r\n").encode("ascii")
    return head + (body or b"")


def parse_response(raw: bytes) -> Dict[str, Any]:
    """Split a raw response on the first blank line and decode the JSON body.

    Raises:
        ProtocolError: on missing framing, an empty body, invalid JSON, or a
            top-level value that is not an object.
    """
    headers, sep, body = raw.partition(HEADER_BOUNDARY)
    if not sep:
        raise ProtocolError("Malformed response from snapd: no header/body boundary")
    try:
        text = body.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise ProtocolError(f"Unparsable response body from snapd: {exc}") from exc
    if not text:
        first_line = headers.split(b"\r\n", 1)[0].decode("ascii", errors="replace")
        raise ProtocolError(f"Empty response body from snapd ({first_line})")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"Unparsable response body from snapd: {exc}") from exc
    if not isinstance(data, dict):
        raise ProtocolError(f"Unexpected response body from snapd: {type(data).__name__}")
    return data


class Transport:
    """Send single requests to snapd over its Unix domain socket."""

    def __init__(self, socket_path: Optional[str] = None, timeout: Optional[float] = None):
        """Initialize the transport.

        Args:
            socket_path: Daemon socket path (defaults to Constants.SNAPD_SOCKET).
            timeout: Per-call socket timeout in seconds (defaults to Constants.REQUEST_TIMEOUT).
        """
        self.socket_path = socket_path or Constants.SNAPD_SOCKET
        self.timeout = timeout if timeout is not None else Constants.REQUEST_TIMEOUT

    def call(self, method: str, path: str, body: Body = None) -> Dict[str, Any]:
        """Perform one round-trip and return the decoded response object.

        Args:
            method: HTTP method (GET, POST, PUT).
            path: Request path including any query string.
            body: Optional request body.

        Returns:
            The decoded JSON response.

        Raises:
            ProtocolError: when the socket is unreachable or the response is unusable.
        """
        payload = encode_body(body)
        request = frame_request(method, path, payload)
        with Timer() as t:
            if is_debug_enabled(logger):
                logger.debug(
                    "snapd request",
                    extra=extra_context(
                        event="http_request",
                        component="transport",
                        action=method,
                        target=path,
                    ),
                )
            raw = self._exchange(request, method, path)
            data = parse_response(raw)
            if is_debug_enabled(logger):
                logger.debug(
                    "snapd response",
                    extra=extra_context(
                        event="http_response",
                        component="transport",
                        action=method,
                        target=path,
                        status_code=data.get("status-code"),
                        duration_ms=t.duration_ms(),
                    ),
                )
        return data

    def _exchange(self, request: bytes, method: str, path: str) -> bytes:
        chunks = []
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                sock.settimeout(self.timeout)
                sock.connect(self.socket_path)
                sock.sendall(request)
                while True:
                    chunk = sock.recv(Constants.READ_CHUNK_SIZE)
                    if not chunk:
                        break
                    chunks.append(chunk)
        except socket.timeout as exc:
            logger.error("%s %s timed out after %s seconds", method, path, self.timeout)
            raise ProtocolError(
                f"snapd request {method} {path} timed out after {self.timeout} seconds"
            ) from exc
        except OSError as exc:
            raise ProtocolError(
                f"Cannot talk to snapd at {self.socket_path}: {exc}"
            ) from exc
        return b"".join(chunks)
