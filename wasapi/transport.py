"""HTTP transport used by the Wasabi RPC client."""

from __future__ import annotations

import http.client
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urlsplit

from .errors import TransportError


class Response(Protocol):
    status: int
    reason: str

    @property
    def ok(self) -> bool: ...

    def json(self) -> Any: ...


class Transport(Protocol):
    def __call__(self, url: str, *, method: str, headers: dict[str, str], body: str) -> Response: ...


@dataclass(slots=True)
class HTTPResponse:
    status: int
    reason: str
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.text())


class HTTPTransport:
    """One request per connection over ``http.client``."""

    def __init__(self, timeout: float = 15.0):
        self.timeout = timeout
        self.log = logging.getLogger("wasapi.transport")

    def _connect(self, url: str) -> tuple[http.client.HTTPConnection, str]:
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise TransportError(f"Unsupported RPC URL {url!r}")
        conn_cls = http.client.HTTPSConnection if parts.scheme == "https" else http.client.HTTPConnection
        try:
            port = parts.port
        except ValueError as exc:
            raise TransportError(f"Invalid port in RPC URL {url!r}") from exc
        conn = conn_cls(parts.hostname, port, timeout=self.timeout)
        return conn, parts.path or "/"

    def __call__(self, url: str, *, method: str, headers: dict[str, str], body: str) -> HTTPResponse:
        conn, path = self._connect(url)
        self.log.debug("%s %s", method, url)
        try:
            conn.request(method, path, body=body.encode("utf-8"), headers=headers)
            response = conn.getresponse()
            payload = response.read()
        except (OSError, http.client.HTTPException) as exc:
            raise TransportError(f"RPC request to {url} failed: {exc}") from exc
        finally:
            conn.close()
        return HTTPResponse(
            status=response.status,
            reason=response.reason,
            body=payload,
            headers=dict(response.getheaders()),
        )
