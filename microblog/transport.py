"""HTTP transport seam.

The executor only talks to an object with a ``perform(request)`` method, so tests
can swap in a fake and callers can bring their own session, proxies or timeouts.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

import requests

from .exceptions import ApiTransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ResponseBody(Protocol):
    def read(self) -> bytes: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class HttpRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    reason: str
    body: ResponseBody


class Transport(Protocol):
    def perform(self, request: HttpRequest) -> HttpResponse: ...


class _StreamedBody:
    """Adapts a streamed ``requests.Response`` to ``read()``/``close()``."""

    def __init__(self, resp: requests.Response):
        self._resp = resp

    def read(self) -> bytes:
        try:
            return b''.join(self._resp.iter_content(chunk_size=8192))
        except requests.RequestException as e:
            raise ApiTransportError(f"Failed reading response body: {e}") from e

    def close(self) -> None:
        self._resp.close()


class RequestsTransport:
    """Transport backed by a ``requests.Session``. Safe to share if the session is."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        self.session = session or requests.Session()
        self.timeout = timeout

    def perform(self, request: HttpRequest) -> HttpResponse:
        try:
            resp = self.session.request(
                request.method.upper(),
                request.url,
                headers=request.headers,
                data=request.body,
                timeout=self.timeout,
                stream=True,
            )
        except requests.RequestException as e:
            raise ApiTransportError(f"Network error: {e}") from e
        logger.debug('%s %s -> %s', request.method, request.url, resp.status_code)
        return HttpResponse(status_code=resp.status_code, reason=resp.reason or '', body=_StreamedBody(resp))
