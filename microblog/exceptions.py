from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class MicroblogError(Exception):
    """Base class for every error raised by the client."""


class ConfigurationError(MicroblogError):
    """Required configuration (token, environment variable) is missing."""


class ApiTransportError(MicroblogError):
    """Network level failure: connection refused, DNS, timeout at the transport."""


class FeedDecodeError(MicroblogError):
    """Payload could not be decoded into the data model."""


class ErrorKind(Enum):
    NOT_AUTHORIZED = 'you are not authorized to access this resource'
    FORBIDDEN = 'insufficient privileges'
    NOT_FOUND = 'the resource was not found'
    SERVER_ERROR = 'the server returned an error'
    CLIENT_ERROR = 'client error'

    @property
    def reason(self) -> str:
        return self.value


class ApiRequestError(MicroblogError):
    """HTTP response with status >= 300.

    ``kind`` identifies the class of failure, ``server_response`` holds the raw
    response body when it could be read.
    """
    kind: ErrorKind = ErrorKind.CLIENT_ERROR
    # the generic kinds show the status code in their message
    _show_status: bool = True

    def __init__(self, status_code: int, server_response: Optional[str] = None):
        self.status_code = status_code
        self.server_response = server_response
        super().__init__(status_code, server_response)

    def __str__(self) -> str:
        return self._format()

    @property
    def reason(self) -> str:
        return self.kind.reason

    def _format(self) -> str:
        detail = []
        if self._show_status:
            detail.append(str(self.status_code))
        if self.server_response:
            detail.append(self.server_response)
        if not detail:
            return self.reason
        return f"{self.reason} ({' '.join(detail)})"


class NotAuthorized(ApiRequestError):
    """Authentication failure (401)."""
    kind = ErrorKind.NOT_AUTHORIZED
    _show_status = False


class Forbidden(ApiRequestError):
    """Authenticated but not allowed (403)."""
    kind = ErrorKind.FORBIDDEN
    _show_status = False


class NotFound(ApiRequestError):
    """Resource does not exist (404)."""
    kind = ErrorKind.NOT_FOUND
    _show_status = False


class ServerError(ApiRequestError):
    """Any 5xx status."""
    kind = ErrorKind.SERVER_ERROR


class ClientError(ApiRequestError):
    """3xx or 4xx status not mapped to a more specific error."""
    kind = ErrorKind.CLIENT_ERROR


ERROR_CLASSES = {
    ErrorKind.NOT_AUTHORIZED: NotAuthorized,
    ErrorKind.FORBIDDEN: Forbidden,
    ErrorKind.NOT_FOUND: NotFound,
    ErrorKind.SERVER_ERROR: ServerError,
    ErrorKind.CLIENT_ERROR: ClientError,
}

_EXACT_STATUS = {
    401: ErrorKind.NOT_AUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
}


def kind_for_status(status_code: int) -> Optional[ErrorKind]:
    if status_code < 300:
        return None
    if status_code in _EXACT_STATUS:
        return _EXACT_STATUS[status_code]
    if status_code >= 500:
        return ErrorKind.SERVER_ERROR
    return ErrorKind.CLIENT_ERROR


def classify_response(status_code: int, body: Any = None) -> Optional[ApiRequestError]:
    """Map an HTTP status onto an ``ApiRequestError`` or ``None`` when < 300.

    ``body`` is any object with a ``read()`` method. It is read but not closed;
    releasing it is up to whoever opened it. A failing read drops the server
    response from the error but never the classification.
    """
    kind = kind_for_status(status_code)
    if kind is None:
        return None
    server_response = None
    if body is not None:
        try:
            raw = body.read()
        except Exception as e:  # enrichment is best-effort
            logger.debug('Could not read error body for status %s: %s', status_code, e)
        else:
            if isinstance(raw, bytes):
                server_response = raw.decode('utf-8', errors='replace')
            elif raw is not None:
                server_response = str(raw)
    return ERROR_CLASSES[kind](status_code, server_response)
