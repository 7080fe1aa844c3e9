from __future__ import annotations
import json
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from .exceptions import classify_response
from .transport import HttpRequest, RequestsTransport, Transport

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'
JSON_CONTENT_TYPE = 'application/json'


class BaseClient:
    """Authenticated request executor.

    Every request carries the token as its ``Authorization`` header. Responses
    with status >= 300 are raised as ``ApiRequestError`` subclasses; the body is
    closed exactly once whichever way the call ends. No retries, no rate limiting.
    """

    def __init__(self, token: str, transport: Optional[Transport] = None):
        self.token = token
        self.transport: Transport = transport or RequestsTransport()

    def _headers(self, content_type: Optional[str] = None) -> Dict[str, str]:
        headers = {
            'Authorization': self.token,
            'Accept': 'application/json',
        }
        if content_type:
            headers['Content-Type'] = content_type
        return headers

    def _request(self, method: str, url: str, *, json_body: Any | None = None, form: Mapping[str, Any] | None = None) -> bytes:
        if json_body is not None and form is not None:
            raise ValueError('json_body and form are mutually exclusive')
        body: Optional[bytes] = None
        content_type: Optional[str] = None
        if json_body is not None:
            body = json.dumps(json_body, separators=(',', ':')).encode('utf-8')
            content_type = JSON_CONTENT_TYPE
        elif form is not None:
            body = urlencode(form).encode('utf-8')
            content_type = FORM_CONTENT_TYPE

        request = HttpRequest(method=method.upper(), url=url, headers=self._headers(content_type), body=body)
        # transport errors propagate unchanged (ApiTransportError or whatever a custom seam raises)
        resp = self.transport.perform(request)
        try:
            error = classify_response(resp.status_code, resp.body)
            if error is not None:
                logger.warning('%s %s failed: %s', request.method, url, error)
                raise error
            data = resp.body.read()
        finally:
            resp.body.close()
        logger.debug('%s %s -> %s (%d bytes)', request.method, url, resp.status_code, len(data))
        return data

    def get(self, url: str) -> bytes:
        return self._request('GET', url)

    def post_empty(self, url: str) -> None:
        self._request('POST', url)

    def post_json(self, url: str, payload: Any) -> None:
        self._request('POST', url, json_body=payload)

    def post_form(self, url: str, fields: Mapping[str, Any]) -> None:
        self._request('POST', url, form=fields)

    def delete(self, url: str) -> None:
        self._request('DELETE', url)
