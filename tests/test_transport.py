import pytest
import requests

from microblog.base_client import BaseClient
from microblog.exceptions import ApiTransportError, NotFound
from microblog.transport import HttpRequest, RequestsTransport


class _FakeResponse:
    def __init__(self, status_code=200, chunks=(b'{}',), reason='OK'):
        self.status_code = status_code
        self.reason = reason
        self._chunks = chunks
        self.closed = 0

    def iter_content(self, chunk_size=1):
        for c in self._chunks:
            yield c

    def close(self):
        self.closed += 1


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def test_perform_streams_with_timeout():
    resp = _FakeResponse(chunks=(b'{"count":', b'5}'))
    session = _FakeSession(response=resp)
    transport = RequestsTransport(session=session, timeout=7)
    out = transport.perform(HttpRequest('get', 'https://micro.blog/posts/check?since_id=1', {'Authorization': 't'}))
    method, url, kwargs = session.calls[0]
    assert method == 'GET'
    assert kwargs['timeout'] == 7
    assert kwargs['stream'] is True
    assert kwargs['headers'] == {'Authorization': 't'}
    assert out.status_code == 200
    assert out.body.read() == b'{"count":5}'
    out.body.close()
    assert resp.closed == 1


@pytest.mark.parametrize('error', [requests.ConnectionError('refused'), requests.Timeout('slow')])
def test_network_errors_become_transport_errors(error):
    transport = RequestsTransport(session=_FakeSession(error=error))
    with pytest.raises(ApiTransportError) as exc:
        transport.perform(HttpRequest('GET', 'https://micro.blog/posts/all'))
    assert exc.value.__cause__ is error


def test_executor_closes_streamed_response_on_error():
    resp = _FakeResponse(status_code=404, chunks=(b'Not found',), reason='Not Found')
    client = BaseClient('Bearer x', transport=RequestsTransport(session=_FakeSession(response=resp)))
    with pytest.raises(NotFound) as exc:
        client.get('https://micro.blog/posts/nobody')
    assert exc.value.server_response == 'Not found'
    assert resp.closed == 1


def test_executor_rejects_json_and_form_together():
    client = BaseClient('t', transport=RequestsTransport(session=_FakeSession(response=_FakeResponse())))
    with pytest.raises(ValueError):
        client._request('POST', 'https://micro.blog/micropub', json_body={'a': 1}, form={'b': 2})
