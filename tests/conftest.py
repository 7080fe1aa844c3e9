from __future__ import annotations

import pytest

from microblog.client import MicroblogClient
from microblog.transport import HttpResponse

TOKEN = 'Bearer ABCD12345'

FEED_JSON = '''
{
  "version": "https://jsonfeed.org/version/1",
  "title": "Micro.blog - Ricco Førgaard",
  "home_page_url": "https://micro.blog/",
  "feed_url": "https://micro.blog/posts/ricco",
  "_microblog": {
    "about": "https://micro.blog/about/api",
    "id": "735",
    "username": "ricco",
    "bio": "I like to code stuff, grow stuff, brew stuff, cook stuff, solder stuff, and stuff.",
    "is_following": true,
    "is_you": true,
    "following_count": 33
  },
  "author": {
    "name": "Ricco Førgaard",
    "url": "https://github.com/fiskeben",
    "avatar": "https://www.gravatar.com/avatar/5a1b964e34cc2b1d3e233fa387b791b0?s=96"
  },
  "items": [
    {
      "id": "218679",
      "content_html": "<p>I’m testing my micro.blog API client right now, so you may see some wierd posts :)</p>\\n",
      "url": "http://micro.fiskeben.dk/2017/12/09/im-testing-my.html",
      "date_published": "2017-12-09T18:46:00+00:00",
      "author": {
        "name": "Ricco Førgaard",
        "url": "https://github.com/fiskeben",
        "avatar": "https://www.gravatar.com/avatar/5a1b964e34cc2b1d3e233fa387b791b0?s=96",
        "_microblog": {"username": "ricco"}
      },
      "_microblog": {"date_relative": "7:46 pm", "is_favorite": false, "is_deletable": true}
    },
    {
      "id": "218680",
      "content_html": "<p>Another test of my client library.</p>\\n",
      "url": "http://micro.fiskeben.dk/2017/12/09/another-test-of.html",
      "date_published": "2017-12-09T18:44:00+00:00",
      "author": {
        "name": "Ricco Førgaard",
        "url": "https://github.com/fiskeben",
        "avatar": "https://www.gravatar.com/avatar/5a1b964e34cc2b1d3e233fa387b791b0?s=96",
        "_microblog": {"username": "ricco"}
      },
      "_microblog": {"date_relative": "7:44 pm", "is_favorite": false, "is_deletable": true}
    },
    {
      "id": "218675",
      "content_html": "<p>Just testing how to post from my micro.blog API.</p>\\n",
      "url": "http://micro.fiskeben.dk/2017/12/09/just-testing-how.html",
      "date_published": "2017-12-09T18:31:00+00:00",
      "author": {
        "name": "Ricco Førgaard",
        "url": "https://github.com/fiskeben",
        "avatar": "https://www.gravatar.com/avatar/5a1b964e34cc2b1d3e233fa387b791b0?s=96",
        "_microblog": {"username": "ricco"}
      },
      "_microblog": {"date_relative": "7:31 pm", "is_favorite": false, "is_deletable": true}
    }
  ]
}
'''


class FakeBody:
    def __init__(self, data: bytes, fail_read: bool = False):
        self.data = data
        self.fail_read = fail_read
        self.read_calls = 0
        self.close_calls = 0

    def read(self) -> bytes:
        self.read_calls += 1
        if self.fail_read:
            raise IOError('connection reset while reading body')
        return self.data

    def close(self) -> None:
        self.close_calls += 1


class FakeTransport:
    """Returns one canned response and remembers every request it saw."""

    def __init__(self, status_code: int = 200, body: str = '', fail_read: bool = False, error: Exception | None = None):
        self.status_code = status_code
        self.body_text = body
        self.fail_read = fail_read
        self.error = error
        self.requests = []
        self.bodies = []

    @property
    def last_request(self):
        return self.requests[-1]

    @property
    def last_body(self) -> FakeBody:
        return self.bodies[-1]

    def perform(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        body = FakeBody(self.body_text.encode('utf-8'), fail_read=self.fail_read)
        self.bodies.append(body)
        return HttpResponse(status_code=self.status_code, reason='', body=body)


def make_client(status_code: int = 200, body: str = '', **kwargs):
    transport = FakeTransport(status_code=status_code, body=body, **kwargs)
    return MicroblogClient(TOKEN, transport=transport), transport


@pytest.fixture
def feed_client():
    return make_client(body=FEED_JSON)
