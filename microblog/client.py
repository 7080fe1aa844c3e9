from __future__ import annotations
import logging
from typing import Optional, Tuple
from urllib.parse import quote, urlencode

from .base_client import BaseClient
from .config import DEFAULT_BASE_URL, Settings
from .models import CheckResult, Feed, Photo, Post, User, decode_check, decode_feed, decode_users
from .transport import RequestsTransport, Transport

logger = logging.getLogger(__name__)


class MicroblogClient(BaseClient):
    """micro.blog API client (timelines, favorites, follows, posting)."""

    def __init__(self, token: str, base_url: str = DEFAULT_BASE_URL, transport: Optional[Transport] = None):
        super().__init__(token, transport=transport)
        self.BASE_URL = base_url.rstrip('/')

    @classmethod
    def from_env(cls) -> 'MicroblogClient':
        settings = Settings.from_env()
        return cls(settings.token, base_url=settings.base_url, transport=RequestsTransport(timeout=settings.timeout))

    def _url(self, path: str, **params) -> str:
        url = self.BASE_URL + '/' + path.lstrip('/')
        if params:
            url += '?' + urlencode(params)
        return url

    def _feed(self, path: str, **params) -> Feed:
        return decode_feed(self.get(self._url(path, **params)))

    # --- timelines -----------------------------------------------------------

    def get_posts(self) -> Feed:
        """Home timeline of the authenticated user."""
        return self._feed('posts/all')

    def get_mentions(self) -> Feed:
        return self._feed('posts/mentions')

    def get_favorites(self) -> Feed:
        return self._feed('posts/favorites')

    def discover(self) -> Feed:
        """Curated posts."""
        return self._feed('posts/discover')

    def get_user_posts(self, username: str) -> Feed:
        return self._feed('posts/' + quote(username, safe=''))

    def get_conversation(self, post_id: int) -> Feed:
        """All replies to a post."""
        return self._feed('posts/conversation', id=post_id)

    def check(self, since_id: int) -> CheckResult:
        """Count of posts newer than ``since_id`` and the suggested poll interval."""
        return decode_check(self.get(self._url('posts/check', since_id=since_id)))

    def get_following(self, username: str) -> Tuple[User, ...]:
        return decode_users(self.get(self._url('users/following/' + quote(username, safe=''))))

    # --- actions -------------------------------------------------------------

    def favorite(self, post_id: int) -> None:
        self.post_json(self._url('posts/favorites'), {'id': str(post_id)})

    def unfavorite(self, post_id: int) -> None:
        self.delete(self._url(f'posts/favorites/{post_id}'))

    def delete_post(self, post_id: int) -> None:
        self.delete(self._url(f'posts/{post_id}'))

    def follow(self, username: str) -> None:
        self.post_empty(self._url('users/follow', username=username))

    def unfollow(self, username: str) -> None:
        self.post_empty(self._url('users/unfollow', username=username))

    # --- publishing ----------------------------------------------------------
    # The API does not echo created posts, so these return an empty Post.

    def reply(self, post_id: int, text: str) -> Post:
        self.post_form(self._url('posts/reply'), {'id': str(post_id), 'text': text})
        return Post()

    def post(self, text: str) -> Post:
        """Publish a new post through the Micropub endpoint."""
        self.post_form(self._url('micropub'), {'h': 'entry', 'content': text})
        return Post()

    def post_photo(self, text: str, photo: Photo) -> Post:
        # TODO: multipart upload to the Micropub media endpoint
        logger.warning('Photo posts are not supported yet; nothing was sent for %s', photo.path)
        return Post()
