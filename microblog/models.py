"""Feed, post and account models plus the JSON Feed decoder.

micro.blog serves timelines as JSON Feed (https://jsonfeed.org/version/1) with a
``_microblog`` extension object on the feed, on each item and on each author.
Ids travel as JSON strings and are decoded to ``int``.

All models are frozen; a decode either yields a complete ``Feed`` or raises
``FeedDecodeError``.
"""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .exceptions import FeedDecodeError

MAX_ID = 2 ** 63 - 1


@dataclass(frozen=True)
class AuthorProperties:
    username: str = ''
    is_following: bool = False


@dataclass(frozen=True)
class Author:
    name: str = ''
    url: str = ''
    avatar: str = ''
    properties: AuthorProperties = field(default_factory=AuthorProperties)


@dataclass(frozen=True)
class PostProperties:
    is_deletable: bool = False
    is_favorite: bool = False
    date_relative: str = ''


@dataclass(frozen=True)
class Post:
    id: int = 0
    url: str = ''
    content_html: str = ''
    date_published: Optional[datetime] = None
    author: Author = field(default_factory=Author)
    properties: PostProperties = field(default_factory=PostProperties)


@dataclass(frozen=True)
class AccountSummary:
    """The ``_microblog`` block of a feed: who the timeline belongs to."""
    about: str = ''
    id: int = 0
    username: str = ''
    bio: str = ''
    is_following: bool = False
    is_you: bool = False
    following_count: int = 0


@dataclass(frozen=True)
class Feed:
    version: str = ''
    title: str = ''
    home_page_url: str = ''
    feed_url: str = ''
    items: Tuple[Post, ...] = ()
    author: Author = field(default_factory=Author)
    account: AccountSummary = field(default_factory=AccountSummary)


@dataclass(frozen=True)
class CheckResult:
    count: int = 0
    check_seconds: int = 0


@dataclass(frozen=True)
class User:
    name: str = ''
    url: str = ''
    avatar: str = ''
    username: str = ''


@dataclass(frozen=True)
class Photo:
    """Handle to local image content for a photo post. Nothing reads it yet."""
    path: Path

    @classmethod
    def from_path(cls, path: str | Path) -> 'Photo':
        return cls(Path(path))


# --- field readers -----------------------------------------------------------

def _obj(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    val = data.get(key)
    if val is None:
        return {}
    if not isinstance(val, dict):
        raise FeedDecodeError(f"'{key}' must be an object, got {type(val).__name__}")
    return val


def _str(data: Dict[str, Any], key: str) -> str:
    val = data.get(key)
    if val is None:
        return ''
    if not isinstance(val, str):
        raise FeedDecodeError(f"'{key}' must be a string, got {type(val).__name__}")
    return val


def _bool(data: Dict[str, Any], key: str) -> bool:
    val = data.get(key)
    if val is None:
        return False
    if not isinstance(val, bool):
        raise FeedDecodeError(f"'{key}' must be a boolean, got {type(val).__name__}")
    return val


def _int(data: Dict[str, Any], key: str) -> int:
    val = data.get(key)
    if val is None:
        return 0
    # bool is an int subclass
    if isinstance(val, bool) or not isinstance(val, int):
        raise FeedDecodeError(f"'{key}' must be an integer, got {type(val).__name__}")
    return val


def _id(data: Dict[str, Any], key: str) -> int:
    """Read an id sent as a JSON string of decimal digits."""
    val = data.get(key)
    if val is None:
        return 0
    if not isinstance(val, str):
        raise FeedDecodeError(f"'{key}' must be a numeric string, got {type(val).__name__}")
    if not val.isascii() or not val.isdigit():
        raise FeedDecodeError(f"'{key}' is not a non-negative integer: {val!r}")
    num = int(val)
    if num > MAX_ID:
        raise FeedDecodeError(f"'{key}' out of range: {val}")
    return num


def _timestamp(data: Dict[str, Any], key: str) -> Optional[datetime]:
    val = _str(data, key)
    if not val:
        return None
    try:
        ts = datetime.fromisoformat(val.replace('Z', '+00:00'))
    except ValueError as e:
        raise FeedDecodeError(f"'{key}' is not an ISO-8601 timestamp: {val!r}") from e
    if ts.tzinfo is None:
        raise FeedDecodeError(f"'{key}' has no UTC offset: {val!r}")
    return ts


def _load(data: bytes | str) -> Any:
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FeedDecodeError(f"Failed to decode JSON response: {e}") from e


def _root_object(data: bytes | str) -> Dict[str, Any]:
    obj = _load(data)
    if not isinstance(obj, dict):
        raise FeedDecodeError(f"Expected a JSON object, got {type(obj).__name__}")
    return obj


# --- decoders ----------------------------------------------------------------

def author_from_dict(raw: Dict[str, Any]) -> Author:
    props = _obj(raw, '_microblog')
    return Author(
        name=_str(raw, 'name'),
        url=_str(raw, 'url'),
        avatar=_str(raw, 'avatar'),
        properties=AuthorProperties(
            username=_str(props, 'username'),
            is_following=_bool(props, 'is_following'),
        ),
    )


def post_from_dict(raw: Dict[str, Any]) -> Post:
    props = _obj(raw, '_microblog')
    # the server spells it is_favorite; older docs used is_favourite
    fav_key = 'is_favorite' if 'is_favorite' in props else 'is_favourite'
    return Post(
        id=_id(raw, 'id'),
        url=_str(raw, 'url'),
        content_html=_str(raw, 'content_html'),
        date_published=_timestamp(raw, 'date_published'),
        author=author_from_dict(_obj(raw, 'author')),
        properties=PostProperties(
            is_deletable=_bool(props, 'is_deletable'),
            is_favorite=_bool(props, fav_key),
            date_relative=_str(props, 'date_relative'),
        ),
    )


def feed_from_dict(raw: Dict[str, Any]) -> Feed:
    items = raw.get('items')
    if items is None:
        items = []
    if not isinstance(items, list):
        raise FeedDecodeError(f"'items' must be an array, got {type(items).__name__}")
    posts = []
    for it in items:
        if not isinstance(it, dict):
            raise FeedDecodeError(f"feed item must be an object, got {type(it).__name__}")
        posts.append(post_from_dict(it))
    account = _obj(raw, '_microblog')
    return Feed(
        version=_str(raw, 'version'),
        title=_str(raw, 'title'),
        home_page_url=_str(raw, 'home_page_url'),
        feed_url=_str(raw, 'feed_url'),
        items=tuple(posts),
        author=author_from_dict(_obj(raw, 'author')),
        account=AccountSummary(
            about=_str(account, 'about'),
            id=_id(account, 'id'),
            username=_str(account, 'username'),
            bio=_str(account, 'bio'),
            is_following=_bool(account, 'is_following'),
            is_you=_bool(account, 'is_you'),
            following_count=_int(account, 'following_count'),
        ),
    )


def decode_feed(data: bytes | str) -> Feed:
    return feed_from_dict(_root_object(data))


def decode_check(data: bytes | str) -> CheckResult:
    raw = _root_object(data)
    return CheckResult(count=_int(raw, 'count'), check_seconds=_int(raw, 'check_seconds'))


def decode_users(data: bytes | str) -> Tuple[User, ...]:
    raw = _load(data)
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise FeedDecodeError(f"Expected a JSON array of users, got {type(raw).__name__}")
    users = []
    for u in raw:
        if not isinstance(u, dict):
            raise FeedDecodeError(f"user entry must be an object, got {type(u).__name__}")
        users.append(User(
            name=_str(u, 'name'),
            url=_str(u, 'url'),
            avatar=_str(u, 'avatar'),
            username=_str(u, 'username'),
        ))
    return tuple(users)


# --- encoders ----------------------------------------------------------------

def author_to_dict(author: Author) -> Dict[str, Any]:
    return {
        'name': author.name,
        'url': author.url,
        'avatar': author.avatar,
        '_microblog': {
            'username': author.properties.username,
            'is_following': author.properties.is_following,
        },
    }


def post_to_dict(post: Post) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        'id': str(post.id),
        'url': post.url,
        'content_html': post.content_html,
        'author': author_to_dict(post.author),
        '_microblog': {
            'is_deletable': post.properties.is_deletable,
            'is_favorite': post.properties.is_favorite,
            'date_relative': post.properties.date_relative,
        },
    }
    if post.date_published is not None:
        out['date_published'] = post.date_published.isoformat()
    return out


def feed_to_dict(feed: Feed) -> Dict[str, Any]:
    acc = feed.account
    return {
        'version': feed.version,
        'title': feed.title,
        'home_page_url': feed.home_page_url,
        'feed_url': feed.feed_url,
        '_microblog': {
            'about': acc.about,
            'id': str(acc.id),
            'username': acc.username,
            'bio': acc.bio,
            'is_following': acc.is_following,
            'is_you': acc.is_you,
            'following_count': acc.following_count,
        },
        'author': author_to_dict(feed.author),
        'items': [post_to_dict(p) for p in feed.items],
    }


def encode_feed(feed: Feed) -> bytes:
    return json.dumps(feed_to_dict(feed), ensure_ascii=False).encode('utf-8')
