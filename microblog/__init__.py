"""Client for the micro.blog HTTP API.

Usage example:
    from microblog import MicroblogClient
    client = MicroblogClient.from_env()
    feed = client.get_posts()
    for post in feed.items:
        print(post.id, post.author.name)
"""
from .client import MicroblogClient  # noqa: F401
from .exceptions import (  # noqa: F401
    ApiRequestError,
    ApiTransportError,
    ClientError,
    ConfigurationError,
    ErrorKind,
    FeedDecodeError,
    Forbidden,
    MicroblogError,
    NotAuthorized,
    NotFound,
    ServerError,
)
from .models import Author, CheckResult, Feed, Photo, Post, User  # noqa: F401
