"""Command line access to the micro.blog API.

Examples:
  microblog timeline --out data/timeline.json
  microblog user manton
  microblog check 218679
  microblog post "Hello from the command line"
  microblog reply 218679 "Thanks!"
  microblog follow manton

Reads MICROBLOG_TOKEN (and optionally MICROBLOG_BASE_URL, MICROBLOG_TIMEOUT)
from the environment or a local .env file.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, List, Optional

from .client import MicroblogClient
from .config import load_env_file
from .exceptions import ConfigurationError, MicroblogError
from .models import Feed, feed_to_dict

logger = logging.getLogger(__name__)

FEED_COMMANDS = {
    'timeline': lambda c, a: c.get_posts(),
    'mentions': lambda c, a: c.get_mentions(),
    'favorites': lambda c, a: c.get_favorites(),
    'discover': lambda c, a: c.discover(),
    'user': lambda c, a: c.get_user_posts(a.username),
    'conversation': lambda c, a: c.get_conversation(a.id),
}

ACTION_COMMANDS = {
    'post': lambda c, a: c.post(a.text),
    'reply': lambda c, a: c.reply(a.id, a.text),
    'delete': lambda c, a: c.delete_post(a.id),
    'favorite': lambda c, a: c.favorite(a.id),
    'unfavorite': lambda c, a: c.unfavorite(a.id),
    'follow': lambda c, a: c.follow(a.username),
    'unfollow': lambda c, a: c.unfollow(a.username),
}


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(prog='microblog', description='micro.blog API client')
    p.add_argument('--env-file', default='.env', help='Optional KEY=VALUE file loaded before reading the environment')
    p.add_argument('--out', help='Write JSON output to this file instead of stdout')
    p.add_argument('--verbose', action='store_true')
    sub = p.add_subparsers(dest='command', required=True)

    for name in ('timeline', 'mentions', 'favorites', 'discover'):
        sub.add_parser(name)
    for name in ('user', 'following', 'follow', 'unfollow'):
        sub.add_parser(name).add_argument('username')
    for name in ('conversation', 'delete', 'favorite', 'unfavorite'):
        sub.add_parser(name).add_argument('id', type=int)
    sub.add_parser('check').add_argument('since_id', type=int)
    sub.add_parser('post').add_argument('text')
    reply = sub.add_parser('reply')
    reply.add_argument('id', type=int)
    reply.add_argument('text')
    return p.parse_args(argv)


def run(client: MicroblogClient, args) -> Any:
    """Execute one command and return a JSON-serializable result (or None)."""
    cmd = args.command
    if cmd in FEED_COMMANDS:
        feed: Feed = FEED_COMMANDS[cmd](client, args)
        return feed_to_dict(feed)
    if cmd == 'check':
        return asdict(client.check(args.since_id))
    if cmd == 'following':
        return [asdict(u) for u in client.get_following(args.username)]
    if cmd in ACTION_COMMANDS:
        ACTION_COMMANDS[cmd](client, args)
        return None
    raise SystemExit(f'Unknown command: {cmd}')


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='[%(levelname)s] %(message)s')
    load_env_file(Path(args.env_file))

    try:
        client = MicroblogClient.from_env()
    except ConfigurationError as e:
        print(f'[config] {e}', file=sys.stderr)
        return 2

    try:
        result = run(client, args)
    except MicroblogError as e:
        print(f'[error] {e}', file=sys.stderr)
        return 1

    if result is None:
        logger.info('%s: ok', args.command)
        return 0
    text = json.dumps(result, ensure_ascii=False, indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding='utf-8')
        logger.info('Wrote %s', out_path)
    else:
        print(text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
