from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError
from .transport import DEFAULT_TIMEOUT

DEFAULT_BASE_URL = 'https://micro.blog'

TOKEN_ENV = 'MICROBLOG_TOKEN'
BASE_URL_ENV = 'MICROBLOG_BASE_URL'
TIMEOUT_ENV = 'MICROBLOG_TIMEOUT'


def load_env_file(env_path: Path) -> None:
    """Populate os.environ from a KEY=VALUE file (lightweight, no python-dotenv dependency).

    Existing non-empty variables win over the file.
    """
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if not k:
            continue
        existing = os.environ.get(k)
        if existing is None or existing.strip() == '':
            os.environ[k] = v


def env(name: str, required: bool = True) -> Optional[str]:
    val = os.getenv(name)
    if required and (val is None or val.strip() == ''):
        raise ConfigurationError(f"Missing required environment variable: {name}")
    return val


def bearer(token: str) -> str:
    if token.lower().startswith('bearer '):
        return token
    return f"Bearer {token}"


@dataclass(frozen=True)
class Settings:
    token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> 'Settings':
        token = env(TOKEN_ENV)
        base_url = os.getenv(BASE_URL_ENV) or DEFAULT_BASE_URL
        raw_timeout = os.getenv(TIMEOUT_ENV)
        timeout = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigurationError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}")
            if timeout <= 0:
                raise ConfigurationError(f"{TIMEOUT_ENV} must be positive, got {raw_timeout!r}")
        return cls(token=bearer(token), base_url=base_url.rstrip('/'), timeout=timeout)  # type: ignore[arg-type]
