"""Credential and host configuration read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://api.trello.com"


@dataclass(frozen=True)
class Credentials:
    api_key: str
    token: str
    host: str = DEFAULT_HOST


def load_env_file(path: str | Path | None = None) -> int:
    """Load ``KEY=value`` lines from an env file into ``os.environ``.

    Existing environment variables are never overridden. Blank lines and
    ``#`` comments are skipped; surrounding quotes on values are removed.

    Args:
        path: File to read. Defaults to ``$TRELLO_ENV_FILE`` or ``.env``.

    Returns:
        Number of variables that were set
    """
    env_file = Path(path or os.getenv("TRELLO_ENV_FILE", ".env"))
    if not env_file.exists():
        return 0

    loaded = 0
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export ") :].strip()
            value = value.strip().strip("'\"")
            if key not in os.environ:
                os.environ[key] = value
                loaded += 1

    logger.debug("Loaded %d variable(s) from %s", loaded, env_file)
    return loaded


def load_credentials() -> Credentials | None:
    """Read Trello credentials from the environment.

    Returns:
        Credentials, or None when TRELLO_API_KEY or TRELLO_TOKEN is missing
    """
    api_key = os.getenv("TRELLO_API_KEY", "").strip()
    token = os.getenv("TRELLO_TOKEN", "").strip()
    if not api_key or not token:
        return None
    host = os.getenv("TRELLO_HOST") or DEFAULT_HOST
    return Credentials(api_key=api_key, token=token, host=host.rstrip("/"))
