"""Built-in global capabilities.

Pure helpers every request context starts with, ahead of anything the
app registers. Loaders reach them as ``ctx.env(...)``; templates as
``{{ stringify(data) }}``.
"""

import json
import logging
import os
from typing import Any
from urllib.parse import SplitResult, urlsplit

from folio.data import deep_merge

_page_log = logging.getLogger("folio.pages")


def env(key: str, default: str = "") -> str:
    """Read an environment variable, ``""`` when unset."""
    return os.environ.get(key, default)


def stringify(value: Any, indent: int | None = None) -> str:
    """JSON-encode *value*, falling back to ``str()`` for unknown types."""
    return json.dumps(value, indent=indent, default=str)


def url(path: str) -> SplitResult:
    """Split a URL into its parts."""
    return urlsplit(path)


def keys(value: dict[str, Any]) -> list[str]:
    return list(value)


def values(value: dict[str, Any]) -> list[Any]:
    return list(value.values())


BUILTIN_GLOBALS: dict[str, Any] = {
    "dbg": _page_log.debug,
    "env": env,
    "error": _page_log.error,
    "info": _page_log.info,
    "keys": keys,
    "merge": deep_merge,
    "stringify": stringify,
    "url": url,
    "values": values,
    "warn": _page_log.warning,
}
