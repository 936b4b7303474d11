"""Registry of already-loaded middleware, loader, and module values.

Routes name their code by string key. The registry maps those keys to
the callables (or arbitrary values, for ``ctx.resolve``) populated at
startup, so nothing is imported by path while a request is running.

Usage::

    registry = Registry()

    @registry.register("blog/+middleware")
    def auth_gate(ctx):
        return {"user": ctx.request.auth}

    registry.add("blog/{slug}/+load", load_post)
    registry.freeze()
"""

from collections.abc import Callable, Iterator
from pathlib import PurePosixPath
from typing import Any

from folio.errors import ConfigurationError, RegistryError


def normalize_key(key: str) -> str:
    """Normalize a registry key: forward slashes, no leading ``/`` or ``./``."""
    parts: list[str] = []
    for part in PurePosixPath(key.replace("\\", "/")).parts:
        if part in ("/", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return "/".join(parts)


class Registry:
    """String-keyed lookup of loaded values. Mutable until frozen."""

    __slots__ = ("_entries", "_frozen")

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}
        self._frozen = False

    def add(self, key: str, value: Any) -> None:
        """Register *value* under *key*. Must be called before freeze()."""
        if self._frozen:
            msg = f"Cannot register {key!r}: the registry is frozen."
            raise ConfigurationError(msg)
        self._entries[normalize_key(key)] = value

    def register[F: Callable[..., Any]](self, key: str) -> Callable[[F], F]:
        """Register the decorated function under *key*."""

        def decorator(func: F) -> F:
            self.add(key, func)
            return func

        return decorator

    def get(self, key: str) -> Any:
        """Return the value for *key*.

        Raises ``RegistryError`` if nothing is registered under it.
        """
        try:
            return self._entries[normalize_key(key)]
        except KeyError:
            raise RegistryError(key) from None

    def freeze(self) -> None:
        """Freeze the registry. No more entries can be added."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
