"""Query string parameters for a request.

Values are decoded once; the raw string is kept for rebuilding the URL.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Read-only view of a query string. Indexing yields the first value."""

    __slots__ = ("_raw", "_values")

    def __init__(self, query_string: str = "") -> None:
        self._raw = query_string
        self._values: dict[str, list[str]] = parse_qs(query_string, keep_blank_values=True)

    @property
    def raw(self) -> str:
        return self._raw

    def __getitem__(self, key: str) -> str:
        return self._values[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value for *key*, in order (repeated fields)."""
        return list(self._values.get(key, ()))
