"""Flat query string parameters.

Implements ``Mapping[str, str]`` with standard URL semantics: when a key
repeats, the last value wins. ``get_list`` still exposes every value.
"""

import re
from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl, urlsplit

_ABSOLUTE_URL = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def split_url(url: str) -> tuple[str, str]:
    """Return the ``(path, query)`` parts of *url*.

    Absolute URLs go through ``urlsplit``. Anything else is treated as a
    request target, so ``//users/42`` stays a path instead of becoming
    a network location.
    """
    if _ABSOLUTE_URL.match(url):
        split = urlsplit(url)
        return split.path, split.query
    target = url.partition("#")[0]
    path, _, query = target.partition("?")
    return path, query


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    Attributes:
        _data: Field name -> list of values, in order of appearance.
        _raw: The query string as received (without the leading ``?``).
    """

    _data: dict[str, list[str]]
    _raw: str

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: str = "") -> None:
        object.__setattr__(self, "_raw", query_string)
        data: dict[str, list[str]] = {}
        for key, value in parse_qsl(query_string, keep_blank_values=True):
            data.setdefault(key, []).append(value)
        object.__setattr__(self, "_data", data)

    def __getitem__(self, key: str) -> str:
        return self._data[key][-1]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the last value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[-1]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    @property
    def raw(self) -> str:
        """The undecoded query string."""
        return self._raw
