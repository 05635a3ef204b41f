"""Immutable, case-insensitive HTTP headers.

``Headers`` is the read-only view handlers get on ``Request.headers``.
Response headers are plain ``(name, value)`` tuples; the helpers at the
bottom of this module query them case-insensitively.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    Names are stored lower-cased. ``__getitem__`` returns the first value;
    ``get_list`` returns all values for a header.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        object.__setattr__(
            self, "_items", tuple((name.lower(), value) for name, value in items)
        )

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        """Build from ASGI-style byte pairs."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str] | None) -> Headers:
        """Build from a plain ``{name: value}`` dict."""
        return cls((mapping or {}).items())

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._items:
            if name == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name == key_lower for name, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._items:
            if name not in seen:
                seen.add(name)
                yield name

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        key_lower = key.lower()
        return [value for name, value in self._items if name == key_lower]

    @property
    def items_raw(self) -> tuple[tuple[str, str], ...]:
        """All ``(name, value)`` pairs in arrival order."""
        return self._items


def has_header(headers: tuple[tuple[str, str], ...], name: str) -> bool:
    """True if a header pair with *name* exists (case-insensitive)."""
    name_lower = name.lower()
    return any(key.lower() == name_lower for key, _ in headers)


def get_header(headers: tuple[tuple[str, str], ...], name: str) -> str | None:
    """Return the first value of header *name*, or ``None``."""
    name_lower = name.lower()
    for key, value in headers:
        if key.lower() == name_lower:
            return value
    return None
