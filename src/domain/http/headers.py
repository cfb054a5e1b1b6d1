"""Immutable, case-insensitive HTTP header multimap."""

from collections.abc import Iterable, Iterator, Mapping
from typing import Optional, Union

HeaderSource = Union["HttpHeaders", Mapping[str, Union[str, Iterable[str]]], Iterable[tuple[str, str]]]


class HttpHeaders:
    """Ordered multimap of header names to values.

    Lookups ignore case. Values keep their insertion order per name and
    duplicates are allowed. Instances never change; ``with_header`` and
    ``without`` return new objects.
    """

    __slots__ = ("_items",)

    def __init__(self, source: Optional[HeaderSource] = None) -> None:
        items: list[tuple[str, str]] = []
        if isinstance(source, HttpHeaders):
            items.extend(source._items)
        elif isinstance(source, Mapping):
            for name, value in source.items():
                if isinstance(value, str):
                    items.append((name, value))
                else:
                    items.extend((name, v) for v in value)
        elif source is not None:
            items.extend((name, value) for name, value in source)
        self._items: tuple[tuple[str, str], ...] = tuple(items)

    def get_all(self, name: str) -> list[str]:
        """Return every value for ``name`` in insertion order."""
        key = name.lower()
        return [value for header, value in self._items if header.lower() == key]

    def get_first(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value for ``name`` or ``default``."""
        key = name.lower()
        for header, value in self._items:
            if header.lower() == key:
                return value
        return default

    get = get_first

    def names(self) -> list[str]:
        """Distinct header names, first spelling wins."""
        seen: dict[str, str] = {}
        for header, _ in self._items:
            seen.setdefault(header.lower(), header)
        return list(seen.values())

    def items(self) -> list[tuple[str, str]]:
        return list(self._items)

    def with_header(self, name: str, value: str) -> "HttpHeaders":
        """Copy with ``name`` replaced by a single ``value``."""
        return self.without(name).adding(name, value)

    def adding(self, name: str, value: str) -> "HttpHeaders":
        """Copy with ``value`` appended to ``name``."""
        return HttpHeaders(self._items + ((name, value),))

    def without(self, name: str) -> "HttpHeaders":
        key = name.lower()
        return HttpHeaders([(h, v) for h, v in self._items if h.lower() != key])

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get_first(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self.names())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HttpHeaders):
            return NotImplemented
        return [(h.lower(), v) for h, v in self._items] == [
            (h.lower(), v) for h, v in other._items
        ]

    def __hash__(self) -> int:
        return hash(tuple((h.lower(), v) for h, v in self._items))

    def __repr__(self) -> str:
        return f"HttpHeaders({list(self._items)!r})"
