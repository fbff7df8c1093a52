"""
Order-independent associative container.

A CanonicalMap behaves like a read-only dict whose equality, ordering and
hash do not depend on insertion order. Ordering and hashing are computed
from the entries sorted by key, so maps can be nested as keys or values of
other maps (including inside the Code tree that holds them).

Usage:
    from lamp.core.canonical_map import CanonicalMap

    a = CanonicalMap([("x", 1), ("y", 2)])
    b = CanonicalMap({"y": 2, "x": 1})
    assert a == b and hash(a) == hash(b)
    nested = CanonicalMap({a: "keyed by a map"})
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from operator import itemgetter
from typing import Any, Generic, TypeVar

from pydantic_core import core_schema

K = TypeVar("K")
V = TypeVar("V")

_MISSING = object()


class CanonicalMap(Mapping[K, V], Generic[K, V]):
    """Immutable mapping with insertion-order-independent eq, order and hash."""

    __slots__ = ("_data", "_hash")

    def __init__(self, entries: Mapping[K, V] | Iterable[tuple[K, V]] = ()) -> None:
        # dict() keeps the last value for a repeated key
        self._data: dict[K, V] = dict(entries)
        self._hash: int | None = None

    # -- Mapping protocol --

    def __getitem__(self, key: K) -> V:
        return self._data[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    # -- Construction --

    def with_entry(self, key: K, value: V) -> CanonicalMap[K, V]:
        """Return a new map with ``key`` set to ``value`` (last write wins)."""
        data = dict(self._data)
        data[key] = value
        return CanonicalMap(data)

    def sorted_items(self) -> list[tuple[K, V]]:
        """Entries sorted by key; the canonical view used for order and hash."""
        return sorted(self._data.items(), key=itemgetter(0))

    # -- Comparison and hashing --

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CanonicalMap):
            return NotImplemented
        if len(self._data) != len(other._data):
            return False
        for key, value in self._data.items():
            if other._data.get(key, _MISSING) != value:
                return False
        return True

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CanonicalMap):
            return NotImplemented
        return self.sorted_items() < other.sorted_items()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, CanonicalMap):
            return NotImplemented
        return self.sorted_items() <= other.sorted_items()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, CanonicalMap):
            return NotImplemented
        return self.sorted_items() > other.sorted_items()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, CanonicalMap):
            return NotImplemented
        return self.sorted_items() >= other.sorted_items()

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(tuple(self.sorted_items()))
        return self._hash

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self.sorted_items())
        return f"CanonicalMap({{{body}}})"

    # -- pydantic integration --

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(cls._coerce)

    @classmethod
    def _coerce(cls, value: Any) -> CanonicalMap[Any, Any]:
        if isinstance(value, CanonicalMap):
            return value
        if isinstance(value, Mapping):
            return cls(value)
        raise ValueError(f"Expected a mapping, got {type(value).__name__}")
