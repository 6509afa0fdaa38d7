"""An ordered collection of HTTP headers."""

from __future__ import annotations

import functools
from typing import Iterable, Iterator, Optional, Tuple

HeaderPair = Tuple[str, str]


@functools.total_ordering
class Headers:
    """HTTP headers as an ordered list of (name, value) pairs.

    Names are compared exactly as given. A name may appear more than once
    with different values.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Optional[Iterable[Tuple[str, str]]] = None) -> None:
        self._pairs: list[HeaderPair] = [
            (str(name), str(value)) for name, value in (pairs or ())
        ]

    def insert(self, name: str, value: str) -> None:
        """Appends a header unless the exact same pair is already present."""
        if not self.contains(name, value):
            self._pairs.append((name, value))

    def get(self, name: str) -> Optional[str]:
        """Returns the first value for a name, or None."""
        return next((value for key, value in self._pairs if key == name), None)

    def remove(self, name: str) -> None:
        """Removes every header with this name."""
        self._pairs = [(key, value) for key, value in self._pairs if key != name]

    def clear(self) -> None:
        self._pairs.clear()

    def contains_name(self, name: str) -> bool:
        return any(key == name for key, _ in self._pairs)

    def contains(self, name: str, value: str) -> bool:
        return (name, value) in self._pairs

    def is_subset(self, other: "Headers") -> bool:
        """True if other holds every header in self."""
        return all(pair in other._pairs for pair in self._pairs)

    def is_superset(self, other: "Headers") -> bool:
        """True if self holds every header in other."""
        return other.is_subset(self)

    def copy(self) -> "Headers":
        return Headers(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[HeaderPair]:
        return iter(list(self._pairs))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._pairs == other._pairs

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._pairs < other._pairs

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Headers({self._pairs!r})"