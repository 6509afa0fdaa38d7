"""An ordered set of mocks."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional

from .builder import Then, When
from .mock import Mock
from .request import Request

BuildFn = Callable[[When, Then], object]


class MockSet:
    """Mocks kept in priority order; earlier mocks are tried first."""

    def __init__(self, mocks: Optional[Iterable[Mock]] = None) -> None:
        self._mocks: List[Mock] = list(mocks or ())

    def insert(self, mock: Mock) -> None:
        """Adds a mock unless an equal one is present, keeping priority order."""
        if mock not in self._mocks:
            self._mocks.append(mock)
            self._mocks.sort(key=lambda m: m.priority)

    def mock(self, f: BuildFn) -> None:
        """Builds and inserts a mock with default options."""
        self.insert(Mock.build(f))

    def mock_with_options(
        self, priority: int, limit: Optional[int], f: BuildFn
    ) -> None:
        """Builds and inserts a mock with a priority and an optional limit."""
        mock = Mock.build(f).with_priority(priority)
        if limit is not None:
            mock = mock.with_limit(limit)
        self.insert(mock)

    def find(self, predicate: Callable[[Mock], bool]) -> Optional[Mock]:
        """Returns the first mock for which predicate is true, or None."""
        return next((mock for mock in self._mocks if predicate(mock)), None)

    def remove(self, index: int) -> Mock:
        """Removes and returns the mock at index."""
        return self._mocks.pop(index)

    def clear(self) -> None:
        self._mocks.clear()

    def match_by_request(self, request: Request) -> Optional[Mock]:
        """Returns a copy of the first mock matching the request, or None."""
        for mock in self._mocks:
            if mock.matches(request):
                return mock.copy()
        return None

    def copy(self) -> "MockSet":
        return MockSet(mock.copy() for mock in self._mocks)

    def __contains__(self, mock: object) -> bool:
        return mock in self._mocks

    def __len__(self) -> int:
        return len(self._mocks)

    def __iter__(self) -> Iterator[Mock]:
        return iter(list(self._mocks))

    def __repr__(self) -> str:
        return f"MockSet({self._mocks!r})"