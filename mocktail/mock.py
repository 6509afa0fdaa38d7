"""A single mock: request conditions paired with a response."""

from __future__ import annotations

import dataclasses
import secrets
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .builder import Then, When
from .matchers import Matcher
from .request import Request
from .response import Response

DEFAULT_PRIORITY = 5


def _uuid7() -> uuid.UUID:
    """Returns a time-ordered UUID (version 7)."""
    millis = time.time_ns() // 1_000_000
    rand_a = secrets.randbits(12)
    rand_b = secrets.randbits(62)
    value = (
        ((millis & ((1 << 48) - 1)) << 80)
        | (0x7 << 76)
        | (rand_a << 64)
        | (0b10 << 62)
        | rand_b
    )
    return uuid.UUID(int=value)


@dataclass(eq=False)
class Mock:
    """A set of request matchers and the response to send when all of them match."""

    matchers: List[Matcher] = field(default_factory=list)
    response: Response = field(default_factory=Response)
    priority: int = DEFAULT_PRIORITY
    limit: Optional[int] = None
    id: uuid.UUID = field(default_factory=_uuid7)
    _count: int = field(default=0, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    @classmethod
    def build(cls, f: Callable[[When, Then], object]) -> "Mock":
        """Builds a mock by handing a When and a Then builder to f."""
        when = When()
        then = Then()
        f(when, then)
        return cls(matchers=when.into_inner(), response=then.into_inner())

    def with_priority(self, priority: int) -> "Mock":
        """Sets the priority; lower values are tried first."""
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise TypeError("priority must be an integer")
        if not 0 <= priority <= 255:
            raise ValueError("priority must be in 0..255")
        self.priority = priority
        return self

    def with_limit(self, limit: int) -> "Mock":
        """Sets how many times this mock may match."""
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise TypeError("limit must be an integer")
        if limit < 0:
            raise ValueError("limit must not be negative")
        self.limit = limit
        return self

    def match_count(self) -> int:
        with self._lock:
            return self._count

    def matches(self, request: Request) -> bool:
        """Evaluates a request; a match counts against the limit."""
        with self._lock:
            if self.limit is not None and self._count >= self.limit:
                return False
            matched = all(matcher.matches(request) for matcher in self.matchers)
            if matched:
                self._count += 1
            return matched

    def reset(self) -> None:
        """Resets the match counter."""
        with self._lock:
            self._count = 0

    def copy(self) -> "Mock":
        """Returns an independent copy with the same id and match count."""
        response = dataclasses.replace(
            self.response,
            body=self.response.body.copy(),
            headers=self.response.headers.copy(),
        )
        clone = Mock(
            matchers=list(self.matchers),
            response=response,
            priority=self.priority,
            limit=self.limit,
            id=self.id,
        )
        clone._count = self.match_count()
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mock):
            return NotImplemented
        return (
            self.id == other.id
            and self.matchers == other.matchers
            and self.response == other.response
            and self.priority == other.priority
            and self.match_count() == other.match_count()
            and self.limit == other.limit
        )

    __hash__ = None  # type: ignore[assignment]