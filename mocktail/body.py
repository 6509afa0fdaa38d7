"""Request and response bodies."""

from __future__ import annotations

import dataclasses
import functools
import json
import struct
from collections import deque
from typing import Any, Iterable, Iterator, Optional, Union

BytesLike = Union[bytes, bytearray, memoryview, str]

_MAX_GRPC_MESSAGE = 0xFFFFFFFF


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes or str, got {type(data).__name__}")


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _json_bytes(value: Any) -> bytes:
    text = json.dumps(
        value, separators=(",", ":"), ensure_ascii=False, default=_json_default
    )
    return text.encode("utf-8")


def encode_grpc_message(message: Any) -> bytes:
    """Frames a protobuf message for a gRPC body.

    The message is either already serialized bytes or an object with a
    ``SerializeToString`` method. The frame is a zero compression flag,
    a big-endian 32-bit length and the payload.
    """
    if isinstance(message, (bytes, bytearray, memoryview)):
        payload = bytes(message)
    else:
        serialize = getattr(message, "SerializeToString", None)
        if serialize is None:
            raise TypeError(
                f"cannot encode {type(message).__name__} as a protobuf message"
            )
        payload = bytes(serialize())
    if len(payload) > _MAX_GRPC_MESSAGE:
        raise ValueError("message too large for a gRPC frame")
    return struct.pack(">BI", 0, len(payload)) + payload


@functools.total_ordering
class Body:
    """The body of a mock request or response, held as a list of chunks.

    Two bodies are equal when their merged bytes are equal, however they
    are split into chunks.
    """

    __slots__ = ("_chunks",)

    def __init__(self, chunks: Optional[Iterable[BytesLike]] = None) -> None:
        self._chunks: deque[bytes] = deque(_to_bytes(chunk) for chunk in chunks or ())

    @classmethod
    def empty(cls) -> "Body":
        return cls()

    @classmethod
    def bytes(cls, data: BytesLike) -> "Body":
        """A body of one chunk of raw bytes (text is UTF-8 encoded)."""
        return cls([data])

    @classmethod
    def bytes_stream(cls, messages: Iterable[BytesLike]) -> "Body":
        """A streaming body with one chunk per message."""
        return cls(messages)

    @classmethod
    def json(cls, value: Any) -> "Body":
        """A body holding the compact JSON encoding of a value."""
        return cls([_json_bytes(value)])

    @classmethod
    def json_lines_stream(cls, messages: Iterable[Any]) -> "Body":
        """A streaming body of newline-terminated JSON documents."""
        return cls(_json_bytes(message) + b"\n" for message in messages)

    @classmethod
    def pb(cls, message: Any) -> "Body":
        """A body holding one gRPC-framed protobuf message."""
        return cls([encode_grpc_message(message)])

    @classmethod
    def pb_stream(cls, messages: Iterable[Any]) -> "Body":
        """A streaming body of gRPC-framed protobuf messages."""
        return cls(encode_grpc_message(message) for message in messages)

    def is_empty(self) -> bool:
        return len(self) == 0

    def as_bytes(self) -> bytes:
        """Returns all chunks merged into one bytes object."""
        return b"".join(self._chunks)

    def pop(self) -> Optional[bytes]:
        """Removes and returns the first chunk, or None when none is left."""
        return self._chunks.popleft() if self._chunks else None

    def copy(self) -> "Body":
        return Body(self._chunks)

    def __len__(self) -> int:
        return sum(len(chunk) for chunk in self._chunks)

    def __iter__(self) -> Iterator[bytes]:
        return iter(list(self._chunks))

    def __bytes__(self) -> bytes:
        return self.as_bytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Body):
            return NotImplemented
        return self.as_bytes() == other.as_bytes()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Body):
            return NotImplemented
        return list(self._chunks) < list(other._chunks)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Body({list(self._chunks)!r})"