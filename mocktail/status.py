"""HTTP status codes and gRPC status codes."""

from __future__ import annotations

import enum
import functools
from typing import Union

from .errors import InvalidError


@functools.total_ordering
class StatusCode:
    """An HTTP status code in the range 100..999."""

    __slots__ = ("_code",)

    def __init__(self, code: int = 200) -> None:
        if isinstance(code, StatusCode):
            code = code.as_u16()
        if isinstance(code, bool) or not isinstance(code, int) or not 100 <= code < 1000:
            raise InvalidError("invalid status code")
        self._code = code

    @classmethod
    def from_u16(cls, code: int) -> "StatusCode":
        """Builds a status code, raising InvalidError outside 100..999."""
        return cls(code)

    def as_u16(self) -> int:
        return self._code

    def __int__(self) -> int:
        return self._code

    def is_informational(self) -> bool:
        return 100 <= self._code < 200

    def is_success(self) -> bool:
        return 200 <= self._code < 300

    def is_redirection(self) -> bool:
        return 300 <= self._code < 400

    def is_error(self) -> bool:
        return 400 <= self._code < 600

    def is_ok(self) -> bool:
        return self.is_success()

    def as_grpc(self) -> "Code":
        """Returns the gRPC code equivalent to this HTTP status."""
        return Code.from_http(self)

    def as_grpc_i32(self) -> int:
        return self.as_grpc().value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StatusCode):
            return self._code == other._code
        if isinstance(other, int) and not isinstance(other, bool):
            return self._code == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, StatusCode):
            return self._code < other._code
        if isinstance(other, int) and not isinstance(other, bool):
            return self._code < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._code)

    def __repr__(self) -> str:
        return f"StatusCode({self._code})"

    def __str__(self) -> str:
        return str(self._code)


_NAMED_CODES = (
    ("CONTINUE", 100),
    ("SWITCHING_PROTOCOLS", 101),
    ("PROCESSING", 102),
    ("EARLY_HINTS", 103),
    ("OK", 200),
    ("CREATED", 201),
    ("ACCEPTED", 202),
    ("NON_AUTHORITATIVE_INFORMATION", 203),
    ("NO_CONTENT", 204),
    ("RESET_CONTENT", 205),
    ("PARTIAL_CONTENT", 206),
    ("MULTI_STATUS", 207),
    ("ALREADY_REPORTED", 208),
    ("IM_USED", 226),
    ("MULTIPLE_CHOICES", 300),
    ("MOVED_PERMANENTLY", 301),
    ("FOUND", 302),
    ("SEE_OTHER", 303),
    ("NOT_MODIFIED", 304),
    ("USE_PROXY", 305),
    ("TEMPORARY_REDIRECT", 307),
    ("PERMANENT_REDIRECT", 308),
    ("BAD_REQUEST", 400),
    ("UNAUTHORIZED", 401),
    ("PAYMENT_REQUIRED", 402),
    ("FORBIDDEN", 403),
    ("NOT_FOUND", 404),
    ("METHOD_NOT_ALLOWED", 405),
    ("NOT_ACCEPTABLE", 406),
    ("PROXY_AUTHENTICATION_REQUIRED", 407),
    ("REQUEST_TIMEOUT", 408),
    ("CONFLICT", 409),
    ("GONE", 410),
    ("LENGTH_REQUIRED", 411),
    ("PRECONDITION_FAILED", 412),
    ("PAYLOAD_TOO_LARGE", 413),
    ("URI_TOO_LONG", 414),
    ("UNSUPPORTED_MEDIA_TYPE", 415),
    ("RANGE_NOT_SATISFIABLE", 416),
    ("EXPECTATION_FAILED", 417),
    ("IM_A_TEAPOT", 418),
    ("MISDIRECTED_REQUEST", 421),
    ("UNPROCESSABLE_ENTITY", 422),
    ("LOCKED", 423),
    ("FAILED_DEPENDENCY", 424),
    ("TOO_EARLY", 425),
    ("UPGRADE_REQUIRED", 426),
    ("PRECONDITION_REQUIRED", 428),
    ("TOO_MANY_REQUESTS", 429),
    ("REQUEST_HEADER_FIELDS_TOO_LARGE", 431),
    ("UNAVAILABLE_FOR_LEGAL_REASONS", 451),
    ("INTERNAL_SERVER_ERROR", 500),
    ("NOT_IMPLEMENTED", 501),
    ("BAD_GATEWAY", 502),
    ("SERVICE_UNAVAILABLE", 503),
    ("GATEWAY_TIMEOUT", 504),
    ("HTTP_VERSION_NOT_SUPPORTED", 505),
    ("VARIANT_ALSO_NEGOTIATES", 506),
    ("INSUFFICIENT_STORAGE", 507),
    ("LOOP_DETECTED", 508),
    ("NOT_EXTENDED", 510),
    ("NETWORK_AUTHENTICATION_REQUIRED", 511),
)

for _name, _value in _NAMED_CODES:
    setattr(StatusCode, _name, StatusCode(_value))
del _name, _value


class Code(enum.Enum):
    """A gRPC status code."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    @classmethod
    def from_http(cls, http_code: Union[StatusCode, int]) -> "Code":
        """Maps an HTTP status to a gRPC code.

        Follows the usual HTTP-to-gRPC mapping, except that 200, 404, 422,
        500 and 501 map to more specific codes.
        """
        code = StatusCode(http_code).as_u16()
        return _HTTP_TO_GRPC.get(code, cls.UNKNOWN)

    def description(self) -> str:
        return _DESCRIPTIONS[self]

    def to_header_value(self) -> str:
        """Returns the value of a grpc-status header for this code."""
        return str(self.value)

    def __str__(self) -> str:
        return self.description()


_HTTP_TO_GRPC = {
    200: Code.OK,
    400: Code.INTERNAL,
    422: Code.INVALID_ARGUMENT,
    401: Code.UNAUTHENTICATED,
    403: Code.PERMISSION_DENIED,
    404: Code.NOT_FOUND,
    429: Code.UNAVAILABLE,
    502: Code.UNAVAILABLE,
    503: Code.UNAVAILABLE,
    504: Code.UNAVAILABLE,
    500: Code.INTERNAL,
    501: Code.UNIMPLEMENTED,
}

_DESCRIPTIONS = {
    Code.OK: "The operation completed successfully",
    Code.CANCELLED: "The operation was cancelled",
    Code.UNKNOWN: "Unknown error",
    Code.INVALID_ARGUMENT: "Client specified an invalid argument",
    Code.DEADLINE_EXCEEDED: "Deadline expired before operation could complete",
    Code.NOT_FOUND: "Some requested entity was not found",
    Code.ALREADY_EXISTS: "Some entity that we attempted to create already exists",
    Code.PERMISSION_DENIED: (
        "The caller does not have permission to execute the specified operation"
    ),
    Code.RESOURCE_EXHAUSTED: "Some resource has been exhausted",
    Code.FAILED_PRECONDITION: (
        "The system is not in a state required for the operation's execution"
    ),
    Code.ABORTED: "The operation was aborted",
    Code.OUT_OF_RANGE: "Operation was attempted past the valid range",
    Code.UNIMPLEMENTED: "Operation is not implemented or not supported",
    Code.INTERNAL: "Internal error",
    Code.UNAVAILABLE: "The service is currently unavailable",
    Code.DATA_LOSS: "Unrecoverable data loss or corruption",
    Code.UNAUTHENTICATED: "The request does not have valid authentication credentials",
}