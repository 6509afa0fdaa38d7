"""Mock responses."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Optional, Union

from .body import Body, BytesLike
from .headers import Headers
from .status import StatusCode


@dataclass
class Response:
    """An HTTP response returned by a mock; 200 OK with an empty body by default."""

    body: Body = field(default_factory=Body)
    status: StatusCode = field(default_factory=StatusCode)
    headers: Headers = field(default_factory=Headers)
    message: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.body, Body):
            self.body = Body.bytes(self.body)
        if not isinstance(self.status, StatusCode):
            self.status = StatusCode(self.status)

    def with_status(self, status: Union[StatusCode, int]) -> "Response":
        return dataclasses.replace(self, status=StatusCode(status))

    def with_headers(self, headers: Headers) -> "Response":
        return dataclasses.replace(self, headers=headers)

    def with_message(self, message: str) -> "Response":
        return dataclasses.replace(self, message=str(message))

    def with_body(self, body: Union[Body, BytesLike]) -> "Response":
        return dataclasses.replace(self, body=body)

    def is_ok(self) -> bool:
        return self.status.is_ok()

    def is_error(self) -> bool:
        return self.status.is_error()