"""Exceptions raised while building and serving mocks."""


class MocktailError(Exception):
    """Base class for all errors raised by the package."""


class InvalidError(MocktailError):
    """A value was rejected as invalid."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"invalid: {self.detail}"


class ServerError(MocktailError):
    """The mock server could not start or run."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"server error: {self.detail}"