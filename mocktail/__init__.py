"""HTTP and gRPC server mocking for tests."""

__version__ = "0.2.5a0"

__all__ = [
    "body",
    "builder",
    "errors",
    "headers",
    "matchers",
    "mock",
    "mock_set",
    "request",
    "response",
    "server",
    "service",
    "status",
]