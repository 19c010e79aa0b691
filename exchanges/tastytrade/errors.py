"""Exception hierarchy for the tastytrade client."""

from __future__ import annotations

from typing import Optional


class TastytradeError(Exception):
    """Base exception for all tastytrade client errors."""


class NetworkError(TastytradeError):
    """Connection or timeout failure before any HTTP status was received."""


class HTTPStatusError(TastytradeError):
    """Response carried a non-success HTTP status."""

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"HTTP status {status}")
        self.status = status


class ClientError(HTTPStatusError):
    """HTTP 4xx. A 401/403 usually means the session must be re-created."""

    def __init__(self, status: int) -> None:
        super().__init__(status, f"client error occurred: status code {status}")


class ServerError(HTTPStatusError):
    """HTTP 5xx."""

    def __init__(self, status: int) -> None:
        super().__init__(status, f"server error occurred: status code {status}")


class AuthError(HTTPStatusError):
    """Session endpoint answered with something other than 200/201."""

    def __init__(self, status: int) -> None:
        super().__init__(status, f"authentication failed: status code {status}")


class DecodeError(TastytradeError):
    """Body is not JSON or does not fit the requested shape."""
