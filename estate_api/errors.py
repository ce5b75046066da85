"""Error hierarchy for estate-api.

Transport errors are internal: the executor recovers from them with retries
and the fallback transport. Callers only ever see RequestTimeoutError,
NetworkError and ApiError.
"""

from __future__ import annotations

from typing import Any


class EstateApiError(Exception):
    """Base error for the client."""


# -- raised by transports, handled by the executor ---------------------------


class TransportError(EstateApiError):
    """A transport failed without delivering a response."""


class ConnectionFailure(TransportError):
    """Generic network failure: DNS, connection refused, dropped connection."""


class TransportUnavailable(TransportError):
    """The transport could not even issue the request."""


class AbortError(TransportError):
    def __init__(self, reason: str | None = None):
        self.reason = reason
        super().__init__(reason or "Operation aborted")


# -- surfaced to callers -----------------------------------------------------


class RequestTimeoutError(EstateApiError):
    """The request was aborted after its timeout, retries exhausted."""

    def __init__(self, message: str, *, url: str = "", timeout: float | None = None):
        super().__init__(message)
        self.url = url
        self.timeout = timeout


class NetworkError(EstateApiError):
    """The server could not be reached by any transport."""

    def __init__(self, message: str, *, url: str = ""):
        super().__init__(message)
        self.url = url


class ApiError(EstateApiError):
    """The server answered with a non-2xx status."""

    def __init__(self, message: str, *, status: int = 0, data: Any = None):
        super().__init__(message)
        self.status = status
        self.data = data
