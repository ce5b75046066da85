"""Core types for estate-api."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Union


Environment = Literal["development", "fly", "netlify", "production", "server"]
TransportHint = Literal["primary", "fallback"]
Body = Union[str, bytes, "FormPayload", None]


# =============================================================================
# Request / response values
# =============================================================================


@dataclass(frozen=True)
class Envelope:
    """Normalized result of a transport call.

    Attributes:
        ok: True iff the HTTP status is in [200, 300).
        status: HTTP status code, 0 when nothing was received.
        data: Parsed JSON body, ``{"raw": text}`` for non-JSON bodies,
              ``{}`` for empty or unreadable bodies.
        synthetic: True when the envelope was produced locally after a
                   transport failure instead of from a real response.
    """

    ok: bool
    status: int
    data: Any = field(default_factory=dict)
    synthetic: bool = False

    @classmethod
    def from_status(cls, status: int, data: Any) -> "Envelope":
        return cls(ok=200 <= status < 300, status=status, data=data)


@dataclass
class FormPayload:
    """A multipart/form-data body.

    Files map a field name to ``(filename, content, content_type)``.

    Example:
        FormPayload(
            fields={"title": "2BHK flat"},
            files={"image": ("flat.jpg", image_bytes, "image/jpeg")},
        )
    """

    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, tuple[str, bytes, str]] = field(default_factory=dict)


@dataclass
class RequestOptions:
    """Describes one logical request before it is addressed.

    Attributes:
        method: HTTP method.
        headers: Caller headers; they win over injected defaults.
        body: Already-encoded body, or a FormPayload.
        timeout: Timeout override in seconds.
        transport: Force a transport ("fallback" skips the primary one).
    """

    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: Body = None
    timeout: float | None = None
    transport: TransportHint | None = None


@dataclass(frozen=True)
class PreparedRequest:
    """A fully addressed request, identical for every transport.

    ``cookies`` carries the primary session's cookies for the URL when the
    request is handed to the fallback transport.
    """

    method: str
    url: str
    headers: dict[str, str]
    body: Body
    timeout: float
    cookies: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RawResponse:
    """A response whose body has been buffered exactly once.

    ``body`` is None when the body could not be read.
    """

    status: int
    headers: dict[str, str]
    body: bytes | None


# =============================================================================
# Abort - per-attempt cancellation
# =============================================================================


class AbortSignal:
    def __init__(self) -> None:
        self._aborted = False
        self._reason: Union[str, None] = None
        self._listeners: list[Callable[[], Any]] = []

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> Union[str, None]:
        return self._reason

    def add_listener(self, callback: Callable[[], Any]) -> None:
        self._listeners.append(callback)
        if self._aborted:
            callback()

    def _abort(self, reason: Union[str, None] = None) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = reason
        for listener in self._listeners:
            listener()


class AbortController:
    def __init__(self) -> None:
        self._signal = AbortSignal()

    @property
    def signal(self) -> AbortSignal:
        return self._signal

    def abort(self, reason: Union[str, None] = None) -> None:
        self._signal._abort(reason)
