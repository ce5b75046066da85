"""Abstract HTTP transport interface for estate-api."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Awaitable

from estate_api.errors import AbortError
from estate_api.response import normalize
from estate_api.types import AbortSignal, Envelope, PreparedRequest, RawResponse

logger = logging.getLogger(__name__)


class HTTPTransport(ABC):
    """Abstract mechanism for performing one HTTP request.

    Two implementations can carry the same logical call:
    - AioHTTPTransport, the primary transport
    - HttpxTransport, the fallback used when the primary one fails
    """

    name: str

    @abstractmethod
    async def send(
        self,
        request: PreparedRequest,
        signal: AbortSignal | None = None,
    ) -> RawResponse:
        """Perform the request and buffer its body.

        Args:
            request: The addressed request.
            signal: Aborts the request when fired.

        Returns:
            The buffered response, whatever its status code.

        Raises:
            AbortError: The request timed out or the signal fired.
            ConnectionFailure: The server could not be reached.
            TransportUnavailable: The request could not be issued.
            TransportError: Any other transport-level failure.
        """
        ...

    async def send_settled(self, request: PreparedRequest) -> Envelope:
        """Perform the request and always settle with an envelope.

        Failures become synthetic envelopes: status 408 for a timeout,
        status 0 for anything else.
        """
        try:
            raw = await self.send(request)
        except AbortError:
            logger.warning("%s transport timed out: %s", self.name, request.url)
            return Envelope(ok=False, status=408, data={"error": "Request timeout"}, synthetic=True)
        except Exception as e:
            logger.warning("%s transport failed: %s (%s)", self.name, request.url, e)
            return Envelope(
                ok=False, status=0, data={"error": str(e) or "Network error"}, synthetic=True
            )
        return normalize(raw)

    def cookies_for(self, url: str) -> dict[str, str]:
        """Cookies this transport would send to ``url``. Override if needed."""
        return {}

    async def send_fallback(self, request: PreparedRequest, primary: "HTTPTransport") -> Envelope:
        """Settle ``request`` on this transport with the primary's cookies attached."""
        cookies = primary.cookies_for(request.url)
        if cookies:
            request = replace(request, cookies={**cookies, **request.cookies})
        return await self.send_settled(request)

    @staticmethod
    async def _abortable(operation: Awaitable[RawResponse], signal: AbortSignal | None) -> RawResponse:
        """Run ``operation`` as a task the signal can cancel."""
        task = asyncio.ensure_future(operation)
        if signal:
            signal.add_listener(task.cancel)
        try:
            return await task
        except asyncio.CancelledError:
            if signal and signal.aborted:
                raise AbortError(signal.reason) from None
            raise

    async def close(self) -> None:
        """Clean up resources. Override if needed."""
        pass

    async def __aenter__(self) -> "HTTPTransport":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
