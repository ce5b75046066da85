"""Fallback HTTP transport using httpx."""

from __future__ import annotations

from typing import Any

import httpx

from estate_api.errors import AbortError, ConnectionFailure, TransportError, TransportUnavailable
from estate_api.types import AbortSignal, FormPayload, PreparedRequest, RawResponse

from .base import HTTPTransport


class HttpxTransport(HTTPTransport):
    """HTTP transport using httpx.

    Used when the primary transport cannot reach the server. It targets the
    same URL with the same method, headers and body, and sends the primary
    session's cookies in a ``Cookie`` header.

    Example:
        fallback = HttpxTransport()
        envelope = await fallback.send_settled(request)
    """

    name = "httpx"

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def _perform(self, request: PreparedRequest) -> RawResponse:
        client = await self._get_client()

        headers = dict(request.headers)
        if request.cookies and not any(name.lower() == "cookie" for name in headers):
            headers["Cookie"] = "; ".join(f"{name}={value}" for name, value in request.cookies.items())

        kwargs: dict[str, Any] = {"headers": headers, "timeout": request.timeout}
        if isinstance(request.body, FormPayload):
            kwargs["data"] = request.body.fields
            kwargs["files"] = request.body.files
        elif request.body is not None:
            kwargs["content"] = request.body

        try:
            response = await client.request(request.method, request.url, **kwargs)
        except httpx.TimeoutException as e:
            raise AbortError(f"Timeout after {request.timeout}s") from e
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, ValueError, TypeError) as e:
            raise TransportUnavailable(str(e)) from e
        except httpx.TransportError as e:
            raise ConnectionFailure(str(e) or "Network error") from e
        except httpx.HTTPError as e:
            raise TransportError(str(e)) from e

        return RawResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    async def send(
        self,
        request: PreparedRequest,
        signal: AbortSignal | None = None,
    ) -> RawResponse:
        return await self._abortable(self._perform(request), signal)

    async def close(self) -> None:
        """Close the underlying client if we own it."""
        if self._owns_client and self._client:
            await self._client.aclose()
            self._client = None
