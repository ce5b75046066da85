"""Primary HTTP transport using aiohttp."""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp
from yarl import URL

from estate_api.errors import AbortError, ConnectionFailure, TransportError, TransportUnavailable
from estate_api.types import AbortSignal, FormPayload, PreparedRequest, RawResponse

from .base import HTTPTransport


def _form_data(payload: FormPayload) -> aiohttp.FormData:
    form = aiohttp.FormData()
    for name, value in payload.fields.items():
        form.add_field(name, str(value))
    for name, (filename, content, content_type) in payload.files.items():
        form.add_field(name, content, filename=filename, content_type=content_type)
    return form


class AioHTTPTransport(HTTPTransport):
    """HTTP transport using aiohttp.

    The session keeps a cookie jar, so cookies set by the API are sent back
    on later requests.
    """

    name = "aiohttp"

    def __init__(self, session: aiohttp.ClientSession | None = None) -> None:
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            # unsafe: also keep cookies set by IP-address hosts (127.0.0.1 in development)
            self._session = aiohttp.ClientSession(cookie_jar=aiohttp.CookieJar(unsafe=True))
            self._owns_session = True
        return self._session

    def cookies_for(self, url: str) -> dict[str, str]:
        """Cookies the session jar holds for ``url``."""
        if self._session is None or self._session.closed:
            return {}
        cookies = self._session.cookie_jar.filter_cookies(URL(url))
        return {name: morsel.value for name, morsel in cookies.items()}

    async def _perform(self, request: PreparedRequest) -> RawResponse:
        session = await self._get_session()

        kwargs: dict[str, Any] = {
            "headers": request.headers,
            "timeout": aiohttp.ClientTimeout(total=request.timeout),
        }
        if isinstance(request.body, FormPayload):
            kwargs["data"] = _form_data(request.body)
        elif request.body is not None:
            kwargs["data"] = request.body

        try:
            async with session.request(request.method, request.url, **kwargs) as resp:
                try:
                    body: bytes | None = await resp.read()
                except aiohttp.ClientPayloadError:
                    body = None
                return RawResponse(status=resp.status, headers=dict(resp.headers), body=body)
        except asyncio.TimeoutError as e:
            raise AbortError(f"Timeout after {request.timeout}s") from e
        except aiohttp.ClientConnectionError as e:
            raise ConnectionFailure(str(e) or "Failed to fetch") from e
        except (aiohttp.InvalidURL, ValueError, TypeError) as e:
            raise TransportUnavailable(str(e)) from e
        except aiohttp.ClientError as e:
            raise TransportError(str(e)) from e

    async def send(
        self,
        request: PreparedRequest,
        signal: AbortSignal | None = None,
    ) -> RawResponse:
        return await self._abortable(self._perform(request), signal)

    async def close(self) -> None:
        """Close the aiohttp session if we created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None
