"""Request execution: addressing, timeouts, retries and transport fallback."""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import urljoin

from estate_api.config import ApiConfig
from estate_api.errors import (
    AbortError,
    ConnectionFailure,
    NetworkError,
    RequestTimeoutError,
    TransportError,
    TransportUnavailable,
)
from estate_api.policy import DegradePolicy
from estate_api.response import normalize
from estate_api.retry import RetryPolicy
from estate_api.storage import LOCATION_KEY, TOKEN_KEY, Storage
from estate_api.transport import HTTPTransport
from estate_api.types import (
    AbortController,
    Envelope,
    FormPayload,
    PreparedRequest,
    RequestOptions,
)
from estate_api.urls import attach_location, build_url

logger = logging.getLogger(__name__)

# Read endpoints known to answer slowly (aggregations, large lists).
SLOW_ENDPOINTS = (
    "chat/unread-count",
    "notifications/unread-count",
    "banners",
    "properties/featured",
    "properties",
)

# Multipart uploads and category admin operations.
EXTENDED_ENDPOINTS = ("upload", "categories", "subcategories", "create", "delete")

_BODYLESS_METHODS = ("GET", "HEAD")


def effective_timeout(endpoint: str, config: ApiConfig, override: float | None = None) -> float:
    """Timeout in seconds for one call to ``endpoint``."""
    if override is not None:
        return override

    timeout = config.timeout
    if any(key in endpoint for key in SLOW_ENDPOINTS):
        timeout = max(timeout, config.slow_timeout)
    if any(key in endpoint for key in EXTENDED_ENDPOINTS):
        timeout = max(timeout, config.extended_timeout)

    # No backend proxy in a preview host: fail fast.
    if config.preview and not config.base_url:
        timeout = min(timeout, config.preview_timeout)

    return timeout


async def read_stored(storage: Storage, key: str) -> str | None:
    """Read a storage key; an unreadable store counts as empty."""
    try:
        return await storage.get(key)
    except Exception as e:
        logger.debug("Storage read of %r failed: %s", key, e)
        return None


class RequestExecutor:
    """Issues requests with retries and a fallback transport.

    Every response is returned as an Envelope, whatever its status code.
    Only transport failures raise, once every recovery path is exhausted.

    Example:
        executor = RequestExecutor(config, storage, primary, fallback)
        envelope = await executor.execute("properties?status=active")
    """

    def __init__(
        self,
        config: ApiConfig,
        storage: Storage,
        primary: HTTPTransport,
        fallback: HTTPTransport,
        *,
        retry: RetryPolicy | None = None,
        degrade: DegradePolicy | None = None,
    ) -> None:
        self.config = config
        self.storage = storage
        self.primary = primary
        self.fallback = fallback
        self.retry = retry or RetryPolicy(attempts=config.retry_attempts, delay=config.retry_delay)
        self.degrade = degrade or DegradePolicy(enabled=config.degrade_to_empty)

    async def resolve_url(self, endpoint: str) -> str:
        url = build_url(endpoint, self.config.base_url)
        url = attach_location(url, endpoint, await read_stored(self.storage, LOCATION_KEY))
        if url.startswith("/"):
            url = urljoin(self.config.origin, url)
        logger.debug("Resolved %s -> %s", endpoint, url)
        return url

    async def build_headers(self, options: RequestOptions) -> dict[str, str]:
        method = options.method.upper()
        headers: dict[str, str] = {}

        sends_json = (
            options.body is not None
            and not isinstance(options.body, FormPayload)
            and method not in _BODYLESS_METHODS
        )
        if sends_json:
            headers["Content-Type"] = "application/json"

        if not any(name.lower() == "authorization" for name in options.headers):
            token = await read_stored(self.storage, TOKEN_KEY)
            if token:
                headers["Authorization"] = f"Bearer {token}"

        headers.update(options.headers)
        return headers

    async def prepare(self, endpoint: str, options: RequestOptions) -> PreparedRequest:
        return PreparedRequest(
            method=options.method.upper(),
            url=await self.resolve_url(endpoint),
            headers=await self.build_headers(options),
            body=options.body,
            timeout=effective_timeout(endpoint, self.config, options.timeout),
        )

    async def attempt(self, request: PreparedRequest) -> Envelope:
        controller = AbortController()
        timer = asyncio.get_running_loop().call_later(
            request.timeout, controller.abort, f"Timeout after {request.timeout}s"
        )
        try:
            raw = await self.primary.send(request, signal=controller.signal)
        finally:
            timer.cancel()

        envelope = normalize(raw)
        if not envelope.ok:
            logger.warning(
                "API responded with error: %s %s -> %s %s",
                request.method, request.url, envelope.status, envelope.data,
            )
        return envelope

    async def execute(
        self,
        endpoint: str,
        options: RequestOptions | None = None,
        retry_count: int = 0,
    ) -> Envelope:
        """Execute one logical request.

        Args:
            endpoint: Logical endpoint (path after ``/api/``, may carry a query).
            options: Request descriptor.
            retry_count: Retries already spent on this call.

        Returns:
            The normalized envelope, for any HTTP status.

        Raises:
            RequestTimeoutError: Every attempt timed out.
            NetworkError: Neither transport reached the server.
        """
        options = options or RequestOptions()
        request = await self.prepare(endpoint, options)

        if (options.transport or self.config.transport) == "fallback":
            envelope = await self.fallback.send_fallback(request, self.primary)
            return self._settle(endpoint, request, envelope)

        try:
            return await self.retry.run(lambda _: self.attempt(request), retry_count)
        except AbortError as e:
            raise RequestTimeoutError(
                f"Request timeout after {request.timeout}s", url=request.url, timeout=request.timeout
            ) from e
        except ConnectionFailure as e:
            logger.info("Primary transport failed (%s), trying %s fallback", e, self.fallback.name)
            cause: TransportError = e
        except TransportUnavailable as e:
            logger.warning("Primary transport unavailable (%s), using %s fallback", e, self.fallback.name)
            cause = e
        except TransportError as e:
            raise NetworkError(str(e), url=request.url) from e

        envelope = await self.fallback.send_fallback(request, self.primary)
        return self._settle(endpoint, request, envelope, cause)

    def _settle(
        self,
        endpoint: str,
        request: PreparedRequest,
        envelope: Envelope,
        cause: Exception | None = None,
    ) -> Envelope:
        if not envelope.synthetic:
            return envelope

        if self.degrade.applies(endpoint, request.method):
            logger.warning("All transports failed for %s, degrading to an empty response", endpoint)
            return self.degrade.envelope_for(endpoint)

        if envelope.status == 408:
            raise RequestTimeoutError(
                f"Request timeout after {request.timeout}s", url=request.url, timeout=request.timeout
            ) from cause
        raise NetworkError(
            f"Network error: Unable to connect to server at {request.url}", url=request.url
        ) from cause

    async def close(self) -> None:
        await self.primary.close()
        await self.fallback.close()
