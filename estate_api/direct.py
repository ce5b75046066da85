"""Lightweight request helper for scripts and feature code.

``DirectApi`` is a single callable with the same dual-transport behavior as
the executor, but a flatter result and a fixed default timeout:

    direct = DirectApi(executor)
    result = await direct("favorites", method="POST", body={"propertyId": "p1"})
    if result["success"]:
        ...
"""

from __future__ import annotations

import json
import logging
from typing import Any

from estate_api.errors import (
    AbortError,
    ConnectionFailure,
    NetworkError,
    RequestTimeoutError,
    TransportError,
    TransportUnavailable,
)
from estate_api.executor import RequestExecutor, read_stored
from estate_api.retry import RetryPolicy
from estate_api.storage import TOKEN_KEY
from estate_api.types import Envelope, FormPayload, PreparedRequest, TransportHint

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


def _result(envelope: Envelope) -> dict[str, Any]:
    return {
        "ok": envelope.ok,
        "status": envelope.status,
        "success": envelope.ok,
        "data": envelope.data,
        "json": envelope.data,
    }


class DirectApi:
    """Callable request helper.

    Unlike ApiClient it never raises for HTTP errors or for a failed
    fallback; only timeouts and unrecoverable primary failures raise.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        *,
        retry: RetryPolicy | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._executor = executor
        self._retry = retry or RetryPolicy(attempts=0, delay=executor.config.retry_delay)
        self._timeout = timeout

    async def _prepare(
        self,
        path: str,
        method: str,
        body: Any,
        headers: dict[str, str] | None,
        timeout: float | None,
    ) -> PreparedRequest:
        content: Any = None
        if isinstance(body, (str, bytes, FormPayload)):
            content = body
        elif body is not None:
            content = json.dumps(body)

        merged = dict(headers or {})
        token = await read_stored(self._executor.storage, TOKEN_KEY)
        if token:
            merged["Authorization"] = f"Bearer {token}"
        if content is not None and not isinstance(content, FormPayload) and "Content-Type" not in merged:
            merged["Content-Type"] = "application/json"

        return PreparedRequest(
            method=method.upper(),
            url=await self._executor.resolve_url(path),
            headers=merged,
            body=content,
            timeout=timeout if timeout is not None else self._timeout,
        )

    async def __call__(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        transport: TransportHint | None = None,
    ) -> dict[str, Any]:
        """Call ``path`` and return ``{ok, status, success, data, json}``.

        Args:
            path: Logical endpoint.
            method: HTTP method.
            body: Dict/list bodies are JSON-encoded; strings and bytes are sent as-is.
            headers: Extra headers. The stored token always sets Authorization.
            timeout: Timeout in seconds (default 15).
            transport: "fallback" skips the primary transport.

        Raises:
            RequestTimeoutError: The primary transport timed out.
            NetworkError: The primary transport failed for another reason.
        """
        request = await self._prepare(path, method, body, headers, timeout)
        fallback = self._executor.fallback
        logger.debug("Direct API call: %s %s", request.method, request.url)

        if transport == "fallback":
            return _result(await fallback.send_fallback(request, self._executor.primary))

        try:
            envelope = await self._retry.run(lambda _: self._executor.attempt(request))
        except ConnectionFailure:
            logger.warning("Primary transport failed, attempting %s fallback: %s", fallback.name, request.url)
            return _result(await fallback.send_fallback(request, self._executor.primary))
        except TransportUnavailable:
            logger.warning("Primary transport unavailable, using %s fallback: %s", fallback.name, request.url)
            return _result(await fallback.send_fallback(request, self._executor.primary))
        except AbortError as e:
            raise RequestTimeoutError(
                f"Request timeout: {request.url}", url=request.url, timeout=request.timeout
            ) from e
        except TransportError as e:
            raise NetworkError(
                f"Network error: Cannot connect to server at {request.url}", url=request.url
            ) from e

        logger.debug("Direct API response: %s -> %s", request.url, envelope.status)
        return _result(envelope)
