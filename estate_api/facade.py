"""Typed get/post/put/delete facade used by feature code."""

from __future__ import annotations

import json
from typing import Any

from estate_api.errors import ApiError
from estate_api.executor import RequestExecutor, read_stored
from estate_api.storage import TOKEN_KEY
from estate_api.types import Envelope, FormPayload, RequestOptions


def error_message(envelope: Envelope) -> str:
    """Message for a non-2xx envelope.

    Priority: server ``error``, server ``message``, raw text body, then
    ``HTTP <status>``.
    """
    data = envelope.data if isinstance(envelope.data, dict) else {}
    raw = data.get("raw")
    message = (
        data.get("error")
        or data.get("message")
        or (raw if isinstance(raw, str) else "")
        or f"HTTP {envelope.status}"
    )
    return str(message)


def raise_for_envelope(envelope: Envelope) -> None:
    if not envelope.ok:
        raise ApiError(error_message(envelope), status=envelope.status, data=envelope.data)


class ApiClient:
    """The public request surface.

    Results are ``{"data": <response body>}``; the body is returned as the
    server sent it, including any nested ``data`` key.

    Example:
        api = create_api()
        result = await api.get("properties?status=active")
        properties = result["data"]["data"]["properties"]
    """

    def __init__(self, executor: RequestExecutor) -> None:
        self.executor = executor

    async def _headers(self, token: str | None) -> dict[str, str]:
        auth_token = token if token is not None else await read_stored(self.executor.storage, TOKEN_KEY)
        return {"Authorization": f"Bearer {auth_token}"} if auth_token else {}

    async def _call(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        body: Any = None
        if isinstance(data, FormPayload):
            body = data
        elif data is not None:
            body = json.dumps(data)

        envelope = await self.executor.execute(
            endpoint,
            RequestOptions(method=method, headers=await self._headers(token), body=body),
        )
        raise_for_envelope(envelope)
        return {"data": envelope.data}

    async def get(self, endpoint: str, token: str | None = None) -> dict[str, Any]:
        return await self._call("GET", endpoint, token=token)

    async def post(self, endpoint: str, data: Any = None, token: str | None = None) -> dict[str, Any]:
        return await self._call("POST", endpoint, data, token)

    async def put(self, endpoint: str, data: Any = None, token: str | None = None) -> dict[str, Any]:
        return await self._call("PUT", endpoint, data, token)

    async def delete(self, endpoint: str, token: str | None = None) -> dict[str, Any]:
        return await self._call("DELETE", endpoint, token=token)

    async def close(self) -> None:
        await self.executor.close()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
