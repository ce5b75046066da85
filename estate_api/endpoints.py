"""Named calls for the auth and admin endpoints."""

from __future__ import annotations

import json
from typing import Any

from estate_api.errors import ApiError
from estate_api.executor import RequestExecutor
from estate_api.facade import ApiClient
from estate_api.types import RequestOptions


class AuthApi:
    """Login and OTP verification.

    Failures carry the server's ``error`` field or a fixed message.
    """

    def __init__(self, executor: RequestExecutor) -> None:
        self._executor = executor

    async def _post(self, endpoint: str, payload: dict[str, Any], failure: str) -> Any:
        envelope = await self._executor.execute(
            endpoint, RequestOptions(method="POST", body=json.dumps(payload))
        )
        if not envelope.ok:
            data = envelope.data if isinstance(envelope.data, dict) else {}
            raise ApiError(str(data.get("error") or failure), status=envelope.status, data=envelope.data)
        return envelope.data

    async def login(self, credentials: dict[str, Any]) -> Any:
        return await self._post("auth/login", credentials, "Login failed")

    async def send_otp(self, data: dict[str, Any]) -> Any:
        return await self._post("auth/send-otp", data, "Failed to send OTP")

    async def verify_otp(self, data: dict[str, Any]) -> Any:
        return await self._post("auth/verify-otp", data, "OTP verification failed")


class AdminApi:
    """Back-office dashboard reads, authorized with an explicit admin token."""

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def get_stats(self, token: str) -> Any:
        return (await self._api.get("admin/stats", token=token))["data"]

    async def get_users(self, token: str, limit: int = 10) -> Any:
        return (await self._api.get(f"admin/users?limit={limit}", token=token))["data"]

    async def get_properties(self, token: str, limit: int = 10) -> Any:
        return (await self._api.get(f"admin/properties?limit={limit}", token=token))["data"]
