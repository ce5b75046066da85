"""Unread-count badge polling."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from estate_api.errors import EstateApiError
from estate_api.executor import read_stored
from estate_api.facade import ApiClient
from estate_api.storage import AUTH_TOKEN_KEY, TOKEN_KEY

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 10.0


class UnreadCountPoller:
    """Polls an unread-count endpoint and reports the count.

    Failed polls and failing callbacks are logged and the last known count
    is kept. Nothing is fetched while no token is stored under ``token`` or
    ``auth_token``.

    Example:
        poller = UnreadCountPoller.for_chat(api, on_change=update_badge)
        poller.start()
        ...
        await poller.stop()
    """

    def __init__(
        self,
        api: ApiClient,
        endpoint: str,
        field: str,
        *,
        interval: float = DEFAULT_INTERVAL,
        on_change: Callable[[int], Any] | None = None,
    ) -> None:
        self.api = api
        self.endpoint = endpoint
        self.field = field
        self.interval = interval
        self.on_change = on_change
        self.count = 0
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def for_chat(cls, api: ApiClient, **kwargs: Any) -> "UnreadCountPoller":
        return cls(api, "chat/unread-count", "totalUnread", **kwargs)

    @classmethod
    def for_notifications(cls, api: ApiClient, **kwargs: Any) -> "UnreadCountPoller":
        return cls(api, "notifications/unread-count", "unread", **kwargs)

    async def fetch_once(self) -> int:
        """Fetch the count once and return the current value."""
        storage = self.api.executor.storage
        token = await read_stored(storage, TOKEN_KEY) or await read_stored(storage, AUTH_TOKEN_KEY)
        if not token:
            return self.count

        try:
            result = await self.api.get(self.endpoint, token=token)
        except EstateApiError as e:
            logger.warning("Error fetching %s: %s", self.endpoint, e)
            return self.count

        body = result["data"]
        payload = body.get("data") if isinstance(body, dict) else None
        value = payload.get(self.field, 0) if isinstance(payload, dict) else 0
        try:
            count = int(value or 0)
        except (TypeError, ValueError):
            count = 0

        if count != self.count:
            self.count = count
            if self.on_change:
                try:
                    self.on_change(count)
                except Exception:
                    logger.exception("Unread-count callback failed for %s", self.endpoint)
        return self.count

    async def _run(self) -> None:
        while True:
            await self.fetch_once()
            await asyncio.sleep(self.interval)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[None]:
        if not self.running:
            self._task = asyncio.create_task(self._run())
        assert self._task is not None
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
