"""Storage protocol definition."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

# Keys shared with the rest of the application.
TOKEN_KEY = "token"
AUTH_TOKEN_KEY = "auth_token"
LOCATION_KEY = "app_city"


@runtime_checkable
class Storage(Protocol):
    """String key-value storage standing in for browser local storage.

    Values are strings; structured preferences are stored as JSON text.
    The transport layer only reads from it: the bearer token under
    TOKEN_KEY and the location preference under LOCATION_KEY. Login and
    logout code write and clear them.

    Example:
        class RedisStorage:
            def __init__(self, url: str = "redis://localhost"):
                self.client = redis.from_url(url, decode_responses=True)

            async def get(self, key: str) -> str | None:
                return await self.client.get(key)

            async def set(self, key: str, value: str) -> None:
                await self.client.set(key, value)

            async def delete(self, key: str) -> None:
                await self.client.delete(key)
    """

    async def get(self, key: str) -> str | None:
        """Get a value by key. Returns None if not found."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Set a value by key."""
        ...

    async def delete(self, key: str) -> None:
        """Delete a value by key."""
        ...
