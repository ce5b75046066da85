"""In-process local storage."""

from __future__ import annotations


class MemoryStorage:
    """Local storage held in a dict, for scripts and testing.

    Values are stored as strings, the way browser local storage keeps them.
    Data is lost when the process exits.

    Example:
        storage = MemoryStorage({"token": "abc"})
        api = create_api(storage=storage)
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = {key: str(value) for key, value in (initial or {}).items()}

    async def get(self, key: str) -> str | None:
        return self._items.get(key)

    async def set(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    async def delete(self, key: str) -> None:
        self._items.pop(key, None)

    async def clear(self) -> None:
        """Remove every item, as on logout."""
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
