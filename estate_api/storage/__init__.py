"""Local storage backends for the token and user preferences."""

from estate_api.storage.base import AUTH_TOKEN_KEY, LOCATION_KEY, TOKEN_KEY, Storage
from estate_api.storage.memory import MemoryStorage
from estate_api.storage.sqlite import SQLiteStorage

__all__ = [
    "Storage",
    "MemoryStorage",
    "SQLiteStorage",
    "TOKEN_KEY",
    "AUTH_TOKEN_KEY",
    "LOCATION_KEY",
]
