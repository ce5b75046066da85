"""estate-api: async client for the real-estate classifieds REST API."""

from __future__ import annotations

from estate_api.config import ApiConfig, create_config
from estate_api.direct import DirectApi
from estate_api.endpoints import AdminApi, AuthApi
from estate_api.environment import PageLocation, detect_environment, resolve_base_url
from estate_api.errors import (
    ApiError,
    EstateApiError,
    NetworkError,
    RequestTimeoutError,
)
from estate_api.executor import RequestExecutor
from estate_api.facade import ApiClient
from estate_api.policy import DegradePolicy
from estate_api.retry import RetryPolicy
from estate_api.storage import MemoryStorage, SQLiteStorage, Storage
from estate_api.transport import HTTPTransport, get_default_transports
from estate_api.types import Envelope, FormPayload, RequestOptions
from estate_api.urls import build_url


def create_executor(
    config: ApiConfig | None = None,
    storage: Storage | None = None,
    *,
    primary: HTTPTransport | None = None,
    fallback: HTTPTransport | None = None,
    degrade: DegradePolicy | None = None,
) -> RequestExecutor:
    """Wire a RequestExecutor with default transports.

    Args:
        config: Resolved configuration. Defaults to ``create_config()``.
        storage: Local storage holding the token. Defaults to MemoryStorage.
        primary: Primary transport (default: aiohttp).
        fallback: Fallback transport (default: httpx).
        degrade: Degrade-to-empty policy (default: from config).

    Returns:
        A RequestExecutor.
    """
    if primary is None or fallback is None:
        default_primary, default_fallback = get_default_transports()
        primary = primary or default_primary
        fallback = fallback or default_fallback

    return RequestExecutor(
        config or create_config(),
        storage if storage is not None else MemoryStorage(),
        primary,
        fallback,
        degrade=degrade,
    )


def create_api(
    config: ApiConfig | None = None,
    storage: Storage | None = None,
    **kwargs,
) -> ApiClient:
    """Create the typed get/post/put/delete client.

    Example:
        >>> from estate_api import create_api, create_config, PageLocation
        >>> api = create_api(create_config(PageLocation.from_url("https://homes.example.com")))
        >>> result = await api.get("properties?status=active")
    """
    return ApiClient(create_executor(config, storage, **kwargs))


__all__ = [
    # Factories
    "create_api",
    "create_executor",
    "create_config",
    # Client surface
    "ApiClient",
    "AuthApi",
    "AdminApi",
    "DirectApi",
    "RequestExecutor",
    # Configuration
    "ApiConfig",
    "PageLocation",
    "detect_environment",
    "resolve_base_url",
    "build_url",
    "RetryPolicy",
    "DegradePolicy",
    # Storage
    "Storage",
    "MemoryStorage",
    "SQLiteStorage",
    # Types
    "Envelope",
    "FormPayload",
    "RequestOptions",
    "HTTPTransport",
    # Errors
    "EstateApiError",
    "ApiError",
    "NetworkError",
    "RequestTimeoutError",
]
