"""Client configuration.

The configuration is computed once by ``create_config()`` and injected into
the executor. It is immutable; build a new one to change it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

from estate_api.environment import PageLocation, detect_environment, resolve_base_url
from estate_api.types import Environment, TransportHint

logger = logging.getLogger(__name__)

# Restrictive embedded preview host (instrumented fetch, no backend proxy).
PREVIEW_HOST_MARKER = "projects.builder.codes"

DEFAULT_ORIGIN = "http://localhost"

_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class ApiConfig:
    """Resolved transport configuration.

    Attributes:
        base_url: API base URL ("" = same origin).
        timeout: Default request timeout in seconds.
        retry_attempts: Retries after the first attempt for transient failures.
        retry_delay: Constant delay between retries in seconds.
        environment: Deployment environment tag.
        origin: Origin that relative URLs are resolved against.
        preview: Running inside a restrictive preview host.
        slow_timeout: Minimum timeout for known slow read endpoints.
        extended_timeout: Minimum timeout for uploads and admin writes.
        preview_timeout: Upper bound on timeouts in a preview host without a base URL.
        degrade_to_empty: Answer allow-listed list endpoints with an empty
            list when every transport failed.
        transport: Default transport hint.

    Example:
        config = create_config(PageLocation.from_url("https://example.fly.dev"))
        config = create_config(base_url="https://api.example.com/api")
    """

    base_url: str = ""
    timeout: float = 18.0
    retry_attempts: int = 3
    retry_delay: float = 1.2
    environment: Environment = "server"
    origin: str = DEFAULT_ORIGIN

    preview: bool = False
    slow_timeout: float = 25.0
    extended_timeout: float = 45.0
    preview_timeout: float = 8.0

    degrade_to_empty: bool = True
    transport: TransportHint | None = None


def create_config(
    location: PageLocation | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ApiConfig:
    """Build the configuration for a page location.

    Args:
        location: Page location. Falls back to the API_PAGE_URL env var;
            None means the client runs outside a browser.
        environ: Environment variables (defaults to os.environ).
        **overrides: ApiConfig fields to set explicitly.

    Returns:
        The resolved ApiConfig.
    """
    env = os.environ if environ is None else environ

    if location is None and env.get("API_PAGE_URL"):
        location = PageLocation.from_url(env["API_PAGE_URL"])

    environment = detect_environment(location)
    base_url = resolve_base_url(location, env.get("API_BASE_URL"))

    transport = env.get("API_TRANSPORT") or None
    if transport not in (None, "primary", "fallback"):
        raise ValueError(f"Unknown API_TRANSPORT: {transport}. Available: primary, fallback")

    config = ApiConfig(
        base_url=base_url,
        timeout=10.0 if environment == "development" else 18.0,
        environment=environment,
        origin=location.origin if location is not None else DEFAULT_ORIGIN,
        preview=location is not None and PREVIEW_HOST_MARKER in location.hostname,
        degrade_to_empty=env.get("API_DEGRADE_TO_EMPTY", "1").lower() not in _FALSE_VALUES,
        transport=transport,
    )
    if overrides:
        config = replace(config, **overrides)

    if config.preview and not config.base_url:
        logger.warning(
            "Running inside a preview host without API_BASE_URL; using relative "
            "/api/* requests with reduced timeouts. Set API_BASE_URL for reliable operation."
        )

    return config
