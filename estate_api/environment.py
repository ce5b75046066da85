"""Deployment environment detection.

The environment is a pure function of the page location the client runs
under. Outside a browser (no location) the environment is ``"server"``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

from estate_api.types import Environment

logger = logging.getLogger(__name__)

DEV_HOSTS = ("localhost", "127.0.0.1")
DEV_PORT = "8080"

# Hosted-preview providers, matched as hostname substrings.
HOSTED_PREVIEWS: tuple[tuple[str, Environment], ...] = (
    (".fly.dev", "fly"),
    (".netlify.app", "netlify"),
)

DEFAULT_PORTS = ("", "80", "443")


@dataclass(frozen=True)
class PageLocation:
    """The address of the page the client is running for."""

    scheme: str
    hostname: str
    port: str = ""

    @classmethod
    def from_url(cls, url: str) -> "PageLocation":
        parts = urlsplit(url)
        return cls(
            scheme=parts.scheme or "http",
            hostname=parts.hostname or "",
            port=str(parts.port) if parts.port is not None else "",
        )

    @property
    def origin(self) -> str:
        if self.port:
            return f"{self.scheme}://{self.hostname}:{self.port}"
        return f"{self.scheme}://{self.hostname}"


def detect_environment(location: PageLocation | None) -> Environment:
    if location is None:
        return "server"

    if location.hostname in DEV_HOSTS or location.port == DEV_PORT:
        return "development"

    for suffix, environment in HOSTED_PREVIEWS:
        if suffix in location.hostname:
            return environment

    return "production"


def resolve_base_url(location: PageLocation | None, override: str | None = None) -> str:
    """Resolve the API base URL.

    An explicit override always wins. Development and hosted previews route
    ``/api/*`` through a proxy on the same origin, so the base stays empty.
    Production on a non-default port targets the same host on its default
    port.

    Args:
        location: Page location, or None outside a browser.
        override: Explicitly configured base URL.

    Returns:
        The base URL, or "" for same-origin requests.
    """
    if override:
        logger.debug("Using configured API base URL: %s", override)
        return override

    environment = detect_environment(location)
    logger.debug("Detected environment: %s (%s)", environment, location)

    if environment == "production" and location is not None:
        if location.port not in DEFAULT_PORTS:
            return f"{location.scheme}://{location.hostname}"

    return ""
