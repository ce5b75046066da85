"""Request URL construction."""

from __future__ import annotations

import json
import logging
import re
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

# Listing endpoints that are scoped by the user's saved location.
_LOCATION_SCOPED = re.compile(r"^(properties|ads)(\b|/)")

DEFAULT_RADIUS_KM = "10"


def strip_leading_slash(endpoint: str) -> str:
    return endpoint[1:] if endpoint.startswith("/") else endpoint


def build_url(endpoint: str, base_url: str = "") -> str:
    """Build the request URL for a logical endpoint.

    Args:
        endpoint: Path after ``/api/``; one leading slash is ignored.
        base_url: Configured base URL, "" for same-origin requests.

    Returns:
        ``base/endpoint`` when the base already ends with ``/api``,
        ``base/api/endpoint`` otherwise, ``/api/endpoint`` without a base.
    """
    clean = strip_leading_slash(endpoint)
    if not base_url:
        return f"/api/{clean}"
    if base_url.endswith("/api"):
        return f"{base_url}/{clean}"
    return f"{base_url}/api/{clean}"


def _parse_preference(preference: Any) -> dict[str, Any] | None:
    if isinstance(preference, str):
        try:
            preference = json.loads(preference)
        except json.JSONDecodeError:
            return None
    return preference if isinstance(preference, dict) else None


def attach_location(url: str, endpoint: str, preference: Any) -> str:
    """Scope listing requests to the saved location preference.

    Coordinates (``lat``/``lng``/``radiusKm``) take precedence over
    ``cityId``. Query parameters already on the URL are kept.
    """
    if not _LOCATION_SCOPED.match(strip_leading_slash(endpoint)):
        return url

    loc = _parse_preference(preference)
    if not loc:
        return url

    parts = urlsplit(url)
    pairs = parse_qsl(parts.query, keep_blank_values=True)
    existing = {key for key, _ in pairs}
    added: dict[str, str] = {}

    coords = loc.get("coords")
    lat = coords.get("lat") if isinstance(coords, dict) else None
    lng = coords.get("lng") if isinstance(coords, dict) else None
    if _is_number(lat) and _is_number(lng):
        added = {"lat": str(lat), "lng": str(lng), "radiusKm": DEFAULT_RADIUS_KM}
    elif loc.get("cityId"):
        added = {"cityId": str(loc["cityId"])}

    added = {k: v for k, v in added.items() if k not in existing}
    if not added:
        return url

    pairs.extend(added.items())
    scoped = urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(pairs), parts.fragment))
    logger.debug("Scoped %s to location: %s", endpoint, added)
    return scoped


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
