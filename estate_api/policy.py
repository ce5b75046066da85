"""Degrade-to-empty policy for read-only endpoints.

When every transport failed, list screens get an empty list and badge
counters get zero instead of an error. The policy only ever applies to GET
requests, after a real transport failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from estate_api.types import Envelope
from estate_api.urls import strip_leading_slash

EMPTY_LIST_PREFIXES = ("properties", "plans", "banners", "ads")

ZERO_COUNTERS: dict[str, dict[str, Any]] = {
    "chat/unread-count": {"success": True, "data": {"totalUnread": 0}},
    "notifications/unread-count": {"success": True, "data": {"unread": 0}},
}


def _path(endpoint: str) -> str:
    return strip_leading_slash(endpoint).split("?", 1)[0]


@dataclass(frozen=True)
class DegradePolicy:
    """Decides which failed requests settle with a synthetic success.

    Example:
        policy = DegradePolicy(list_prefixes=("properties",))
        policy.applies("properties?status=active", "GET")  # True
        policy.applies("properties", "POST")               # False
    """

    enabled: bool = True
    list_prefixes: tuple[str, ...] = EMPTY_LIST_PREFIXES
    counters: dict[str, dict[str, Any]] = field(default_factory=lambda: dict(ZERO_COUNTERS))

    def _counter_body(self, endpoint: str) -> dict[str, Any] | None:
        path = _path(endpoint)
        for suffix, body in self.counters.items():
            if path.endswith(suffix):
                return body
        return None

    def _is_list(self, endpoint: str) -> bool:
        path = _path(endpoint)
        return any(
            path == prefix or path.startswith(prefix + "/")
            for prefix in self.list_prefixes
        )

    def applies(self, endpoint: str, method: str) -> bool:
        if not self.enabled or method.upper() != "GET":
            return False
        return self._counter_body(endpoint) is not None or self._is_list(endpoint)

    def envelope_for(self, endpoint: str) -> Envelope:
        body = self._counter_body(endpoint)
        if body is None:
            body = {"success": True, "data": []}
        return Envelope(ok=True, status=200, data=body)

