"""Response normalization."""

from __future__ import annotations

import json
from typing import Any

from estate_api.types import Envelope, RawResponse


def parse_body(body: bytes | None) -> Any:
    """Parse a buffered body; never raises.

    Returns the decoded JSON value, ``{"raw": text}`` when the text is not
    JSON, or ``{}`` when the body is empty or could not be read. Invalid UTF-8
    bytes are replaced.
    """
    if body is None:
        return {}
    text = body.decode("utf-8", errors="replace")
    if not text.strip():
        return {}
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return {"raw": text}


def normalize(raw: RawResponse) -> Envelope:
    return Envelope.from_status(raw.status, parse_body(raw.body))
