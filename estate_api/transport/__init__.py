"""HTTP transports for estate-api.

Two transports can carry the same logical call:

- AioHTTPTransport (aiohttp) - the primary transport
- HttpxTransport (httpx) - the fallback for environments where the primary
  transport fails

Usage:
    from estate_api.transport import get_default_transports

    primary, fallback = get_default_transports()
    raw = await primary.send(request)
"""

from .base import HTTPTransport

__all__ = ["HTTPTransport", "get_default_transports"]


def get_default_transports() -> tuple[HTTPTransport, HTTPTransport]:
    """Get the (primary, fallback) transport pair.

    Returns:
        tuple: AioHTTPTransport and HttpxTransport.
    """
    from .aiohttp_transport import AioHTTPTransport
    from .httpx_transport import HttpxTransport

    return AioHTTPTransport(), HttpxTransport()
