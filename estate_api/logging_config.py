"""Logging setup for estate-api.

Every module logs through ``logging.getLogger(__name__)``, so all loggers
live under the ``estate_api`` namespace. The library installs no handler on
import; applications and the CLI call ``configure_logging()``.

Log levels:
    DEBUG   - URL resolution, environment detection
    INFO    - retries, fallback transport use
    WARNING - non-2xx responses, preview hosts, degraded responses
"""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_ROOT_NAME = "estate_api"


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a stdout handler to the ``estate_api`` logger.

    Safe to call multiple times; later calls only change the level.
    """
    root = logging.getLogger(_ROOT_NAME)
    root.setLevel(level)
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)
    root.propagate = False
