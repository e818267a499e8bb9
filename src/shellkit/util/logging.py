"""Loggers for shellkit.

The library only emits records; handlers and levels are left to the
application.
"""

from __future__ import annotations

import logging

LOGGER_NAMESPACE = "shellkit"


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the ``shellkit`` namespace."""

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
