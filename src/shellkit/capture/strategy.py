"""Selection of the draining strategy for the current platform."""

from __future__ import annotations

import os
from typing import Final

from shellkit.capture.base import StreamDrainer
from shellkit.capture.blocking import BlockingDrainer
from shellkit.capture.push import SelectorDrainer

DRAIN_STRATEGIES: Final[tuple[str, ...]] = ("auto", "push", "blocking")


def supports_push() -> bool:
    """Return True if pipes can be watched with readability notifications."""

    return os.name == "posix"


def select_drainer(strategy: str = "auto") -> StreamDrainer:
    """Return a drainer for the named strategy.

    Args:
        strategy: ``"push"``, ``"blocking"``, or ``"auto"`` to pick push-style
            draining on POSIX and the blocking fallback elsewhere.

    Returns:
        A new StreamDrainer instance.

    Raises:
        ValueError: If the strategy is unknown or push-style draining is
            requested on a platform without pipe readability notifications.
    """

    normalized = strategy.strip().lower()
    if normalized not in DRAIN_STRATEGIES:
        raise ValueError(
            f"Unknown drain strategy: {strategy!r} (expected one of {', '.join(DRAIN_STRATEGIES)})"
        )
    if normalized == "auto":
        normalized = "push" if supports_push() else "blocking"
    if normalized == "push":
        if not supports_push():
            raise ValueError("Push-style draining requires POSIX pipes.")
        return SelectorDrainer()
    return BlockingDrainer()
