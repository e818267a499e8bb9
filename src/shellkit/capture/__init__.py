"""Concurrent capture of a child process's output and error streams."""

from shellkit.capture.base import StreamCapture, StreamDrainer, StreamKind
from shellkit.capture.blocking import BlockingDrainer
from shellkit.capture.push import SelectorDrainer
from shellkit.capture.strategy import DRAIN_STRATEGIES, select_drainer, supports_push

__all__ = [
    "DRAIN_STRATEGIES",
    "BlockingDrainer",
    "SelectorDrainer",
    "StreamCapture",
    "StreamDrainer",
    "StreamKind",
    "select_drainer",
    "supports_push",
]
