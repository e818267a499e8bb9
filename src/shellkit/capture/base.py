"""Stream capture base types and the drainer interface."""

from __future__ import annotations

import subprocess
import threading
from abc import ABC, abstractmethod
from enum import Enum

from shellkit.handlers import ShellDataHandler


class StreamKind(str, Enum):
    """The two child streams captured for every run."""

    OUTPUT = "stdout"
    ERROR = "stderr"


class StreamCapture:
    """Accumulates the output and error bytes of a single invocation.

    Every mutation of the accumulators, every handler call and the final
    snapshot go through one lock, so appends within a stream keep the order
    in which the child wrote them and the snapshot never overlaps a write.
    """

    def __init__(
        self,
        output_handler: ShellDataHandler | None = None,
        error_handler: ShellDataHandler | None = None,
    ) -> None:
        """Initialize empty accumulators.

        Args:
            output_handler: Optional sink receiving standard output chunks.
            error_handler: Optional sink receiving standard error chunks.
        """

        self._lock = threading.Lock()
        self._buffers: dict[StreamKind, bytearray] = {
            StreamKind.OUTPUT: bytearray(),
            StreamKind.ERROR: bytearray(),
        }
        self._handlers: dict[StreamKind, ShellDataHandler | None] = {
            StreamKind.OUTPUT: output_handler,
            StreamKind.ERROR: error_handler,
        }
        self._finished = False

    def append(self, kind: StreamKind, chunk: bytes) -> None:
        """Append a chunk and forward it to the stream's handler."""

        with self._lock:
            self._buffers[kind].extend(chunk)
            handler = self._handlers[kind]
            if handler is not None:
                handler.handle(chunk)

    def store(self, kind: StreamKind, data: bytes) -> None:
        """Append data without forwarding it to a handler."""

        with self._lock:
            self._buffers[kind].extend(data)

    def finish(self) -> None:
        """Signal the end of the run to both handlers, once."""

        with self._lock:
            if self._finished:
                return
            self._finished = True
            for kind in (StreamKind.OUTPUT, StreamKind.ERROR):
                handler = self._handlers[kind]
                if handler is not None:
                    handler.end()

    def snapshot(self) -> tuple[bytes, bytes]:
        """Return the accumulated ``(output, error)`` bytes."""

        with self._lock:
            return (
                bytes(self._buffers[StreamKind.OUTPUT]),
                bytes(self._buffers[StreamKind.ERROR]),
            )


class StreamDrainer(ABC):
    """Strategy for reading both child pipes while waiting for exit."""

    #: Whether handlers receive chunks while the child is running.
    incremental: bool = False

    @abstractmethod
    def drain(self, process: subprocess.Popen[bytes], capture: StreamCapture) -> int:
        """Drain the process's stdout and stderr pipes into ``capture``.

        Args:
            process: A child started with ``stdout=PIPE`` and ``stderr=PIPE``.
            capture: Accumulators for this run.

        Returns:
            The exit status of the child. On return both pipes have reached
            end of file and no further writes to ``capture`` are pending.
        """
