"""Sinks that receive captured output as the child process produces it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Callable, Protocol, runtime_checkable

_STANDARD_FDS = frozenset({0, 1, 2})


@runtime_checkable
class ShellDataHandler(Protocol):
    """Receives chunks of a captured stream.

    ``handle`` is called each time new bytes are read from the stream. ``end``
    is called once after the child has exited and the stream is drained.
    Both are called while the capture lock is held, so implementations must
    not block.
    """

    def handle(self, data: bytes) -> None:
        """Consume one chunk of stream data."""

    def end(self) -> None:
        """Release resources once no more chunks will arrive."""

        return None


class FileHandler:
    """Writes every chunk to a binary file object.

    The file is closed on ``end`` unless it is one of the process's standard
    streams.
    """

    def __init__(self, file: BinaryIO) -> None:
        self._file = file

    @property
    def file(self) -> BinaryIO:
        return self._file

    def handle(self, data: bytes) -> None:
        self._file.write(data)
        self._file.flush()

    def end(self) -> None:
        if _is_standard_stream(self._file):
            return
        self._file.close()


@dataclass(frozen=True)
class CallbackHandler:
    """Adapts plain callables to :class:`ShellDataHandler`.

    Attributes:
        on_data: Called with each chunk.
        on_end: Optional callable invoked at the end of the run.
    """

    on_data: Callable[[bytes], None]
    on_end: Callable[[], None] | None = None

    def handle(self, data: bytes) -> None:
        self.on_data(data)

    def end(self) -> None:
        if self.on_end is not None:
            self.on_end()


def _is_standard_stream(file: BinaryIO) -> bool:
    try:
        return file.fileno() in _STANDARD_FDS
    except (AttributeError, OSError, ValueError):
        return False
