"""Push-style draining driven by pipe readability notifications."""

from __future__ import annotations

import functools
import os
import selectors
import subprocess
import threading
from typing import IO

from shellkit.capture.base import StreamCapture, StreamDrainer, StreamKind

CHUNK_SIZE = 64 * 1024


class SelectorDrainer(StreamDrainer):
    """Deliver chunks to the capture as soon as the child writes them.

    A pump thread waits on a selector with one readability callback per pipe
    while the calling thread waits for the child to exit. Handlers see every
    chunk as it arrives and get ``end()`` once both pipes are closed.
    Requires POSIX pipes.
    """

    incremental = True

    def drain(self, process: subprocess.Popen[bytes], capture: StreamCapture) -> int:
        if process.stdout is None or process.stderr is None:
            raise ValueError("Process must be started with stdout and stderr pipes.")

        pump = _SelectorPump(capture)
        pump.register(StreamKind.OUTPUT, process.stdout)
        pump.register(StreamKind.ERROR, process.stderr)
        thread = threading.Thread(target=pump.run, name="shellkit-drain", daemon=True)
        thread.start()
        try:
            exit_code = process.wait()
        finally:
            thread.join()
            pump.close()
            capture.finish()

        if pump.error is not None:
            raise pump.error
        return exit_code


class _SelectorPump:
    """Dispatches readability events to per-pipe callbacks until EOF."""

    def __init__(self, capture: StreamCapture) -> None:
        self._capture = capture
        self._selector = selectors.DefaultSelector()
        self.error: Exception | None = None

    def register(self, kind: StreamKind, pipe: IO[bytes]) -> None:
        callback = functools.partial(self._on_readable, kind)
        self._selector.register(pipe, selectors.EVENT_READ, callback)

    def run(self) -> None:
        try:
            while self._selector.get_map():
                for key, _events in self._selector.select():
                    key.data(key.fileobj)
        except Exception as exc:
            # Closing the pipes lets the child exit so the waiting thread can
            # re-raise the failure.
            self.error = exc
            self._unregister_all(close=True)

    def close(self) -> None:
        self._unregister_all(close=False)
        self._selector.close()

    def _on_readable(self, kind: StreamKind, pipe: IO[bytes]) -> None:
        chunk = os.read(pipe.fileno(), CHUNK_SIZE)
        if not chunk:
            self._selector.unregister(pipe)
            return
        self._capture.append(kind, chunk)

    def _unregister_all(self, *, close: bool) -> None:
        mapping = self._selector.get_map()
        if mapping is None:
            return
        for key in list(mapping.values()):
            self._selector.unregister(key.fileobj)
            if close:
                key.fileobj.close()
