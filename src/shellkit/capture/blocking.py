"""Blocking fallback that reads both pipes to completion."""

from __future__ import annotations

import subprocess

from shellkit.capture.base import StreamCapture, StreamDrainer, StreamKind


class BlockingDrainer(StreamDrainer):
    """Read both streams until closed while waiting for the child.

    Used where pipes cannot be watched for readability (Windows). Handlers
    are never called: only the final accumulated buffers are available.
    """

    incremental = False

    def drain(self, process: subprocess.Popen[bytes], capture: StreamCapture) -> int:
        output, error = process.communicate()
        capture.store(StreamKind.OUTPUT, output or b"")
        capture.store(StreamKind.ERROR, error or b"")
        return process.returncode
