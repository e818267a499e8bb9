from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from shellkit.errors import GenericShellError
from shellkit.handlers import CallbackHandler, FileHandler, ShellDataHandler
from shellkit.shell import Shell

posix_only = pytest.mark.skipif(os.name != "posix", reason="Requires push-style draining")


class RecordingHandler:
    def __init__(self) -> None:
        self.events: list[bytes | str] = []

    def handle(self, data: bytes) -> None:
        self.events.append(data)

    def end(self) -> None:
        self.events.append("end")

    @property
    def data(self) -> bytes:
        return b"".join(event for event in self.events if isinstance(event, bytes))


def test_handlers_satisfy_protocol() -> None:
    assert isinstance(RecordingHandler(), ShellDataHandler)
    assert isinstance(CallbackHandler(on_data=lambda data: None), ShellDataHandler)
    assert isinstance(FileHandler(io.BytesIO()), ShellDataHandler)


def test_callback_handler_end_defaults_to_noop() -> None:
    received: list[bytes] = []
    handler = CallbackHandler(on_data=received.append)

    handler.handle(b"chunk")
    handler.end()

    assert received == [b"chunk"]


def test_file_handler_writes_and_closes(tmp_path: Path) -> None:
    target = (tmp_path / "out.bin").open("wb")
    handler = FileHandler(target)

    handler.handle(b"abc")
    handler.handle(b"def")
    handler.end()

    assert target.closed
    assert (tmp_path / "out.bin").read_bytes() == b"abcdef"


def test_file_handler_leaves_standard_streams_open() -> None:
    class StandardOutput(io.BytesIO):
        def fileno(self) -> int:
            return 1

    stream = StandardOutput()
    handler = FileHandler(stream)

    handler.handle(b"visible")
    handler.end()

    assert not stream.closed
    assert stream.getvalue() == b"visible"


@posix_only
def test_output_handler_receives_every_chunk_then_end() -> None:
    handler = RecordingHandler()
    shell = Shell()
    shell.output_handler = handler

    output = shell.run("echo Hello world!")

    assert output == "Hello world!"
    assert handler.data == b"Hello world!\n"
    assert handler.events[-1] == "end"
    assert handler.events.count("end") == 1


@posix_only
def test_output_handler_matches_accumulated_large_output() -> None:
    handler = RecordingHandler()
    shell = Shell()
    shell.output_handler = handler

    output = shell.run("yes chunk | head -n 40000")

    assert handler.data == ("chunk\n" * 40000).encode()
    assert handler.data.decode().strip("\n") == output
    assert handler.events.count("end") == 1
    assert handler.events[-1] == "end"


@posix_only
def test_error_handler_receives_stderr(tmp_path: Path) -> None:
    path = tmp_path / "stderr.log"
    target = path.open("wb")
    shell = Shell()
    shell.error_handler = FileHandler(target)

    with pytest.raises(GenericShellError) as exc_info:
        shell.run("cd /invalid-directory")

    assert target.closed
    assert path.read_text(encoding="utf-8").strip("\n") == exc_info.value.message


@posix_only
def test_handlers_are_ended_on_success_without_output() -> None:
    output_handler = RecordingHandler()
    error_handler = RecordingHandler()
    shell = Shell()
    shell.output_handler = output_handler
    shell.error_handler = error_handler

    assert shell.run("true") == ""

    assert output_handler.events == ["end"]
    assert error_handler.events == ["end"]


@posix_only
def test_handler_failure_propagates_from_run(tmp_path: Path) -> None:
    def explode(data: bytes) -> None:
        raise RuntimeError("sink failed")

    output_ends: list[int] = []
    error_target = (tmp_path / "stderr.log").open("wb")
    shell = Shell()
    shell.output_handler = CallbackHandler(on_data=explode, on_end=lambda: output_ends.append(1))
    shell.error_handler = FileHandler(error_target)

    with pytest.raises(RuntimeError, match="sink failed"):
        shell.run("echo data")

    assert output_ends == [1]
    assert error_target.closed
