"""Run command strings through a shell interpreter and capture the result."""

from __future__ import annotations

import asyncio
import os
import subprocess
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

from shellkit.capture import StreamCapture, StreamDrainer, select_drainer
from shellkit.config import DEFAULT_ENCODING, DEFAULT_INTERPRETER, DEFAULT_MAX_WORKERS, ShellConfig
from shellkit.errors import UNKNOWN_ERROR_MESSAGE, GenericShellError, OutputDataError
from shellkit.handlers import ShellDataHandler
from shellkit.util.logging import get_logger

# Characters treated as line breaks when trimming output.
NEWLINE_CHARACTERS = "\n\r\x0b\x0c\x85\u2028\u2029"

Completion = Callable[[str | None, Exception | None], None]


@dataclass(frozen=True)
class Invocation:
    """A single prepared run of the interpreter.

    Attributes:
        command: The command string handed to the interpreter.
        argv: Full argument vector, ``[interpreter, "-c", command]``.
        env: Environment for the child, or None to inherit the parent's.
    """

    command: str
    argv: list[str]
    env: dict[str, str] | None


class Shell:
    """Runs commands through a shell interpreter.

    ``interpreter``, ``env``, ``output_handler`` and ``error_handler`` may be
    changed between runs. Each run gets its own child process and capture
    state, so one instance can serve concurrent runs.
    """

    def __init__(
        self,
        interpreter: str = DEFAULT_INTERPRETER,
        env: dict[str, str] | None = None,
        *,
        encoding: str = DEFAULT_ENCODING,
        drainer: StreamDrainer | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """Initialize the shell.

        Args:
            interpreter: Path of the interpreter, default ``/bin/sh``.
            env: Variables overlaid on the parent environment for each run.
            encoding: Encoding used to decode captured output.
            drainer: Stream draining strategy; picked for the platform when
                omitted.
            max_workers: Maximum number of concurrent background runs.
        """

        self.interpreter = interpreter
        self.env: dict[str, str] = dict(env or {})
        self.encoding = encoding
        self.output_handler: ShellDataHandler | None = None
        self.error_handler: ShellDataHandler | None = None
        self._drainer = drainer or select_drainer()
        self._max_workers = max_workers
        self._pool: ThreadPoolExecutor | None = None
        self._pool_lock = threading.Lock()
        self._logger = get_logger(self.__class__.__name__)

    @classmethod
    def from_config(cls, config: ShellConfig) -> Shell:
        """Create a shell from loaded configuration."""

        return cls(
            config.interpreter,
            dict(config.env),
            encoding=config.encoding,
            drainer=select_drainer(config.drain_strategy),
            max_workers=config.max_workers,
        )

    @property
    def incremental(self) -> bool:
        """Return True if handlers receive chunks while commands run."""

        return self._drainer.incremental

    def prepare(self, command: str) -> Invocation:
        """Build the argument vector and environment for ``command``."""

        env: dict[str, str] | None = None
        if self.env:
            env = {**os.environ, **self.env}
        return Invocation(command=command, argv=[self.interpreter, "-c", command], env=env)

    def run(self, command: str) -> str:
        """Run a command and return its output.

        Args:
            command: The command string passed to the interpreter with ``-c``.

        Returns:
            Standard output decoded as text, without leading or trailing
            newlines.

        Raises:
            GenericShellError: If the command exits with a non-zero status.
            OutputDataError: If the command succeeds but its output is not
                valid text.
            OSError: If the interpreter cannot be started.
        """

        invocation = self.prepare(command)
        capture = StreamCapture(self.output_handler, self.error_handler)
        encoding = self.encoding

        start = time.monotonic()
        self._logger.debug("Running shell command: %s", command)
        with subprocess.Popen(
            invocation.argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=invocation.env,
        ) as process:
            exit_code = self._drainer.drain(process, capture)
        self._logger.debug(
            "Shell command finished with exit code %s in %.2fs.",
            exit_code,
            time.monotonic() - start,
        )

        output, error = capture.snapshot()
        return _classify(exit_code, output, error, encoding)

    def run_background(self, command: str, completion: Completion) -> Future[None]:
        """Run a command on a worker thread and report through ``completion``.

        ``completion`` is called exactly once, with ``(output, None)`` on
        success or ``(None, error)`` on failure. Failures to start the
        interpreter are delivered the same way.

        Returns:
            A future that resolves once ``completion`` has returned.
        """

        with self._pool_lock:
            return self._worker_pool().submit(self._run_with_completion, command, completion)

    async def run_async(self, command: str) -> str:
        """Run a command without blocking the event loop."""

        return await asyncio.to_thread(self.run, command)

    def close(self) -> None:
        """Wait for background runs to finish and release the worker pool."""

        with self._pool_lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=True)

    def __enter__(self) -> Shell:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _worker_pool(self) -> ThreadPoolExecutor:
        # Caller holds _pool_lock.
        if self._pool is None:
            self._pool = ThreadPoolExecutor(
                max_workers=self._max_workers,
                thread_name_prefix="shellkit",
            )
        return self._pool

    def _run_with_completion(self, command: str, completion: Completion) -> None:
        try:
            output = self.run(command)
        except Exception as exc:
            completion(None, exc)
            return
        completion(output, None)


def _classify(exit_code: int, output: bytes, error: bytes, encoding: str) -> str:
    if exit_code != 0:
        try:
            message = error.decode(encoding).strip(NEWLINE_CHARACTERS)
        except UnicodeDecodeError:
            message = UNKNOWN_ERROR_MESSAGE
        raise GenericShellError(exit_code, message)

    try:
        text = output.decode(encoding)
    except UnicodeDecodeError as exc:
        raise OutputDataError() from exc
    return text.strip(NEWLINE_CHARACTERS)
