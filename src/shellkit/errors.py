"""Errors raised when a shell command does not produce usable output."""

from __future__ import annotations

UNKNOWN_ERROR_MESSAGE = "Unknown error"


class ShellError(RuntimeError):
    """Base class for failures reported by :class:`shellkit.Shell`."""


class OutputDataError(ShellError):
    """Raised when a command exits with 0 but its output is not valid text."""

    def __init__(self) -> None:
        super().__init__("Invalid or empty shell output.")

    def __reduce__(self) -> tuple[type[OutputDataError], tuple[()]]:
        return (self.__class__, ())


class GenericShellError(ShellError):
    """Raised when a command exits with a non-zero status.

    Attributes:
        code: Exit status reported for the child process.
        message: Trimmed standard error text, or ``"Unknown error"`` when it
            could not be decoded.
    """

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{message} (code: {code})")

    def __reduce__(self) -> tuple[type[GenericShellError], tuple[int, str]]:
        return (self.__class__, (self.code, self.message))
