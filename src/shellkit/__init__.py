"""shellkit: run shell commands and capture their output."""

from shellkit.capture import (
    BlockingDrainer,
    SelectorDrainer,
    StreamCapture,
    StreamDrainer,
    StreamKind,
    select_drainer,
)
from shellkit.config import ShellConfig, config_to_dict, load_config
from shellkit.errors import GenericShellError, OutputDataError, ShellError
from shellkit.handlers import CallbackHandler, FileHandler, ShellDataHandler
from shellkit.shell import Invocation, Shell
from shellkit.util.logging import get_logger

__all__ = [
    "BlockingDrainer",
    "CallbackHandler",
    "FileHandler",
    "GenericShellError",
    "Invocation",
    "OutputDataError",
    "SelectorDrainer",
    "Shell",
    "ShellConfig",
    "ShellDataHandler",
    "ShellError",
    "StreamCapture",
    "StreamDrainer",
    "StreamKind",
    "config_to_dict",
    "get_logger",
    "load_config",
    "select_drainer",
]
