"""Configuration model and loaders for shellkit."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from shellkit.capture.strategy import DRAIN_STRATEGIES

DEFAULT_INTERPRETER = "/bin/sh"
DEFAULT_ENCODING = "utf-8"
DEFAULT_MAX_WORKERS = 4
CONFIG_FILE_NAMES: tuple[str, ...] = ("shellkit.yaml", "shellkit.yml", "pyproject.toml")


@dataclass(frozen=True)
class ShellConfig:
    """Settings used to build a :class:`shellkit.Shell`.

    Attributes:
        interpreter: Path of the shell interpreter, invoked as ``<path> -c``.
        env: Environment variables overlaid on the parent environment.
        encoding: Text encoding used to decode captured output.
        drain_strategy: ``"auto"``, ``"push"`` or ``"blocking"``.
        max_workers: Size of the worker pool used for background runs.
    """

    interpreter: str = DEFAULT_INTERPRETER
    env: dict[str, str] = field(default_factory=dict)
    encoding: str = DEFAULT_ENCODING
    drain_strategy: str = "auto"
    max_workers: int = DEFAULT_MAX_WORKERS


def load_config(path: Path | None = None) -> ShellConfig:
    """Load shell configuration from disk.

    Args:
        path: Optional path to a configuration file or a directory to search.

    Returns:
        Parsed ShellConfig, or the defaults when no config file exists.
    """

    config_path = _resolve_config_path(path)
    if config_path is None:
        return ShellConfig()

    if config_path.suffix in {".yaml", ".yml"}:
        raw_data = _load_yaml(config_path)
    elif config_path.suffix == ".toml":
        raw_data = _load_toml(config_path)
    else:
        raise ValueError(f"Unsupported config file type: {config_path}")

    return _parse_shell_config(raw_data)


def config_to_dict(config: ShellConfig) -> dict[str, Any]:
    """Serialize a ShellConfig into a plain dictionary."""

    return {
        "interpreter": config.interpreter,
        "env": dict(config.env),
        "encoding": config.encoding,
        "drain_strategy": config.drain_strategy,
        "max_workers": config.max_workers,
    }


def _resolve_config_path(path: Path | None) -> Path | None:
    if path is None:
        candidate_paths = [Path(name) for name in CONFIG_FILE_NAMES]
    elif path.is_dir():
        candidate_paths = [path / name for name in CONFIG_FILE_NAMES]
    else:
        candidate_paths = [path]

    for candidate in candidate_paths:
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    if path.name == "pyproject.toml":
        tool_config = data.get("tool", {}).get("shellkit", {})
        if not isinstance(tool_config, dict):
            raise ValueError("tool.shellkit must be a mapping.")
        return tool_config
    return data


def _load_yaml(path: Path) -> dict[str, Any]:
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError("YAML configuration must be a mapping.")
    return parsed


def _parse_shell_config(raw: dict[str, Any]) -> ShellConfig:
    interpreter = str(raw.get("interpreter", DEFAULT_INTERPRETER)).strip()
    if not interpreter:
        raise ValueError("interpreter must be a non-empty path.")

    env = raw.get("env", {})
    if not isinstance(env, dict):
        raise ValueError("env must be a mapping of variable names to values.")

    drain_strategy = str(raw.get("drain_strategy", "auto")).strip().lower()
    if drain_strategy not in DRAIN_STRATEGIES:
        raise ValueError(f"Unknown drain strategy: {drain_strategy}")

    max_workers = int(raw.get("max_workers", DEFAULT_MAX_WORKERS))
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1.")

    return ShellConfig(
        interpreter=interpreter,
        env={str(key): str(value) for key, value in env.items()},
        encoding=str(raw.get("encoding", DEFAULT_ENCODING)),
        drain_strategy=drain_strategy,
        max_workers=max_workers,
    )
