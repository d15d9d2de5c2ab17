# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load :class:`Config` from ``compilekit.toml`` or ``pyproject.toml``."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from .models import Config, ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
DEDICATED_FILENAME: Final[str] = "compilekit.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "compilekit"


def discover_config_path(root: Path) -> Path | None:
    """Return the configuration file that applies to ``root``.

    ``compilekit.toml`` takes precedence; ``pyproject.toml`` is only used when it
    declares a ``[tool.compilekit]`` table.
    """

    dedicated = root / DEDICATED_FILENAME
    if dedicated.is_file():
        return dedicated
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file() and _pyproject_section(_read_toml(pyproject)) is not None:
        return pyproject
    return None


def load_config(path: Path | None = None, *, root: Path | None = None) -> Config:
    """Load and validate configuration.

    Args:
        path: Explicit configuration file. When omitted, ``root`` (defaulting to
            the current directory) is searched with :func:`discover_config_path`.
        root: Directory searched when ``path`` is not supplied.

    Returns:
        Config: Validated configuration; defaults when no file applies.

    Raises:
        ConfigError: If the file is missing, is not valid TOML, or fails validation.
    """

    if path is None:
        path = discover_config_path(root or Path.cwd())
        if path is None:
            return Config()
    elif not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    document = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        document = _pyproject_section(document) or {}
    try:
        return Config.model_validate(document)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration at {path} is not valid TOML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration at {path}: {exc}") from exc


def _pyproject_section(document: Mapping[str, Any]) -> dict[str, Any] | None:
    tool_section = document.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return None
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if not isinstance(section, Mapping):
        return None
    return dict(section)


__all__ = ["discover_config_path", "load_config"]
