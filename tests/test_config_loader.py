# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configuration discovery and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from compilekit.config.loader import discover_config_path, load_config
from compilekit.config.models import DEFAULT_TIMEOUT_SECONDS, Config, ConfigError


def test_defaults_when_no_configuration(tmp_path: Path) -> None:
    config = load_config(root=tmp_path)

    assert config == Config()
    assert config.execution.timeout_s == DEFAULT_TIMEOUT_SECONDS
    assert config.execution.max_concurrency >= 1


def test_dedicated_file_is_loaded(tmp_path: Path) -> None:
    (tmp_path / "compilekit.toml").write_text(
        "[execution]\nmax_concurrency = 2\ntimeout_s = 45\n\n[output]\nquiet = true\n",
        encoding="utf-8",
    )

    config = load_config(root=tmp_path)

    assert config.execution.max_concurrency == 2
    assert config.execution.timeout_s == 45.0
    assert config.output.quiet


def test_pyproject_tool_section_is_loaded(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n[tool.compilekit.analysis]\nenabled = false\n',
        encoding="utf-8",
    )

    config = load_config(root=tmp_path)

    assert not config.analysis.enabled


def test_pyproject_without_section_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")

    assert discover_config_path(tmp_path) is None
    assert load_config(root=tmp_path) == Config()


def test_dedicated_file_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "compilekit.toml").write_text("[execution]\nmax_concurrency = 3\n", encoding="utf-8")
    (tmp_path / "pyproject.toml").write_text("[tool.compilekit.execution]\nmax_concurrency = 7\n", encoding="utf-8")

    assert discover_config_path(tmp_path) == tmp_path / "compilekit.toml"
    assert load_config(root=tmp_path).execution.max_concurrency == 3


def test_invalid_toml_raises(tmp_path: Path) -> None:
    (tmp_path / "compilekit.toml").write_text("[execution\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="not valid TOML"):
        load_config(root=tmp_path)


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    (tmp_path / "compilekit.toml").write_text("[execution]\nworkers = 4\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(root=tmp_path)


def test_out_of_range_values_are_rejected(tmp_path: Path) -> None:
    (tmp_path / "compilekit.toml").write_text("[execution]\nmax_concurrency = 0\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(root=tmp_path)


def test_missing_explicit_path_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.toml")


def test_to_dict_is_json_compatible() -> None:
    data = Config().to_dict()

    assert data["output"] == {"color": True, "emoji": True, "quiet": False}
