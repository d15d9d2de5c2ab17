# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for toolchain discovery."""

from __future__ import annotations

import sys

import pytest

from compilekit.core.models import Language
from compilekit.toolchain import NOT_INSTALLED, extract_version, languages_for, probe_all, probe_command, probe_toolchain


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("gcc (GCC) 13.2.1 20230801", "13.2.1"),
        ("javac 21.0.2", "21.0.2"),
        ("go version go1.22.1 linux/amd64", "1.22.1"),
        ("v20.11.0", "20.11.0"),
        ("no digits here", None),
        ("", None),
    ],
)
def test_extract_version(text: str, expected: str | None) -> None:
    assert extract_version(text) == expected


def test_languages_for_command() -> None:
    assert languages_for("gcc") == (Language.C,)
    assert languages_for("python3") == (Language.PYTHON,)
    assert languages_for("unknown") == ()


def test_missing_command_is_not_installed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("compilekit.toolchain.shutil.which", lambda _command: None)

    info = probe_toolchain(Language.RUST)

    assert info.name == "rustc"
    assert not info.installed
    assert info.version == NOT_INSTALLED
    assert info.path is None
    assert info.languages == (Language.RUST,)


def test_probe_current_interpreter() -> None:
    info = probe_toolchain(Language.PYTHON, command=sys.executable)

    assert info.installed
    assert info.version.startswith(f"{sys.version_info.major}.{sys.version_info.minor}")
    assert info.path is not None


def test_probe_failure_is_traced(monkeypatch: pytest.MonkeyPatch) -> None:
    traces: list[str] = []

    def _explode(*_: object, **__: object) -> None:
        raise OSError("exec format error")

    monkeypatch.setattr("compilekit.toolchain.run_command", _explode)

    info = probe_command(sys.executable, debug_logger=traces.append)

    assert not info.installed
    assert info.path is not None
    assert traces


def test_probe_all_checks_each_command_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("compilekit.toolchain.shutil.which", lambda _command: None)

    names = [info.name for info in probe_all()]

    assert len(names) == len(set(names))
    assert set(names) == {language.default_compiler for language in Language}
