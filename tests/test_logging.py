# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the console logging helpers."""

from __future__ import annotations

import pytest
from rich.console import Console

from compilekit.cli.shared import build_debug_logger
from compilekit.core.logging import emoji, fail, info, ok, section, warn


def test_plain_messages_are_printed(capsys: pytest.CaptureFixture[str]) -> None:
    info("starting", use_color=False)
    ok("done", use_color=False)
    warn("careful", use_color=False)
    fail("broken", use_color=False)

    assert capsys.readouterr().out.splitlines() == ["starting", "done", "careful", "broken"]


def test_section_without_colour(capsys: pytest.CaptureFixture[str]) -> None:
    section("Diagnostics", use_color=False)

    assert "--- Diagnostics ---" in capsys.readouterr().out


def test_emoji_toggle() -> None:
    assert emoji("✅", True) == "✅"
    assert emoji("✅", False) == ""


def test_debug_logger_is_optional() -> None:
    console = Console(record=True, width=120)

    assert build_debug_logger(console, enabled=False) is None
    logger = build_debug_logger(console, enabled=True)
    assert logger is not None
    logger("launching gcc")

    assert "[debug] launching gcc" in console.export_text()
