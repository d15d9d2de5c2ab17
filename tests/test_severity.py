# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for severity normalisation."""

import pytest

from compilekit.core.severity import ErrorSeverity, is_error_like, severity_from_token


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("error", ErrorSeverity.ERROR),
        ("Fatal", ErrorSeverity.ERROR),
        ("fatal error", ErrorSeverity.ERROR),
        ("warning", ErrorSeverity.WARNING),
        ("WARN", ErrorSeverity.WARNING),
        ("note", ErrorSeverity.INFO),
        ("info", ErrorSeverity.INFO),
        ("bogus", ErrorSeverity.ERROR),
        (None, ErrorSeverity.ERROR),
    ],
)
def test_severity_from_token(token: str | None, expected: ErrorSeverity) -> None:
    assert severity_from_token(token) is expected


def test_severity_from_token_honours_default() -> None:
    assert severity_from_token("", default=ErrorSeverity.WARNING) is ErrorSeverity.WARNING


def test_error_like_severities() -> None:
    assert is_error_like(ErrorSeverity.ERROR)
    assert is_error_like(ErrorSeverity.FATAL)
    assert not is_error_like(ErrorSeverity.WARNING)
    assert not is_error_like(ErrorSeverity.INFO)
