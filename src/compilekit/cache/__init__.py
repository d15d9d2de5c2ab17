# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Caching helpers."""

from __future__ import annotations

from .in_memory import CacheInfo, TTLCache, memoize

__all__ = ["CacheInfo", "TTLCache", "memoize"]
