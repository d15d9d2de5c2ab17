# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-memory caches shared across the project.

``memoize`` wraps zero-or-more-argument factories (console managers, toolchain
lookups). :class:`TTLCache` is a keyed store with a time-to-live, used by the
result analyzer to short-circuit repeated analysis of an unchanged result.
Both guard their state with a short-held :class:`threading.Lock` and never call
user code while the lock is held.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from functools import partial, update_wrapper
from threading import Lock
from typing import Final, Generic, ParamSpec, TypeVar, cast

P = ParamSpec("P")
R = TypeVar("R")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Describe cache state metadata.

    Attributes:
        current_size: Number of cached entries currently stored.
        hits: Number of cache hits that have occurred.
        maxsize: Configured maximum cache capacity, ``None`` when unbounded.
    """

    current_size: int
    hits: int
    maxsize: int | None


def _call_key(args: tuple[object, ...], kwargs: dict[str, object]) -> Hashable:
    parts = (*args, *kwargs.values())
    unhashable = [repr(part) for part in parts if not isinstance(part, Hashable)]
    if unhashable:
        raise TypeError(f"memoized arguments must be hashable, got {', '.join(unhashable)}")
    return (args, tuple(sorted(kwargs.items()))) if kwargs else args


class _Memoized(Generic[P, R]):
    """LRU wrapper around ``func``; the factory runs outside the lock."""

    def __init__(self, func: Callable[P, R], maxsize: int | None) -> None:
        self._func = func
        self._maxsize = maxsize
        self._entries: OrderedDict[Hashable, R] = OrderedDict()
        self._lock = Lock()
        self._hits = 0
        update_wrapper(self, func)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> R:
        key = _call_key(args, kwargs)
        with self._lock:
            if key in self._entries:
                self._hits += 1
                self._entries.move_to_end(key)
                return self._entries[key]
        value = self._func(*args, **kwargs)
        with self._lock:
            self._entries[key] = value
            while self._maxsize is not None and len(self._entries) > self._maxsize:
                self._entries.popitem(last=False)
        return value

    def cache_clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0

    def cache_metadata(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(current_size=len(self._entries), hits=self._hits, maxsize=self._maxsize)


def memoize(maxsize: int | None = None) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Cache a function's results per argument tuple, keeping at most ``maxsize`` entries."""

    return cast(Callable[[Callable[P, R]], Callable[P, R]], partial(_Memoized, maxsize=maxsize))


class TTLCache(Generic[K, V]):
    """Keyed store whose entries expire ``ttl_seconds`` after insertion.

    Lookups return the exact object that was stored, so callers can rely on
    identity for cache hits. Expired entries are evicted lazily on access and
    whenever a new value is stored.
    """

    def __init__(self, ttl_seconds: float, *, clock: Clock = time.monotonic) -> None:
        """Initialise the cache.

        Args:
            ttl_seconds: Lifetime of each entry in seconds.
            clock: Monotonic time source, injectable for tests.
        """

        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: dict[K, tuple[float, V]] = {}
        self._lock = Lock()
        self._hits = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: K) -> V | None:
        """Return the live value stored under ``key`` or ``None``."""

        now = self._clock()
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at < now:
                del self._store[key]
                return None
            self._hits += 1
            return value

    def put(self, key: K, value: V) -> V:
        """Store ``value`` under ``key`` and return it."""

        now = self._clock()
        with self._lock:
            expired = [existing for existing, (expires_at, _) in self._store.items() if expires_at < now]
            for existing in expired:
                del self._store[existing]
            self._store[key] = (now + self._ttl_seconds, value)
        return value

    def clear(self) -> None:
        """Drop every cached entry."""

        with self._lock:
            self._store.clear()
            self._hits = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def cache_metadata(self) -> CacheInfo:
        """Return cache metadata including hit counts."""

        with self._lock:
            return CacheInfo(current_size=len(self._store), hits=self._hits, maxsize=None)


__all__: Final = ["CacheInfo", "Clock", "TTLCache", "memoize"]
