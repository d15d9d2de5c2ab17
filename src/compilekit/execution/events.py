# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Output events emitted while a compile task runs.

Within one task the order is always: an :class:`InfoEvent`, zero or more
:class:`OutputLineEvent` records, then exactly one terminal event
(:class:`CompletedEvent` or :class:`ErrorEvent`).
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Literal, TypeAlias

StreamName = Literal["stdout", "stderr"]


@dataclass(frozen=True, slots=True)
class InfoEvent:
    """Informational progress message."""

    message: str


@dataclass(frozen=True, slots=True)
class OutputLineEvent:
    """One raw line of toolchain output, without its trailing newline."""

    line: str
    stream: StreamName = "stdout"


@dataclass(frozen=True, slots=True)
class ErrorEvent:
    """Terminal event for tasks that could not run to a normal exit."""

    message: str


@dataclass(frozen=True, slots=True)
class CompletedEvent:
    """Terminal event for a process that exited on its own."""

    exit_code: int
    success: bool


OutputEvent: TypeAlias = InfoEvent | OutputLineEvent | ErrorEvent | CompletedEvent
OutputListener: TypeAlias = Callable[[OutputEvent], None]


def is_terminal_event(event: OutputEvent) -> bool:
    """Return ``True`` when ``event`` closes a task's event sequence."""

    return isinstance(event, (ErrorEvent, CompletedEvent))


class EventChannel:
    """Thread-safe, replayable event stream for a single task.

    Every observer iterates the full history from the first event, blocking
    until more events arrive, and stops once the channel is closed.
    """

    def __init__(self) -> None:
        self._events: list[OutputEvent] = []
        self._closed = False
        self._condition = threading.Condition()

    def publish(self, event: OutputEvent) -> None:
        """Append ``event``; terminal events close the channel.

        Events published after the channel closed are discarded.
        """

        with self._condition:
            if self._closed:
                return
            self._events.append(event)
            if is_terminal_event(event):
                self._closed = True
            self._condition.notify_all()

    def close(self) -> None:
        """Close the channel without a terminal event."""

        with self._condition:
            self._closed = True
            self._condition.notify_all()

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    def snapshot(self) -> list[OutputEvent]:
        """Return the events published so far."""

        with self._condition:
            return list(self._events)

    def __iter__(self) -> Iterator[OutputEvent]:
        index = 0
        while True:
            with self._condition:
                while index >= len(self._events) and not self._closed:
                    self._condition.wait()
                if index >= len(self._events):
                    return
                event = self._events[index]
            index += 1
            yield event


__all__ = [
    "CompletedEvent",
    "ErrorEvent",
    "EventChannel",
    "InfoEvent",
    "OutputEvent",
    "OutputLineEvent",
    "OutputListener",
    "StreamName",
    "is_terminal_event",
]
