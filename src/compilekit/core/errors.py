# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception types raised by the compilation engine."""

from __future__ import annotations

from .models import TaskStatus


class TaskNotFoundError(KeyError):
    """Raised when a task id is not known to the scheduler."""

    def __init__(self, task_id: str) -> None:
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"Unknown task id: {self.task_id}"


class InvalidTransitionError(RuntimeError):
    """Raised when a status change would break the task lifecycle."""

    def __init__(self, task_id: str, current: TaskStatus, target: TaskStatus) -> None:
        super().__init__(f"Task {task_id} cannot move from {current.value} to {target.value}")
        self.task_id = task_id
        self.current = current
        self.target = target


__all__ = ["InvalidTransitionError", "TaskNotFoundError"]
