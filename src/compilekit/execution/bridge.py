# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run toolchain processes for compile tasks with streaming, timeouts and cancellation."""

from __future__ import annotations

import os
import signal

# Bandit: processes are launched from argument lists, never through a shell.
import subprocess  # nosec B404
import threading
import time
import uuid
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Final

import psutil

from ..config.models import DEFAULT_MAX_OUTPUT_BYTES, DEFAULT_POLL_INTERVAL_SECONDS, DEFAULT_TIMEOUT_SECONDS
from ..core.logging import DebugLogger, warn
from ..core.models import CompileTask
from .events import CompletedEvent, ErrorEvent, InfoEvent, OutputEvent, OutputLineEvent, OutputListener, StreamName
from .invocation import build_invocation
from .process import TIMEOUT_EXIT_CODE, resolve_executable

START_FAILURE_EXIT_CODE: Final[int] = -1
_READER_JOIN_TIMEOUT: Final[float] = 5.0
# POSIX toolchains get their own session so a kill reaches compiler subprocesses too
_OWN_PROCESS_GROUP: Final[bool] = os.name == "posix"


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of one toolchain process run.

    Attributes:
        process_id: Identifier the process was registered under.
        exit_code: Process exit status; ``-1`` when it never started and
            ``124`` when it was killed by the timeout.
        stdout: Captured standard output (possibly truncated to the newest text).
        stderr: Captured standard error plus any bridge diagnostics.
        success: ``True`` only for a normal exit with status zero.
        execution_time: Wall-clock seconds between launch and exit.
        timed_out: ``True`` when the timeout killed the process.
        cancelled: ``True`` when :meth:`ExecutionBridge.cancel` killed the process.
        memory_usage: Last sampled resident set size of the process tree in bytes.
        peak_memory_usage: Highest resident set size observed in bytes.
    """

    process_id: str
    exit_code: int
    stdout: str
    stderr: str
    success: bool
    execution_time: float
    timed_out: bool = False
    cancelled: bool = False
    memory_usage: int = 0
    peak_memory_usage: int = 0


def read_process_memory(pid: int) -> tuple[int, int]:
    """Return ``(rss, peak)`` in bytes for ``pid`` and its descendants.

    The compiler driver does little work itself, so children such as ``cc1``
    or ``ld`` are included. ``peak`` uses the platform's peak working set where
    psutil reports one and falls back to the current resident size.

    Args:
        pid: Process id of the toolchain's top-level process.

    Returns:
        tuple[int, int]: Resident and peak bytes, or ``(0, 0)`` when the
        process is gone or cannot be inspected.
    """

    try:
        root = psutil.Process(pid)
        members = [root, *root.children(recursive=True)]
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return 0, 0
    rss = peak = 0
    for member in members:
        try:
            info = member.memory_info()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        rss += info.rss
        peak += max(getattr(info, "peak_wset", 0), info.rss)
    return rss, peak


def new_process_id() -> str:
    """Return a fresh process identifier of the form ``proc_<millis>_<hex>``."""

    return f"proc_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


class _CaptureBuffer:
    """Accumulate one output stream, keeping only the newest ``max_bytes``."""

    def __init__(self, max_bytes: int) -> None:
        self._max_bytes = max_bytes
        self._chunks: deque[str] = deque()
        self._size = 0
        self.truncated = False

    def append(self, line: str) -> None:
        self._chunks.append(line)
        self._size += len(line.encode("utf-8", errors="replace"))
        while self._size > self._max_bytes and len(self._chunks) > 1:
            dropped = self._chunks.popleft()
            self._size -= len(dropped.encode("utf-8", errors="replace"))
            self.truncated = True

    def text(self) -> str:
        return "".join(self._chunks)


@dataclass(slots=True)
class _LiveProcess:
    popen: subprocess.Popen[str]
    cancelled: bool = False
    rss: int = 0
    peak_rss: int = 0

    def sample_memory(self) -> None:
        rss, peak = read_process_memory(self.popen.pid)
        if rss:
            self.rss = rss
        self.peak_rss = max(self.peak_rss, peak, rss)


@dataclass(slots=True)
class _RunState:
    listener: OutputListener | None
    listener_failed: bool = False
    emit_lock: threading.Lock = field(default_factory=threading.Lock)

    def emit(self, event: OutputEvent) -> None:
        if self.listener is None:
            return
        with self.emit_lock:
            if self.listener_failed:
                return
            try:
                self.listener(event)
            except Exception as exc:  # listener errors must not break the run
                self.listener_failed = True
                warn(f"Output listener raised {exc!r}; further events are dropped")


class ExecutionBridge:
    """Launch toolchain processes and supervise them until they exit.

    The bridge owns the registry of live processes keyed by process id. Every
    failure mode (missing toolchain, bad working directory, timeout, non-zero
    exit, cancellation) is reported through :class:`ProcessResult`; :meth:`run`
    does not raise for them.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
        debug_logger: DebugLogger | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._timeout = timeout
        self._poll_interval = poll_interval
        self._max_output_bytes = max_output_bytes
        self._debug = debug_logger
        self._clock = clock
        self._lock = threading.Lock()
        self._processes: dict[str, _LiveProcess] = {}
        self._reserved: set[str] = set()
        self._pending_cancels: set[str] = set()
        self._closed = False

    @property
    def timeout(self) -> float:
        return self._timeout

    def build_invocation(self, task: CompileTask) -> list[str]:
        """Return the argument vector used to compile ``task``."""

        return build_invocation(task)

    def active_process_ids(self) -> list[str]:
        """Return the ids of processes that are currently registered."""

        with self._lock:
            return sorted(self._processes)

    def reserve(self, process_id: str | None = None) -> str:
        """Announce a process id that :meth:`run` will use shortly.

        Cancels for a reserved id that has not launched yet are remembered and
        applied as soon as the process starts.

        Args:
            process_id: Id to reserve; a fresh one is generated when omitted.

        Returns:
            str: The reserved id.
        """

        process_id = process_id or new_process_id()
        with self._lock:
            self._reserved.add(process_id)
        return process_id

    def run(
        self,
        task: CompileTask,
        listener: OutputListener | None = None,
        *,
        process_id: str | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Compile ``task`` in a child process and block until it finishes.

        Args:
            task: Task describing the toolchain invocation.
            listener: Optional callback receiving :mod:`compilekit.execution.events`.
            process_id: Identifier to register the process under. Callers that
                may cancel before the process starts should obtain one from
                :meth:`reserve`.
            timeout: Per-run override of the wall-clock budget in seconds.

        Returns:
            ProcessResult: Outcome of the run.
        """

        process_id = process_id or new_process_id()
        budget = self._timeout if timeout is None else timeout
        state = _RunState(listener=listener)
        state.emit(InfoEvent(f"Starting compilation: {task.language.display_name}"))
        started = self._clock()

        try:
            live = self._launch(task, process_id)
        except (OSError, ValueError) as exc:
            self._retire(process_id)
            message = f"Failed to start compilation process: {exc}"
            warn(message)
            state.emit(ErrorEvent(message))
            return ProcessResult(
                process_id=process_id,
                exit_code=START_FAILURE_EXIT_CODE,
                stdout="",
                stderr=message,
                success=False,
                execution_time=self._clock() - started,
            )

        try:
            return self._supervise(live, process_id, state, started, budget)
        finally:
            self._retire(process_id)

    def cancel(self, process_id: str) -> bool:
        """Forcibly terminate the process registered under ``process_id``.

        Returns:
            bool: ``True`` when a live process was killed or a cancel was queued
            for a reserved id; ``False`` for unknown or finished processes.
        """

        with self._lock:
            live = self._processes.get(process_id)
            if live is None:
                if self._closed or process_id not in self._reserved:
                    return False
                self._pending_cancels.add(process_id)
                return True
            live.cancelled = True
        self._kill(live)
        return True

    def shutdown(self) -> None:
        """Kill every live process and refuse further launches."""

        with self._lock:
            self._closed = True
            self._pending_cancels.clear()
            live_processes = list(self._processes.values())
            for live in live_processes:
                live.cancelled = True
        for live in live_processes:
            self._kill(live)

    def _retire(self, process_id: str) -> None:
        with self._lock:
            self._processes.pop(process_id, None)
            self._reserved.discard(process_id)
            self._pending_cancels.discard(process_id)

    def _launch(self, task: CompileTask, process_id: str) -> _LiveProcess:
        argv = build_invocation(task)
        argv[0] = resolve_executable(argv[0])
        cwd = task.cwd
        if not Path(cwd).is_dir():
            raise NotADirectoryError(f"Working directory does not exist: {cwd}")
        env = {**os.environ, **task.environment}
        self._trace(f"[{process_id}] launching {argv!r} in {cwd}")
        with self._lock:
            if self._closed:
                raise ValueError("execution bridge has been shut down")
        popen = subprocess.Popen(  # nosec B603 - argument list, no shell
            argv,
            cwd=str(cwd),
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
            start_new_session=_OWN_PROCESS_GROUP,
        )
        live = _LiveProcess(popen=popen)
        with self._lock:
            self._processes[process_id] = live
            if process_id in self._pending_cancels or self._closed:
                self._pending_cancels.discard(process_id)
                live.cancelled = True
        if live.cancelled:
            self._kill(live)
        return live

    def _supervise(
        self,
        live: _LiveProcess,
        process_id: str,
        state: _RunState,
        started: float,
        budget: float,
    ) -> ProcessResult:
        stdout_buffer = _CaptureBuffer(self._max_output_bytes)
        stderr_buffer = _CaptureBuffer(self._max_output_bytes)
        readers = [
            self._start_reader(live.popen.stdout, "stdout", stdout_buffer, state),
            self._start_reader(live.popen.stderr, "stderr", stderr_buffer, state),
        ]

        deadline = started + budget
        timed_out = False
        live.sample_memory()
        while True:
            try:
                live.popen.wait(timeout=self._poll_interval)
                break
            except subprocess.TimeoutExpired:
                live.sample_memory()
                if self._clock() >= deadline:
                    timed_out = True
                    self._kill(live)
                    live.popen.wait()
                    break
        elapsed = self._clock() - started

        join_deadline = time.monotonic() + _READER_JOIN_TIMEOUT
        for reader in readers:
            reader.join(timeout=max(0.0, join_deadline - time.monotonic()))
        for buffer, name in ((stdout_buffer, "stdout"), (stderr_buffer, "stderr")):
            if buffer.truncated:
                warn(f"[{process_id}] {name} exceeded {self._max_output_bytes} bytes; keeping the newest output")

        stdout = stdout_buffer.text()
        stderr = stderr_buffer.text()
        exit_code = live.popen.returncode

        if timed_out:
            message = f"Compilation timed out after {budget:.1f}s"
            warn(f"[{process_id}] {message}")
            state.emit(ErrorEvent(message))
            return ProcessResult(
                process_id=process_id,
                exit_code=TIMEOUT_EXIT_CODE,
                stdout=stdout,
                stderr=_append_line(stderr, message),
                success=False,
                execution_time=elapsed,
                timed_out=True,
                memory_usage=live.rss,
                peak_memory_usage=live.peak_rss,
            )
        if live.cancelled:
            message = "Compilation cancelled"
            state.emit(ErrorEvent(message))
            return ProcessResult(
                process_id=process_id,
                exit_code=exit_code,
                stdout=stdout,
                stderr=_append_line(stderr, message),
                success=False,
                execution_time=elapsed,
                cancelled=True,
                memory_usage=live.rss,
                peak_memory_usage=live.peak_rss,
            )

        success = exit_code == 0
        self._trace(f"[{process_id}] exited with {exit_code} after {elapsed:.2f}s")
        state.emit(CompletedEvent(exit_code=exit_code, success=success))
        return ProcessResult(
            process_id=process_id,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            success=success,
            execution_time=elapsed,
            memory_usage=live.rss,
            peak_memory_usage=live.peak_rss,
        )

    def _start_reader(
        self,
        stream: IO[str] | None,
        name: StreamName,
        buffer: _CaptureBuffer,
        state: _RunState,
    ) -> threading.Thread:
        thread = threading.Thread(
            target=_pump_stream,
            args=(stream, name, buffer, state),
            name=f"compilekit-{name}-reader",
            daemon=True,
        )
        thread.start()
        return thread

    @staticmethod
    def _kill(live: _LiveProcess) -> None:
        """SIGKILL the toolchain and, on POSIX, every process in its group."""

        popen = live.popen
        if popen.returncode is not None:
            return
        if _OWN_PROCESS_GROUP:
            try:
                os.killpg(popen.pid, signal.SIGKILL)
                return
            except (ProcessLookupError, PermissionError):
                pass
        try:
            popen.kill()
        except ProcessLookupError:
            pass

    def _trace(self, message: str) -> None:
        if self._debug is not None:
            self._debug(message)


def _pump_stream(stream: IO[str] | None, name: StreamName, buffer: _CaptureBuffer, state: _RunState) -> None:
    if stream is None:
        return
    with stream:
        for raw_line in stream:
            buffer.append(raw_line)
            state.emit(OutputLineEvent(line=raw_line.rstrip("\r\n"), stream=name))


def _append_line(text: str, line: str) -> str:
    if not text:
        return line
    separator = "" if text.endswith("\n") else "\n"
    return f"{text}{separator}{line}"


__all__ = [
    "ExecutionBridge",
    "ProcessResult",
    "START_FAILURE_EXIT_CODE",
    "new_process_id",
    "read_process_memory",
]
