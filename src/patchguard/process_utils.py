# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bounded execution of external verification commands."""

from __future__ import annotations

import logging
import os
import signal

# Bandit: subprocess usage is intentional; this module is the single wrapper
# through which verification commands are executed.
import subprocess  # nosec B404
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Final, Protocol

from .errors import CommandSpawnError, CommandTimeoutError
from .models import CommandResult

LOGGER = logging.getLogger(__name__)

_DRAIN_TIMEOUT: Final[float] = 2.0


class CommandRunner(Protocol):
    """Callable that executes one shell command line."""

    def __call__(self, command: str, *, cwd: Path | None = None, timeout: float | None = None) -> CommandResult:
        """Run ``command`` and return its captured result."""
        ...


def _kill_process_group(process: subprocess.Popen[str]) -> None:
    """Kill ``process`` and every child it spawned."""
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError, AttributeError):
        process.kill()


def _drain_killed(process: subprocess.Popen[str]) -> tuple[str, str]:
    """Collect what a killed process wrote, giving up once the pipes stay open.

    A grandchild that started its own session survives the group kill and can
    hold stdout and stderr open indefinitely.
    """
    try:
        stdout, stderr = process.communicate(timeout=_DRAIN_TIMEOUT)
    except subprocess.TimeoutExpired as exc:
        LOGGER.debug("pipes of killed pid %d still open after %.1fs; closing them", process.pid, _DRAIN_TIMEOUT)
        for stream in (process.stdout, process.stderr):
            if stream is not None:
                stream.close()
        process.wait()
        return _decoded(exc.output), _decoded(exc.stderr)
    return stdout or "", stderr or ""


def _decoded(data: bytes | str | None) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data or ""


def run_shell_command(
    command: str,
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run ``command`` through the shell and capture its output.

    Verification commands are shell strings (``npx tsc --noEmit``, ``exit 1``)
    so they run with ``shell=True`` in a new session; on timeout the whole
    process group is killed.

    Args:
        command: Shell command line to execute.
        cwd: Working directory for the process.
        timeout: Seconds to wait before killing the process.
        env: Optional replacement environment.

    Returns:
        CommandResult: Exit status, stdout, stderr and wall-clock duration.

    Raises:
        CommandSpawnError: The process could not be started.
        CommandTimeoutError: The process exceeded ``timeout`` and was killed.
    """

    LOGGER.debug("running command %r in %s (timeout=%s)", command, cwd or Path.cwd(), timeout)
    start = time.monotonic()
    try:
        # Bandit: commands are caller-supplied validation command lines which
        # rely on shell syntax by contract.
        process = subprocess.Popen(  # nosec B602
            command,
            shell=True,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            start_new_session=True,
        )
    except OSError as exc:
        raise CommandSpawnError(command, exc) from exc

    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _kill_process_group(process)
        stdout, stderr = _drain_killed(process)
        LOGGER.warning("command %r timed out after %.1fs and was killed", command, timeout or 0.0)
        raise CommandTimeoutError(command, timeout or 0.0, stdout=stdout, stderr=stderr) from exc

    duration_ms = int((time.monotonic() - start) * 1000)
    LOGGER.debug("command %r exited with %d after %dms", command, process.returncode, duration_ms)
    return CommandResult(
        command=command,
        returncode=process.returncode,
        stdout=stdout or "",
        stderr=stderr or "",
        duration_ms=duration_ms,
    )


__all__ = ["CommandRunner", "run_shell_command"]
