# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the writer, normaliser and validation pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import WriteOutcome


class PatchGuardError(Exception):
    """Base class for every error raised by patchguard."""


class ConfigError(PatchGuardError):
    """Raised when configuration input is invalid."""


class ParameterError(PatchGuardError):
    """Raised when a call payload cannot be normalised into the requested shape."""

    def __init__(self, message: str, *, constraint: str, field: str | None = None) -> None:
        super().__init__(message)
        self.constraint = constraint
        self.field = field


class MutationError(ParameterError):
    """Raised when a file-mutation payload is rejected before any filesystem change."""


class WriteError(PatchGuardError):
    """Raised when a mutation batch failed and was rolled back.

    The error always reports how many mutations were written before the
    failure was detected, even though the batch has been restored.
    """

    def __init__(
        self,
        message: str,
        *,
        outcomes: Sequence[WriteOutcome] = (),
        rollback_failures: Sequence[RollbackError] = (),
    ) -> None:
        self.outcomes: tuple[WriteOutcome, ...] = tuple(outcomes)
        self.rollback_failures: tuple[RollbackError, ...] = tuple(rollback_failures)
        self.total = len(self.outcomes)
        self.succeeded = sum(1 for outcome in self.outcomes if outcome.success)
        self.failed = self.total - self.succeeded
        super().__init__(f"{message} ({self.succeeded}/{self.total} files written successfully)")


class PathOutsideRootError(WriteError):
    """Raised during backup when a target path escapes the permitted working root."""


class RollbackError(PatchGuardError):
    """Describe a failure to restore one path while rolling back a batch."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(f"Failed to restore {path}: {cause}")
        self.path = path
        self.cause = cause


class CommandSpawnError(PatchGuardError):
    """Raised when an external command could not be started at all."""

    def __init__(self, command: str, cause: BaseException) -> None:
        super().__init__(f"Failed to start command '{command}': {cause}")
        self.command = command
        self.cause = cause


class CommandTimeoutError(PatchGuardError):
    """Raised when an external command exceeded its timeout and was killed."""

    def __init__(self, command: str, timeout: float, *, stdout: str = "", stderr: str = "") -> None:
        super().__init__(f"Command timed out after {timeout:.1f}s: {command}")
        self.command = command
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


class ParseError(PatchGuardError):
    """Raised when a dedicated output parser cannot interpret tool output."""


__all__ = [
    "CommandSpawnError",
    "CommandTimeoutError",
    "ConfigError",
    "MutationError",
    "ParameterError",
    "ParseError",
    "PatchGuardError",
    "PathOutsideRootError",
    "RollbackError",
    "WriteError",
]
