# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run verification tools and normalise their output into a ValidationResult."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from ..config import ValidationConfig
from ..errors import CommandSpawnError, CommandTimeoutError
from ..models import CommandResult, ValidationIssue, ValidationOptions, ValidationResult
from ..parsers import ParseContext, classify
from ..process_utils import CommandRunner, run_shell_command
from ..severity import IssueCategory, Severity
from .autofix import AutoFixer
from .commands import CommandTable, build_command

LOGGER = logging.getLogger(__name__)

FAILED_TO_EXECUTE = "failed to execute"


class ValidationService:
    """Choose, run and classify validation commands.

    The final ``success`` of a run is driven by the parsed errors rather
    than the raw exit status: a non-zero exit that produced only warnings
    is advisory, while a non-zero exit that produced nothing parseable is
    reported as one generic error carrying the raw output.
    """

    def __init__(
        self,
        config: ValidationConfig | None = None,
        *,
        runner: CommandRunner = run_shell_command,
    ) -> None:
        self._config = config or ValidationConfig()
        self._table = CommandTable(self._config)
        self._runner = runner
        self._fixer = AutoFixer(self._table, runner=runner)

    @property
    def commands(self) -> CommandTable:
        return self._table

    def validate(self, validation_type: str, options: ValidationOptions | None = None) -> ValidationResult:
        """Run the validation named ``validation_type`` and return its structured result.

        Spawn failures, timeouts and missing commands are reported as a
        result with a single synthetic error; this method does not raise for
        them.
        """

        opts = options or ValidationOptions()
        workdir = (opts.directory or Path.cwd()).expanduser().resolve()
        timeout = opts.timeout or self._config.command_timeout
        LOGGER.info("executing validation: %s (workdir=%s, timeout=%.1fs)", validation_type, workdir, timeout)
        start = time.monotonic()

        try:
            command = build_command(validation_type, opts, self._table)
        except KeyError as exc:
            return self._failure(validation_type, str(exc.args[0]), command=FAILED_TO_EXECUTE, start=start)

        try:
            completed = self._runner(command, cwd=workdir, timeout=timeout)
        except CommandSpawnError as exc:
            LOGGER.error("validation %s could not start: %s", validation_type, exc)
            return self._failure(validation_type, str(exc), command=command, start=start)
        except CommandTimeoutError as exc:
            result = self._timed_out(validation_type, exc, workdir=workdir, start=start)
        else:
            result = self._classify(validation_type, completed, workdir=workdir, start=start)

        if opts.fix and not result.success and self._table.can_auto_fix(validation_type):
            report = self._fixer.attempt(validation_type, opts, cwd=workdir, timeout=timeout)
            result.auto_fix = report
            result.raw_output = f"{result.raw_output}\n\nAuto-fix attempt:\n{report.addendum()}"

        LOGGER.info(
            "validation completed: %s success=%s errors=%d warnings=%d time=%dms",
            validation_type,
            result.success,
            len(result.errors),
            len(result.warnings),
            result.execution_time_ms,
        )
        return result

    def _classify(
        self,
        validation_type: str,
        completed: CommandResult,
        *,
        workdir: Path,
        start: float,
    ) -> ValidationResult:
        errors, warnings = classify(validation_type, completed.output, ParseContext(workdir=workdir))
        advisory_only = not completed.ok and not errors and bool(warnings)
        if not completed.ok and not errors and not warnings:
            errors.append(_exit_status_issue(completed))
        return ValidationResult(
            type=validation_type,
            errors=errors,
            warnings=warnings,
            command=completed.command,
            execution_time_ms=_elapsed_ms(start),
            raw_output=completed.output,
            process_ok=completed.ok or advisory_only,
        )

    def _timed_out(
        self,
        validation_type: str,
        exc: CommandTimeoutError,
        *,
        workdir: Path,
        start: float,
    ) -> ValidationResult:
        partial = exc.stdout + exc.stderr
        errors, warnings = classify(validation_type, partial, ParseContext(workdir=workdir))
        errors.append(
            ValidationIssue(
                message=str(exc),
                rule="timeout",
                severity=Severity.ERROR,
                category=IssueCategory.CUSTOM,
            ),
        )
        return ValidationResult(
            type=validation_type,
            errors=errors,
            warnings=warnings,
            command=exc.command,
            execution_time_ms=_elapsed_ms(start),
            raw_output=partial,
            process_ok=False,
        )

    @staticmethod
    def _failure(validation_type: str, message: str, *, command: str, start: float) -> ValidationResult:
        return ValidationResult(
            type=validation_type,
            errors=[ValidationIssue(message=message, severity=Severity.ERROR, category=IssueCategory.CUSTOM)],
            command=command,
            execution_time_ms=_elapsed_ms(start),
            raw_output=message,
            process_ok=False,
        )


def _exit_status_issue(completed: CommandResult) -> ValidationIssue:
    output = completed.output.strip()
    message = f"Command exited with status {completed.returncode}"
    if output:
        message = f"{message}: {output}"
    return ValidationIssue(message=message, severity=Severity.ERROR, category=IssueCategory.CUSTOM)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def validate(
    validation_type: str,
    options: ValidationOptions | None = None,
    *,
    config: ValidationConfig | None = None,
) -> ValidationResult:
    """Run one validation with a service configured by ``config``."""
    return ValidationService(config).validate(validation_type, options)


__all__ = ["FAILED_TO_EXECUTE", "ValidationService", "validate"]
