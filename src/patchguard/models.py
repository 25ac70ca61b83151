# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the patchguard package."""

from __future__ import annotations

import shlex
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, computed_field, field_validator

from .severity import IssueCategory, Severity


class FileMutation(BaseModel):
    """Replace the content of one file as part of a mutation batch."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(min_length=1)
    content: str


class WriteOutcome(BaseModel):
    """Result of attempting one mutation within a batch."""

    model_config = ConfigDict(frozen=True)

    path: str
    success: bool
    error: str | None = None
    superseded: bool = False


class ValidationOptions(BaseModel):
    """Caller-supplied knobs for one validation run."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    command: str | None = None
    files: tuple[str, ...] = ()
    config: str | None = None
    format: str | None = None
    strict: bool = False
    fix: bool = False
    timeout: PositiveFloat | None = None
    directory: Path | None = None

    @field_validator("files", mode="before")
    @classmethod
    def _split_files(cls, value: object) -> object:
        if isinstance(value, str):
            return tuple(shlex.split(value))
        return value

    @field_validator("command", "config", "format")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value


class ValidationIssue(BaseModel):
    """Normalised error or warning extracted from a verification tool's output."""

    model_config = ConfigDict(validate_assignment=True)

    file: str | None = None
    line: int | None = None
    column: int | None = None
    message: str
    rule: str | None = None
    severity: Severity = Severity.ERROR
    category: IssueCategory = IssueCategory.CUSTOM
    fixable: bool = False


class ValidationSummary(BaseModel):
    """Counts derived from the errors and warnings of a validation run."""

    model_config = ConfigDict(frozen=True)

    total_files: int = 0
    files_with_errors: int = 0
    files_with_warnings: int = 0
    total_errors: int = 0
    total_warnings: int = 0
    fixable_issues: int = 0

    @classmethod
    def from_issues(cls, errors: list[ValidationIssue], warnings: list[ValidationIssue]) -> ValidationSummary:
        """Build a summary from classified issues."""

        error_files = {issue.file for issue in errors if issue.file}
        warning_files = {issue.file for issue in warnings if issue.file}
        return cls(
            total_files=len(error_files | warning_files),
            files_with_errors=len(error_files),
            files_with_warnings=len(warning_files),
            total_errors=len(errors),
            total_warnings=len(warnings),
            fixable_issues=sum(1 for issue in (*errors, *warnings) if issue.fixable),
        )


class CommandResult(BaseModel):
    """Captured output of one external command invocation."""

    model_config = ConfigDict(frozen=True)

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Return ``True`` when the command exited with status zero."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Return stdout followed by stderr, the order tools are classified in."""
        return self.stdout + self.stderr


class AutoFixReport(BaseModel):
    """Outcome of re-running a tool's fix variant after a failed validation."""

    model_config = ConfigDict(frozen=True)

    command: str
    success: bool
    output: str = ""

    def addendum(self) -> str:
        """Return the text appended to a validation report for this attempt."""
        if self.success:
            return f"Auto-fix completed successfully:\n{self.output}".rstrip()
        return f"Auto-fix failed: {self.output}".rstrip()


class ValidationResult(BaseModel):
    """Structured, severity-classified outcome of one validation run."""

    model_config = ConfigDict(validate_assignment=True)

    type: str
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    command: str
    execution_time_ms: int = 0
    raw_output: str = ""
    process_ok: bool = True
    auto_fix: AutoFixReport | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success(self) -> bool:
        """Return ``True`` when the process did not fail and no errors were parsed."""
        return self.process_ok and not self.errors

    @computed_field  # type: ignore[prop-decorator]
    @property
    def summary(self) -> ValidationSummary:
        """Return counts derived from :attr:`errors` and :attr:`warnings`."""
        return ValidationSummary.from_issues(self.errors, self.warnings)


__all__ = [
    "AutoFixReport",
    "CommandResult",
    "FileMutation",
    "ValidationIssue",
    "ValidationOptions",
    "ValidationResult",
    "ValidationSummary",
    "WriteOutcome",
]
