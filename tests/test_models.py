# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for shared data models and error types."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from patchguard.errors import RollbackError, WriteError
from patchguard.models import (
    AutoFixReport,
    FileMutation,
    ValidationIssue,
    ValidationOptions,
    ValidationResult,
    WriteOutcome,
)
from patchguard.severity import Severity, severity_from_label


def test_file_mutation_is_frozen() -> None:
    mutation = FileMutation(path="a.txt", content="x")
    with pytest.raises(ValidationError):
        mutation.content = "y"  # type: ignore[misc]


def test_validation_options_coercion() -> None:
    options = ValidationOptions(files="src/a.ts 'src/b c.ts'", command="  ", config="", format="json")
    assert options.files == ("src/a.ts", "src/b c.ts")
    assert options.command is None
    assert options.config is None
    assert options.format == "json"


def test_validation_options_reject_non_positive_timeout() -> None:
    with pytest.raises(ValidationError):
        ValidationOptions(timeout=0)


def test_success_requires_clean_process_and_no_errors() -> None:
    error = ValidationIssue(message="boom")
    assert ValidationResult(type="build", command="x").success is True
    assert ValidationResult(type="build", command="x", process_ok=False).success is False
    assert ValidationResult(type="build", command="x", errors=[error]).success is False
    dumped = ValidationResult(type="build", command="x").model_dump()
    assert dumped["success"] is True
    assert dumped["summary"]["total_errors"] == 0


def test_auto_fix_addendum() -> None:
    assert AutoFixReport(command="c", success=True, output="done\n").addendum() == "Auto-fix completed successfully:\ndone"
    assert AutoFixReport(command="c", success=False, output="nope").addendum() == "Auto-fix failed: nope"


def test_write_error_counts_outcomes() -> None:
    rollback = RollbackError(Path("a.txt"), PermissionError("denied"))
    error = WriteError(
        "File writing failed",
        outcomes=[WriteOutcome(path="a.txt", success=True), WriteOutcome(path="b.txt", success=False)],
        rollback_failures=[rollback],
    )
    assert (error.total, error.succeeded, error.failed) == (2, 1, 1)
    assert str(error) == "File writing failed (1/2 files written successfully)"
    assert error.rollback_failures == (rollback,)
    assert str(rollback) == "Failed to restore a.txt: denied"


@pytest.mark.parametrize(
    ("label", "expected"),
    [("Error", Severity.ERROR), ("warn", Severity.WARNING), ("note", Severity.INFO), (None, Severity.ERROR)],
)
def test_severity_from_label(label: str | None, expected: Severity) -> None:
    assert severity_from_label(label) is expected
