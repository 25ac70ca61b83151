# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for report rendering."""

from __future__ import annotations

from patchguard.models import AutoFixReport, ValidationIssue, ValidationResult, WriteOutcome
from patchguard.reporting import format_issue, format_validation_result, format_write_outcomes
from patchguard.severity import IssueCategory, Severity


def _failed_result() -> ValidationResult:
    return ValidationResult(
        type="eslint",
        errors=[
            ValidationIssue(
                file="src/app.js",
                line=2,
                column=5,
                message="'total' is never reassigned",
                rule="prefer-const",
                category=IssueCategory.LINT,
                fixable=True,
            ),
        ],
        warnings=[
            ValidationIssue(
                file="src/util.js",
                line=9,
                message="Unexpected console statement",
                rule="no-console",
                severity=Severity.WARNING,
                category=IssueCategory.LINT,
            ),
        ],
        command="npx eslint --fix",
        execution_time_ms=120,
        process_ok=False,
        auto_fix=AutoFixReport(command="npx eslint --fix", success=True, output="fixed 1 problem"),
    )


def test_format_issue_includes_location_rule_and_fixable() -> None:
    issue = _failed_result().errors[0]
    assert format_issue(issue) == "src/app.js:2:5 — 'total' is never reassigned (prefer-const) [fixable]"
    assert format_issue(ValidationIssue(message="boom")) == "boom"


def test_validation_report_sections_are_ordered() -> None:
    report = format_validation_result(_failed_result(), use_emoji=False)

    headers = [
        "VALIDATION: ESLINT",
        "Status: FAILED",
        "Execution time: 120ms",
        "Summary:",
        "Errors (1):",
        "Warnings (1):",
        "Suggestions:",
        "Auto-fix attempt:",
        "Command: npx eslint --fix",
    ]
    lines = report.splitlines()
    positions = [lines.index(header) for header in headers]
    assert positions == sorted(positions)
    assert "  • Files analyzed: 2" in report
    assert "  • Auto-fixable: 1 issues" in report
    assert "Consider adjusting ESLint rules or fixing code style issues" in report
    assert "  Auto-fix completed successfully:" in report
    assert "✅" not in report and "❌" not in report


def test_passing_report_has_no_suggestions() -> None:
    result = ValidationResult(type="build", command="npm run build", execution_time_ms=5)

    report = format_validation_result(result)

    assert "Status: ✅ PASSED" in report
    assert "Suggestions" not in report
    assert not any(line.startswith(("🚨 Errors", "Errors (")) for line in report.splitlines())
    assert "  • Errors: 0 (in 0 files)" in report
    assert report.endswith("Command: npm run build")


def test_write_report_lists_every_path() -> None:
    report = format_write_outcomes(
        [WriteOutcome(path="a.txt", success=True), WriteOutcome(path="b.txt", success=True)],
        use_emoji=False,
    )

    assert report.splitlines()[0] == "File operation completed: 2/2 files written successfully"
    assert report.splitlines()[-2:] == ["a.txt", "b.txt"]


def test_write_report_lists_failures() -> None:
    report = format_write_outcomes(
        [
            WriteOutcome(path="a.txt", success=True),
            WriteOutcome(path="b/c.txt", success=False, error="Not a directory"),
        ],
        use_emoji=False,
    )

    assert "File operation completed: 1/2 files written successfully" in report
    assert "b/c.txt: Not a directory" in report
    assert "Written before rollback:\na.txt" in report


def test_issue_section_headers_differ_from_summary_bullets() -> None:
    lines = format_validation_result(_failed_result(), use_emoji=False).splitlines()

    assert lines.count("Errors (1):") == 1
    assert lines.count("Warnings (1):") == 1
    assert "  • Errors: 1 (in 1 files)" in lines


def test_write_report_marks_superseded_paths() -> None:
    report = format_write_outcomes(
        [
            WriteOutcome(path="d.txt", success=True, superseded=True),
            WriteOutcome(path="d.txt", success=True),
        ],
        use_emoji=False,
    )

    assert report.splitlines()[-2:] == ["d.txt (superseded)", "d.txt"]
