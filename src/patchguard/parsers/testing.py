# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for test-runner output (jest, vitest, mocha, pytest)."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from ..models import ValidationIssue
from ..severity import IssueCategory, Severity
from .base import ParseContext, ensure_lines, line_issue, relativize

_SUITE_PATTERN = re.compile(r"^(?P<status>FAIL|PASS)\s+(?P<file>\S+\.(?:test|spec)\.[cm]?[jt]sx?)\b")
_PYTEST_FAILED_PATTERN = re.compile(
    r"^FAILED\s+(?P<file>[^\s:]+\.py)(?:::(?P<test>\S+))?(?:\s+-\s+(?P<reason>.+))?$",
)
_FAILURE_MARKERS: Final[tuple[str, ...]] = ("FAIL", "✕", "✗", "Failed")
_PASS_MARKER: Final[str] = "PASS"


def parse_test_output(output: str, context: ParseContext) -> Sequence[ValidationIssue]:
    """Collect failing suites and tests.

    Failure lines that do not name a file inherit the most recently
    announced test file.
    """

    results: list[ValidationIssue] = []
    current_file: str | None = None
    for raw_line in ensure_lines(output):
        line = raw_line.strip()
        if not line:
            continue

        if suite := _SUITE_PATTERN.match(line):
            current_file = relativize(suite.group("file"), context)
            if suite.group("status") == "FAIL":
                results.append(
                    ValidationIssue(
                        file=current_file,
                        message="Test suite failed",
                        severity=Severity.ERROR,
                        category=IssueCategory.TEST,
                    ),
                )
            elif "warning" in line.lower():
                results.append(
                    line_issue(line, severity=Severity.WARNING, category=IssueCategory.TEST, file=current_file),
                )
            continue

        if failed := _PYTEST_FAILED_PATTERN.match(line):
            test_name = failed.group("test")
            reason = failed.group("reason")
            message = " - ".join(part for part in (test_name, reason) if part) or "Test failed"
            results.append(
                ValidationIssue(
                    file=relativize(failed.group("file"), context),
                    message=message,
                    severity=Severity.ERROR,
                    category=IssueCategory.TEST,
                ),
            )
            continue

        if any(marker in line for marker in _FAILURE_MARKERS):
            results.append(line_issue(line, severity=Severity.ERROR, category=IssueCategory.TEST, file=current_file))
        elif _PASS_MARKER in line and "warning" in line.lower():
            results.append(line_issue(line, severity=Severity.WARNING, category=IssueCategory.TEST, file=current_file))
    return results


__all__ = ["parse_test_output"]
