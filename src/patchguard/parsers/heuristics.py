# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Keyword and path based parsers for tools without structured output."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from ..models import ValidationIssue
from ..severity import IssueCategory, Severity
from .base import ParseContext, ensure_lines, line_issue, relativize

_GENERIC_ERROR_MARKERS: Final[tuple[str, ...]] = ("error", "failed", "exception")
_GENERIC_WARNING_MARKERS: Final[tuple[str, ...]] = ("warning", "warn")

FORMATTABLE_EXTENSIONS: Final[tuple[str, ...]] = (
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".ts",
    ".tsx",
    ".json",
    ".css",
    ".scss",
    ".less",
    ".md",
    ".html",
    ".vue",
    ".yaml",
    ".yml",
)
_FORMATTER_PREFIX = re.compile(r"^\[(?:warn|error|info)\]\s*", re.IGNORECASE)
_FORMATTER_SUMMARY_MARKER: Final[str] = "Code style issues"


def parse_build(output: str, _context: ParseContext) -> Sequence[ValidationIssue]:
    """Classify build output: lines mentioning "error" are errors, "warning" warnings."""
    results: list[ValidationIssue] = []
    for raw_line in ensure_lines(output):
        lowered = raw_line.lower()
        if not raw_line.strip():
            continue
        if "error" in lowered:
            results.append(line_issue(raw_line, severity=Severity.ERROR, category=IssueCategory.BUILD))
        elif "warning" in lowered:
            results.append(line_issue(raw_line, severity=Severity.WARNING, category=IssueCategory.BUILD))
    return results


def parse_generic(output: str, _context: ParseContext) -> Sequence[ValidationIssue]:
    """Keyword heuristic used for custom and unregistered validation types."""
    results: list[ValidationIssue] = []
    for raw_line in ensure_lines(output):
        lowered = raw_line.strip().lower()
        if not lowered:
            continue
        if any(marker in lowered for marker in _GENERIC_ERROR_MARKERS):
            results.append(line_issue(raw_line, severity=Severity.ERROR, category=IssueCategory.CUSTOM))
        elif any(marker in lowered for marker in _GENERIC_WARNING_MARKERS):
            results.append(line_issue(raw_line, severity=Severity.WARNING, category=IssueCategory.CUSTOM))
    return results


def parse_formatter(output: str, context: ParseContext) -> Sequence[ValidationIssue]:
    """Treat each listed source file as needing formatting."""
    results: list[ValidationIssue] = []
    for raw_line in ensure_lines(output):
        candidate = _FORMATTER_PREFIX.sub("", raw_line.strip()).strip()
        if not candidate or _FORMATTER_SUMMARY_MARKER in candidate:
            continue
        if not candidate.lower().endswith(FORMATTABLE_EXTENSIONS):
            continue
        results.append(
            ValidationIssue(
                file=relativize(candidate, context),
                message="File needs formatting",
                severity=Severity.ERROR,
                category=IssueCategory.FORMAT,
                fixable=True,
            ),
        )
    return results


__all__ = ["FORMATTABLE_EXTENSIONS", "parse_build", "parse_formatter", "parse_generic"]
