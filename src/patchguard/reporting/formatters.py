# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Plain-text renderers for validation results and write outcomes.

Both renderers are pure: they only build strings. Section order is stable
so automated callers can split a report on its headers.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from ..logging import emoji
from ..models import ValidationIssue, ValidationResult, WriteOutcome
from ..severity import IssueCategory

_CATEGORY_SUGGESTIONS: Final[dict[IssueCategory, str]] = {
    IssueCategory.SYNTAX: "Fix the reported syntax errors before re-running other checks",
    IssueCategory.TYPE: "Review TypeScript configuration and type definitions",
    IssueCategory.LINT: "Consider adjusting ESLint rules or fixing code style issues",
    IssueCategory.TEST: "Review failing tests and update implementation",
    IssueCategory.BUILD: "Inspect the build output for the first failing step",
    IssueCategory.FORMAT: "Run the formatter in write mode to apply formatting",
    IssueCategory.CUSTOM: "Inspect the raw command output for details",
}


def format_issue(issue: ValidationIssue) -> str:
    """Return ``file:line:col — message (rule) [fixable]`` for one issue."""
    text = issue.message
    if issue.file:
        location = issue.file
        if issue.line is not None:
            location += f":{issue.line}"
            if issue.column is not None:
                location += f":{issue.column}"
        text = f"{location} — {text}"
    if issue.rule:
        text += f" ({issue.rule})"
    if issue.fixable:
        text += " [fixable]"
    return text


def format_validation_result(result: ValidationResult, *, use_emoji: bool = True) -> str:
    """Render ``result`` as a multi-section, human-readable report."""

    summary = result.summary
    lines: list[str] = [
        f"VALIDATION: {result.type.upper()}",
        f"Status: {emoji('✅ ', use_emoji)}PASSED" if result.success else f"Status: {emoji('❌ ', use_emoji)}FAILED",
        f"Execution time: {result.execution_time_ms}ms",
        "",
        f"{emoji('📊 ', use_emoji)}Summary:",
        f"  • Files analyzed: {summary.total_files}",
        f"  • Errors: {summary.total_errors} (in {summary.files_with_errors} files)",
        f"  • Warnings: {summary.total_warnings} (in {summary.files_with_warnings} files)",
    ]
    if summary.fixable_issues > 0:
        lines.append(f"  • Auto-fixable: {summary.fixable_issues} issues")
    lines.append("")

    if result.errors:
        lines.append(f"{emoji('🚨 ', use_emoji)}Errors ({len(result.errors)}):")
        lines.extend(f"  • {format_issue(issue)}" for issue in result.errors)
        lines.append("")

    if result.warnings:
        lines.append(f"{emoji('⚠️  ', use_emoji)}Warnings ({len(result.warnings)}):")
        lines.extend(f"  • {format_issue(issue)}" for issue in result.warnings)
        lines.append("")

    if not result.success:
        lines.append(f"{emoji('💡 ', use_emoji)}Suggestions:")
        lines.extend(f"  • {suggestion}" for suggestion in _suggestions(result))
        lines.append("")

    if result.auto_fix is not None:
        lines.append(f"{emoji('🔧 ', use_emoji)}Auto-fix attempt:")
        lines.extend(f"  {line}" if line else "" for line in result.auto_fix.addendum().splitlines())
        lines.append("")

    lines.append(f"Command: {result.command}")
    return "\n".join(lines)


def _suggestions(result: ValidationResult) -> list[str]:
    suggestions: list[str] = []
    if result.summary.fixable_issues > 0 and result.auto_fix is None:
        suggestions.append("Run validation with fix enabled to attempt automatic fixes")
    seen: set[IssueCategory] = set()
    for issue in result.errors:
        if issue.category in seen:
            continue
        seen.add(issue.category)
        suggestions.append(_CATEGORY_SUGGESTIONS[issue.category])
    return suggestions


def format_write_outcomes(outcomes: Sequence[WriteOutcome], *, use_emoji: bool = True) -> str:
    """Render a per-path report for a mutation batch."""

    succeeded = [outcome for outcome in outcomes if outcome.success]
    failed = [outcome for outcome in outcomes if not outcome.success]
    ok_mark = emoji("✅ ", use_emoji)
    fail_mark = emoji("❌ ", use_emoji)
    header = f"File operation completed: {len(succeeded)}/{len(outcomes)} files written successfully"
    if not failed:
        details = [f"{ok_mark}{_outcome_label(outcome)}" for outcome in outcomes]
        return "\n".join([header, "", f"{ok_mark}All files written successfully:", *details])

    lines = [header, "", f"{fail_mark}Errors:"]
    lines.extend(f"{_outcome_label(outcome)}: {outcome.error or 'Unknown error'}" for outcome in failed)
    if succeeded:
        lines.extend(["", f"{ok_mark}Written before rollback:"])
        lines.extend(_outcome_label(outcome) for outcome in succeeded)
    return "\n".join(lines)


def _outcome_label(outcome: WriteOutcome) -> str:
    return f"{outcome.path} (superseded)" if outcome.superseded else outcome.path


__all__ = ["format_issue", "format_validation_result", "format_write_outcomes"]
