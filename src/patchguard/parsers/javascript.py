# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for JavaScript and TypeScript tooling."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Final

from ..errors import ParseError
from ..models import ValidationIssue
from ..severity import IssueCategory, Severity, severity_from_label
from .base import ParseContext, ensure_lines, load_json_payload, relativize
from .heuristics import parse_generic

_TSC_PATTERN = re.compile(
    r"^(?P<file>[^:(\n]+)\((?P<line>\d+),(?P<col>\d+)\):\s*"
    r"(?P<severity>error|warning)\s*(?P<code>[A-Z]+\d+)?\s*:?\s*(?P<message>.+)$",
)
_TSC_PRETTY_PATTERN = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<col>\d+)\s+-\s+"
    r"(?P<severity>error|warning)\s+(?P<code>TS\d+):\s*(?P<message>.+)$",
)
_TSC_GLOBAL_PATTERN = re.compile(r"^(?P<severity>error|warning)\s+(?P<code>TS\d+):\s*(?P<message>.+)$")

_ESLINT_TEXT_PATTERN = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<col>\d+):\s+(?P<severity>error|warning)\s+"
    r"(?P<message>.+?)(?:\s+\((?P<rule>[^()\s]+)\))?$",
)
_ESLINT_UNIX_PATTERN = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<col>\d+):\s+(?P<message>.+?)\s+"
    r"\[(?P<severity>Error|Warning)(?:/(?P<rule>[^\]]+))?\]$",
)
_ESLINT_STYLISH_PATTERN = re.compile(
    r"^\s+(?P<line>\d+):(?P<col>\d+)\s+(?P<severity>error|warning)\s+"
    r"(?P<message>.+?)(?:\s{2,}(?P<rule>[\w@/-]+))?\s*$",
)
_ESLINT_ERROR_LEVEL: Final[int] = 2
_ESLINT_WARNING_LEVEL: Final[int] = 1

_NODE_LOCATION_PATTERN = re.compile(r"^(?P<file>.+\.[cm]?[jt]sx?):(?P<line>\d+)$")
_NODE_ERROR_PATTERN = re.compile(r"^(?P<kind>[A-Z]\w*Error):\s*(?P<message>.+)$")


def parse_tsc(output: str, context: ParseContext) -> Sequence[ValidationIssue]:
    """Parse TypeScript compiler textual diagnostics.

    The ``rule`` of each issue is the compiler's diagnostic code (``TS2322``).
    """

    results: list[ValidationIssue] = []
    for raw_line in ensure_lines(output):
        line = raw_line.strip()
        if not line:
            continue
        match = _TSC_PATTERN.match(line) or _TSC_PRETTY_PATTERN.match(line)
        if match:
            results.append(
                ValidationIssue(
                    file=relativize(match.group("file"), context),
                    line=int(match.group("line")),
                    column=int(match.group("col")),
                    message=match.group("message").strip(),
                    rule=match.group("code"),
                    severity=severity_from_label(match.group("severity")),
                    category=IssueCategory.TYPE,
                    fixable=False,
                ),
            )
            continue
        if global_match := _TSC_GLOBAL_PATTERN.match(line):
            results.append(
                ValidationIssue(
                    message=global_match.group("message").strip(),
                    rule=global_match.group("code"),
                    severity=severity_from_label(global_match.group("severity")),
                    category=IssueCategory.TYPE,
                ),
            )
    return results


def parse_eslint(output: str, context: ParseContext) -> Sequence[ValidationIssue]:
    """Parse ESLint output, preferring the JSON formatter over text formats.

    JSON and text output produce the same issue shape: location, message,
    rule id, severity and ``lint`` category.

    Raises:
        ParseError: A JSON result array does not follow ESLint's structure.
    """

    payload = load_json_payload(output)
    if isinstance(payload, list):
        return _parse_eslint_json(payload, context)
    return _parse_eslint_text(output, context)


def _parse_eslint_json(payload: list[Any], context: ParseContext) -> list[ValidationIssue]:
    results: list[ValidationIssue] = []
    for entry in payload:
        if not isinstance(entry, Mapping):
            raise ParseError(f"unexpected ESLint result entry: {entry!r}")
        messages = entry.get("messages", [])
        if not isinstance(messages, list):
            raise ParseError("ESLint result 'messages' must be an array")
        path = entry.get("filePath") or entry.get("filename")
        file = relativize(str(path), context) if path else None
        for message in messages:
            if not isinstance(message, Mapping):
                raise ParseError(f"unexpected ESLint message: {message!r}")
            level = message.get("severity")
            if level == _ESLINT_ERROR_LEVEL:
                severity = Severity.ERROR
            elif level == _ESLINT_WARNING_LEVEL:
                severity = Severity.WARNING
            else:
                severity = Severity.INFO
            rule = message.get("ruleId")
            results.append(
                ValidationIssue(
                    file=file,
                    line=_optional_int(message.get("line")),
                    column=_optional_int(message.get("column")),
                    message=str(message.get("message", "")).strip(),
                    rule=str(rule) if rule else None,
                    severity=severity,
                    category=IssueCategory.SYNTAX if message.get("fatal") else IssueCategory.LINT,
                    fixable=message.get("fix") is not None,
                ),
            )
    return results


def _parse_eslint_text(output: str, context: ParseContext) -> list[ValidationIssue]:
    results: list[ValidationIssue] = []
    current_file: str | None = None
    for raw_line in ensure_lines(output):
        line = raw_line.strip()
        if not line:
            continue
        match = _ESLINT_TEXT_PATTERN.match(line) or _ESLINT_UNIX_PATTERN.match(line)
        if match is None and current_file is not None:
            match = _ESLINT_STYLISH_PATTERN.match(raw_line)
        if match is None:
            if not raw_line[:1].isspace() and not line.startswith(("✖", "✔")):
                # Stylish output announces each file on an unindented line.
                current_file = line
            continue
        groups = match.groupdict()
        file = groups.get("file") or current_file
        results.append(
            ValidationIssue(
                file=relativize(file, context),
                line=int(groups["line"]),
                column=int(groups["col"]),
                message=groups["message"].strip(),
                rule=groups.get("rule"),
                severity=severity_from_label(groups["severity"]),
                category=IssueCategory.LINT,
                fixable=True,
            ),
        )
    return results


def parse_node_check(output: str, context: ParseContext) -> Sequence[ValidationIssue]:
    """Parse ``node --check`` syntax errors, degrading to the generic heuristic.

    Node prints ``file:line``, the offending source line, a caret marking the
    column, and finally ``SyntaxError: message``.
    """

    results: list[ValidationIssue] = []
    location: tuple[str, int] | None = None
    column: int | None = None
    for raw_line in ensure_lines(output):
        line = raw_line.strip()
        if loc_match := _NODE_LOCATION_PATTERN.match(line):
            location = (loc_match.group("file"), int(loc_match.group("line")))
            column = None
            continue
        if location is not None and line and set(line) == {"^"}:
            column = raw_line.index("^") + 1
            continue
        if err_match := _NODE_ERROR_PATTERN.match(line):
            kind = err_match.group("kind")
            results.append(
                ValidationIssue(
                    file=relativize(location[0], context) if location else None,
                    line=location[1] if location else None,
                    column=column,
                    message=err_match.group("message").strip(),
                    rule=kind,
                    severity=Severity.ERROR,
                    category=IssueCategory.SYNTAX if kind == "SyntaxError" else IssueCategory.CUSTOM,
                ),
            )
            location = None
            column = None
    if results:
        return results
    return parse_generic(output, context)


def _optional_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


__all__ = ["parse_eslint", "parse_node_check", "parse_tsc"]
