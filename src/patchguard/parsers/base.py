# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..filesystem.paths import normalize_path
from ..models import ValidationIssue
from ..severity import IssueCategory, Severity


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Information about the run whose output is being classified."""

    workdir: Path = field(default_factory=Path.cwd)


ParserFn = Callable[[str, ParseContext], Sequence[ValidationIssue]]


def ensure_lines(output: str | Sequence[str]) -> list[str]:
    """Normalise string-based output into a list of lines."""
    if isinstance(output, str):
        return output.splitlines()
    return [str(item) for item in output]


def load_json_payload(output: str) -> Any | None:
    """Return the JSON document embedded in ``output`` or ``None``.

    The whole text is tried first, then each line on its own, so a JSON
    report followed by stray stderr noise still decodes.
    """

    stripped = output.strip()
    if not stripped:
        return None
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass
    for raw_line in stripped.splitlines():
        candidate = raw_line.strip()
        if not candidate.startswith(("[", "{")):
            continue
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    return None


def relativize(file: str | None, context: ParseContext) -> str | None:
    """Return ``file`` expressed relative to the run's working directory."""
    if file is None or not file.strip():
        return None
    try:
        return normalize_path(file.strip(), base_dir=context.workdir).as_posix()
    except (OSError, RuntimeError, ValueError):
        return file.strip()


def line_issue(
    line: str,
    *,
    severity: Severity,
    category: IssueCategory,
    file: str | None = None,
) -> ValidationIssue:
    """Build an issue whose message is the trimmed output line itself."""
    return ValidationIssue(
        file=file,
        message=line.strip(),
        severity=severity,
        category=category,
        fixable=False,
    )


__all__ = [
    "ParseContext",
    "ParserFn",
    "ensure_lines",
    "line_issue",
    "load_json_payload",
    "relativize",
]
