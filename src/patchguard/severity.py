# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity and category vocabularies for validation issues."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels normalising different tool vocabularies."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCategory(str, Enum):
    """Broad class of check that produced an issue."""

    SYNTAX = "syntax"
    TYPE = "type"
    LINT = "lint"
    TEST = "test"
    BUILD = "build"
    FORMAT = "format"
    CUSTOM = "custom"


_SEVERITY_ALIASES: Final[dict[str, Severity]] = {
    "error": Severity.ERROR,
    "fatal": Severity.ERROR,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "info": Severity.INFO,
    "notice": Severity.INFO,
    "note": Severity.INFO,
    "suggestion": Severity.INFO,
    "message": Severity.INFO,
}


def severity_from_label(label: str | None, default: Severity = Severity.ERROR) -> Severity:
    """Map a tool-native severity word such as ``Error`` or ``warn`` to :class:`Severity`."""

    if not label:
        return default
    return _SEVERITY_ALIASES.get(label.strip().lower(), default)


__all__ = ["IssueCategory", "Severity", "severity_from_label"]
