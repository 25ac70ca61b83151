# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Validation pipeline: command selection, execution, classification and auto-fix."""

from __future__ import annotations

from .autofix import AutoFixer
from .commands import DEFAULT_COMMANDS, FIX_COMMANDS, VALIDATION_TYPES, CommandTable, build_command
from .service import ValidationService, validate

__all__ = [
    "AutoFixer",
    "CommandTable",
    "DEFAULT_COMMANDS",
    "FIX_COMMANDS",
    "VALIDATION_TYPES",
    "ValidationService",
    "build_command",
    "validate",
]
