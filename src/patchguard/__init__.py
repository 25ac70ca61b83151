# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core package metadata and convenience exports."""

from __future__ import annotations

from importlib import metadata

from .errors import (
    CommandSpawnError,
    CommandTimeoutError,
    ConfigError,
    MutationError,
    ParameterError,
    ParseError,
    PatchGuardError,
    PathOutsideRootError,
    RollbackError,
    WriteError,
)
from .models import FileMutation, ValidationIssue, ValidationResult, WriteOutcome

__all__ = [
    "CommandSpawnError",
    "CommandTimeoutError",
    "ConfigError",
    "FileMutation",
    "MutationError",
    "ParameterError",
    "ParseError",
    "PatchGuardError",
    "PathOutsideRootError",
    "RollbackError",
    "ValidationIssue",
    "ValidationResult",
    "WriteError",
    "WriteOutcome",
    "__version__",
]

try:
    __version__ = metadata.version("patchguard")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
