# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report rendering for validation results and write batches."""

from __future__ import annotations

from .formatters import format_issue, format_validation_result, format_write_outcomes

__all__ = ["format_issue", "format_validation_result", "format_write_outcomes"]
