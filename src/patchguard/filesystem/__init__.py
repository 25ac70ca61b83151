# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem helpers shared across patchguard modules."""

from __future__ import annotations

from .paths import normalize_path, resolve_within_root

__all__ = ["normalize_path", "resolve_within_root"]
