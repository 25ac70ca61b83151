# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Transactional file writes with backup and rollback."""

from __future__ import annotations

from .atomic import AtomicFileWriter, PlannedWrite, apply_batch
from .backup import BackupRecord, BackupSession, generate_batch_id

__all__ = [
    "AtomicFileWriter",
    "BackupRecord",
    "BackupSession",
    "PlannedWrite",
    "apply_batch",
    "generate_batch_id",
]
