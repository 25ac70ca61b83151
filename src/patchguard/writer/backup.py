# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-batch backup bookkeeping used to roll back failed writes."""

from __future__ import annotations

import logging
import os
import secrets
import shutil
import stat
import time
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import RollbackError

LOGGER = logging.getLogger(__name__)


def generate_batch_id() -> str:
    """Return a unique batch identifier made of a millisecond timestamp and random suffix."""
    return f"backup_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


@dataclass(slots=True)
class BackupRecord:
    """Pre-write state of one target path."""

    path: Path
    existed: bool
    snapshot: bytes | None = None
    stored_at: Path | None = None
    mode: int | None = None


@dataclass(slots=True)
class BackupSession:
    """Backups captured for a single batch; one fresh instance per batch.

    Snapshots are always held in memory. When ``directory`` is set they are
    also copied aside under ``<root>/<backup dir>/<batch id>/`` so the
    original bytes survive a crash mid-batch.
    """

    batch_id: str
    directory: Path | None = None
    records: dict[Path, BackupRecord] = field(default_factory=dict)
    created_dirs: list[Path] = field(default_factory=list)

    @classmethod
    def open(cls, root: Path, *, backup_dir_name: str, persist: bool) -> BackupSession:
        """Return a new session for a batch rooted at ``root``."""
        batch_id = generate_batch_id()
        directory = root / backup_dir_name / batch_id if persist else None
        return cls(batch_id=batch_id, directory=directory)

    def capture(self, path: Path) -> BackupRecord:
        """Snapshot ``path`` before it is written.

        Raises:
            OSError: The existing file could not be read or copied aside.
        """

        if path in self.records:
            return self.records[path]
        if not path.exists():
            record = BackupRecord(path=path, existed=False)
        else:
            snapshot = path.read_bytes()
            record = BackupRecord(
                path=path,
                existed=True,
                snapshot=snapshot,
                mode=stat.S_IMODE(path.stat().st_mode),
            )
            if self.directory is not None:
                self.directory.mkdir(parents=True, exist_ok=True)
                stored_at = self.directory / f"{len(self.records):04d}_{path.name}"
                shutil.copy2(path, stored_at)
                record.stored_at = stored_at
        self.records[path] = record
        return record

    def track_created_dirs(self, directories: list[Path]) -> None:
        """Remember directories created while writing so rollback can remove them."""
        self.created_dirs.extend(directories)

    def restore(self, paths: list[Path]) -> list[RollbackError]:
        """Return each of ``paths`` to its captured state.

        Every path is attempted even if an earlier one fails; failures are
        logged and returned, never raised or retried.
        """

        failures: list[RollbackError] = []
        for path in reversed(paths):
            record = self.records.get(path)
            if record is None:
                continue
            try:
                _restore_record(record, tmp_suffix=self.batch_id)
            except OSError as exc:
                failure = RollbackError(path, exc)
                LOGGER.error("rollback failed for %s: %s", path, exc)
                failures.append(failure)

        for directory in sorted(self.created_dirs, key=lambda item: len(item.parts), reverse=True):
            try:
                directory.rmdir()
            except OSError:
                LOGGER.debug("leaving directory %s in place during rollback", directory)

        if failures:
            LOGGER.warning("keeping backups for batch %s in %s after rollback failures", self.batch_id, self.directory)
        else:
            self.discard()
        return failures

    def discard(self) -> None:
        """Drop in-memory snapshots and delete on-disk backups for this batch."""
        self.records.clear()
        if self.directory is None:
            return
        try:
            if self.directory.exists():
                shutil.rmtree(self.directory)
            parent = self.directory.parent
            if parent.exists() and not any(parent.iterdir()):
                parent.rmdir()
        except OSError as exc:
            LOGGER.warning("unable to remove backup directory %s: %s", self.directory, exc)


def _restore_record(record: BackupRecord, *, tmp_suffix: str) -> None:
    if not record.existed:
        if record.path.is_file() or record.path.is_symlink():
            record.path.unlink()
        return
    snapshot = record.snapshot
    if snapshot is None and record.stored_at is not None:
        snapshot = record.stored_at.read_bytes()
    if snapshot is None:
        return
    record.path.parent.mkdir(parents=True, exist_ok=True)
    tmp = record.path.with_name(f".{record.path.name}.{tmp_suffix}.restore")
    try:
        tmp.write_bytes(snapshot)
        if record.mode is not None:
            tmp.chmod(record.mode)
        os.replace(tmp, record.path)
    finally:
        tmp.unlink(missing_ok=True)


__all__ = ["BackupRecord", "BackupSession", "generate_batch_id"]
