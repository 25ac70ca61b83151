# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""All-or-nothing application of file mutation batches."""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Final

from ..config import WriterConfig
from ..errors import MutationError, PathOutsideRootError, WriteError
from ..filesystem.paths import resolve_within_root
from ..models import FileMutation, WriteOutcome
from .backup import BackupSession

LOGGER = logging.getLogger(__name__)

_NOT_ATTEMPTED: Final[str] = "Not attempted: batch aborted"


@dataclass(frozen=True, slots=True)
class PlannedWrite:
    """A mutation resolved to its absolute target and encoded payload."""

    display_path: str
    target: Path
    data: bytes


class AtomicFileWriter:
    """Apply mutation batches so every path ends up either all-new or all-original.

    A batch runs in strictly ordered phases: every target is snapshotted
    before the first write, every write is verified before backups are
    discarded, and any failure restores every path touched so far.
    """

    def __init__(self, config: WriterConfig | None = None) -> None:
        self._config = config or WriterConfig()
        self._root = self._config.root.resolve()

    @property
    def root(self) -> Path:
        return self._root

    def apply_batch(self, mutations: Sequence[FileMutation]) -> list[WriteOutcome]:
        """Write ``mutations`` atomically and return one outcome per mutation.

        When several mutations name the same path, the last one is written
        and the earlier ones are reported with ``superseded`` set, mirroring
        the outcome of the write that replaced them.

        Raises:
            MutationError: A mutation violates a preflight constraint; nothing
                was written.
            PathOutsideRootError: A target lies outside the working root;
                nothing was written.
            WriteError: A write failed and the batch was rolled back.
        """

        if not mutations:
            LOGGER.debug("empty mutation batch; nothing to write")
            return []

        plan, targets = self._plan(mutations)
        session = BackupSession.open(
            self._root,
            backup_dir_name=self._config.backup_dir_name,
            persist=self._config.persist_backups,
        )
        LOGGER.info("writing files: batch=%s count=%d", session.batch_id, len(plan))

        expand = partial(_per_mutation, mutations, targets, plan)
        self._backup(plan, session, expand)
        written, touched = self._write_all(plan, session)
        outcomes = expand(written)

        failed = [outcome for outcome in written if not outcome.success]
        if not failed:
            session.discard()
            LOGGER.info("all files written successfully: batch=%s count=%d", session.batch_id, len(written))
            return outcomes

        succeeded = len(written) - len(failed)
        LOGGER.warning(
            "some files failed to write, rolling back: batch=%s successful=%d failed=%d",
            session.batch_id,
            succeeded,
            len(failed),
        )
        rollback_failures = session.restore(touched)
        raise WriteError(
            f"File writing failed: {len(failed)} of {len(written)} files failed to write; batch rolled back",
            outcomes=outcomes,
            rollback_failures=rollback_failures,
        )

    def _plan(self, mutations: Sequence[FileMutation]) -> tuple[list[PlannedWrite], list[Path]]:
        planned: dict[Path, PlannedWrite] = {}
        targets: list[Path] = []
        reserved = self._root / self._config.backup_dir_name
        for index, mutation in enumerate(mutations):
            target = resolve_within_root(mutation.path, self._root)
            if target is None or target.is_relative_to(reserved):
                reason = "outside the working root" if target is None else "inside the backup directory"
                outcomes = [
                    WriteOutcome(
                        path=item.path,
                        success=False,
                        error=f"Path is {reason}" if position == index else _NOT_ATTEMPTED,
                    )
                    for position, item in enumerate(mutations)
                ]
                raise PathOutsideRootError(
                    f"Refusing to write {mutation.path}: path is {reason} {self._root}",
                    outcomes=outcomes,
                )

            try:
                data = mutation.content.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise MutationError(
                    f"Content for {mutation.path} cannot be encoded as UTF-8: {exc.reason}",
                    constraint="encoding",
                    field=mutation.path,
                ) from exc
            if len(data) > self._config.max_file_size:
                raise MutationError(
                    f"Content size {len(data)} for {mutation.path} exceeds maximum allowed size "
                    f"{self._config.max_file_size}",
                    constraint="max_size",
                    field=mutation.path,
                )
            if target in planned:
                LOGGER.debug("duplicate target %s in batch; last mutation wins", target)
            planned[target] = PlannedWrite(display_path=mutation.path, target=target, data=data)
            targets.append(target)
        return list(planned.values()), targets

    def _backup(
        self,
        plan: list[PlannedWrite],
        session: BackupSession,
        expand: Callable[[Sequence[WriteOutcome]], list[WriteOutcome]],
    ) -> None:
        for index, item in enumerate(plan):
            try:
                session.capture(item.target)
            except OSError as exc:
                LOGGER.error("failed to back up %s: %s", item.display_path, exc)
                session.discard()
                outcomes = [
                    WriteOutcome(
                        path=entry.display_path,
                        success=False,
                        error=f"Backup failed: {exc}" if position == index else _NOT_ATTEMPTED,
                    )
                    for position, entry in enumerate(plan)
                ]
                raise WriteError(
                    f"File writing failed: could not back up {item.display_path}",
                    outcomes=expand(outcomes),
                ) from exc

    def _write_all(
        self,
        plan: list[PlannedWrite],
        session: BackupSession,
    ) -> tuple[list[WriteOutcome], list[Path]]:
        outcomes: list[WriteOutcome] = []
        touched: list[Path] = []
        aborted = False
        for item in plan:
            if aborted:
                outcomes.append(WriteOutcome(path=item.display_path, success=False, error=_NOT_ATTEMPTED))
                continue
            touched.append(item.target)
            try:
                self._write_one(item, session)
            except OSError as exc:
                LOGGER.error("failed to write file %s: %s", item.display_path, exc)
                outcomes.append(WriteOutcome(path=item.display_path, success=False, error=str(exc)))
                aborted = True
                continue
            LOGGER.debug("wrote file %s (%d bytes)", item.display_path, len(item.data))
            outcomes.append(WriteOutcome(path=item.display_path, success=True))
        return outcomes, touched

    def _write_one(self, item: PlannedWrite, session: BackupSession) -> None:
        target = item.target
        missing = _missing_parents(target.parent)
        target.parent.mkdir(parents=True, exist_ok=True)
        session.track_created_dirs(missing)

        tmp = target.with_name(f".{target.name}.{session.batch_id}.tmp")
        try:
            with tmp.open("wb") as handle:
                handle.write(item.data)
                handle.flush()
                os.fsync(handle.fileno())
            if target.is_file():
                shutil.copymode(target, tmp)
            os.replace(tmp, target)
        finally:
            tmp.unlink(missing_ok=True)

        if not target.is_file():
            raise OSError(f"Verification failed: {item.display_path} does not exist after write")
        if self._config.verify_size and target.stat().st_size != len(item.data):
            raise OSError(
                f"Verification failed: {item.display_path} has {target.stat().st_size} bytes, "
                f"expected {len(item.data)}",
            )


def _per_mutation(
    mutations: Sequence[FileMutation],
    targets: Sequence[Path],
    plan: Sequence[PlannedWrite],
    outcomes: Sequence[WriteOutcome],
) -> list[WriteOutcome]:
    """Spread plan-ordered ``outcomes`` back over the original mutation list."""
    by_target = {item.target: outcome for item, outcome in zip(plan, outcomes, strict=True)}
    last_seen = {target: index for index, target in enumerate(targets)}
    expanded: list[WriteOutcome] = []
    for index, (mutation, target) in enumerate(zip(mutations, targets, strict=True)):
        outcome = by_target[target]
        if last_seen[target] != index:
            outcome = WriteOutcome(path=mutation.path, success=outcome.success, error=outcome.error, superseded=True)
        expanded.append(outcome)
    return expanded


def _missing_parents(directory: Path) -> list[Path]:
    missing: list[Path] = []
    current = directory
    while not current.exists() and current != current.parent:
        missing.append(current)
        current = current.parent
    return missing


def apply_batch(mutations: Sequence[FileMutation], *, config: WriterConfig | None = None) -> list[WriteOutcome]:
    """Apply ``mutations`` with a writer configured by ``config``."""
    return AtomicFileWriter(config).apply_batch(mutations)


__all__ = ["AtomicFileWriter", "PlannedWrite", "apply_batch"]
