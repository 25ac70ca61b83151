# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for reasoning about filesystem paths."""

from __future__ import annotations

import os
from os import PathLike
from pathlib import Path

_Pathish = str | PathLike[str] | Path


def _resolved(path: Path) -> Path:
    # Symlink loops surface as RuntimeError before Python 3.13.
    try:
        return path.resolve()
    except (OSError, RuntimeError):
        return path if path.is_absolute() else Path.cwd() / path


def _anchor(path: _Pathish, base: Path) -> Path:
    """Resolve ``path`` against the already-resolved directory ``base``."""
    return _resolved(base / Path(path).expanduser())


def normalize_path(path: _Pathish, *, base_dir: _Pathish | None = None) -> Path:
    """Express ``path`` relative to ``base_dir`` (the current directory by default).

    Tool output mixes absolute and workdir-relative file names; this folds
    both into one relative form. A path on another drive, where no relative
    form exists, comes back absolute.
    """

    base = _resolved(Path(base_dir).expanduser()) if base_dir is not None else _resolved(Path.cwd())
    candidate = _anchor(path, base)
    if candidate.is_relative_to(base):
        return candidate.relative_to(base)
    try:
        return Path(os.path.relpath(candidate, base))
    except ValueError:
        return candidate


def resolve_within_root(path: _Pathish, root: _Pathish) -> Path | None:
    """Return the absolute target for ``path`` or ``None`` when it escapes ``root``.

    Relative inputs are anchored at ``root``. Symlinks are resolved before the
    containment check, so a link pointing outside the root is rejected too.
    """

    base = _resolved(Path(root).expanduser())
    candidate = _anchor(path, base)
    if candidate == base or not candidate.is_relative_to(base):
        return None
    return candidate


__all__ = (
    "normalize_path",
    "resolve_within_root",
)
