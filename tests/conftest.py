# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from patchguard.config import WriterConfig


@pytest.fixture
def writer_config(tmp_path: Path) -> WriterConfig:
    """Return a writer configuration rooted at the test's temporary directory."""
    return WriterConfig(root=tmp_path)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for variable in ("PATCHGUARD_COMMAND_TIMEOUT", "PATCHGUARD_MAX_FILE_SIZE", "PATCHGUARD_LOG_LEVEL"):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("patchguard")
    for handler in [handler for handler in logger.handlers if getattr(handler, "_patchguard", False)]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
