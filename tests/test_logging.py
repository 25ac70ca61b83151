# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for console helpers and logger configuration."""

from __future__ import annotations

import logging

import pytest

from patchguard.logging import configure_logging, emoji, fail, ok


def test_emoji_helper_respects_flag() -> None:
    assert emoji("✅ ", True) == "✅ "
    assert emoji("✅ ", False) == ""


def test_console_helpers_write_plain_text_without_color(capsys: pytest.CaptureFixture[str]) -> None:
    ok("batch committed", use_emoji=False, use_color=False)
    fail("batch rolled back", use_emoji=True, use_color=False)

    out = capsys.readouterr().out
    assert "batch committed" in out
    assert "❌ batch rolled back" in out
    assert "\x1b[" not in out


def test_configure_logging_installs_one_handler() -> None:
    logger = configure_logging("debug")
    configure_logging(logging.WARNING)

    owned = [handler for handler in logger.handlers if getattr(handler, "_patchguard", False)]
    assert len(owned) == 1
    assert logger.level == logging.WARNING
