# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import sys
from typing import Final, Literal

from rich.console import Console
from rich.text import Text

PACKAGE_LOGGER_NAME: Final[str] = "patchguard"
_LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONSOLES: dict[tuple[bool, bool, bool], Console] = {}


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a cached Rich console configured for ``color`` and ``emoji``.

    A cached console is replaced once ``sys.stdout`` has been swapped since it
    was created.
    """

    tty = detect_tty()
    key = (color, emoji, tty)
    console = _CONSOLES.get(key)
    if console is None or console.file is not sys.stdout:
        color_system: Literal["auto"] | None = "auto" if color and tty else None
        console = Console(
            file=sys.stdout,
            color_system=color_system,
            force_terminal=tty,
            no_color=not (color and tty),
            emoji=emoji,
            soft_wrap=True,
            highlight=False,
        )
        _CONSOLES[key] = console
    return console


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str | None, use_emoji: bool, use_color: bool | None) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach a single stderr handler to the package logger and set its level.

    Library modules only obtain loggers; entry points call this once.
    """

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(level if isinstance(level, int) else level.upper())
    for stale in [handler for handler in logger.handlers if getattr(handler, "_patchguard", False)]:
        logger.removeHandler(stale)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    handler._patchguard = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger


__all__ = [
    "configure_logging",
    "detect_tty",
    "emoji",
    "fail",
    "get_console",
    "ok",
    "warn",
]
