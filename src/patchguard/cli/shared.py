# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (console output, errors, payload input)."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

import typer

from ..logging import fail as core_fail
from ..logging import ok as core_ok
from ..logging import warn as core_warn

STDIN_MARKER = "-"
FILE_MARKER = "@"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around the console helpers respecting CLI emoji and colour settings."""

    use_emoji: bool
    use_color: bool | None = None

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout unstyled."""
        typer.echo(message)


def build_cli_logger(*, emoji: bool, color: bool | None = None) -> CLILogger:
    """Return a ``CLILogger`` for the provided presentation preferences."""
    return CLILogger(use_emoji=emoji, use_color=color)


def read_payload(argument: str) -> str:
    """Return the payload text named by ``argument``.

    ``-`` reads standard input, ``@path`` reads a file, anything else is the
    payload itself.

    Raises:
        CLIError: The referenced payload file cannot be read.
    """

    if argument == STDIN_MARKER:
        return sys.stdin.read()
    if argument.startswith(FILE_MARKER):
        path = Path(argument.removeprefix(FILE_MARKER)).expanduser()
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CLIError(f"Unable to read payload file {path}: {exc}", exit_code=2) from exc
    return argument


__all__ = ["CLIError", "CLILogger", "build_cli_logger", "read_payload"]
