# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command tables and command-line construction for validation types."""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from typing import Final

from ..config import ValidationConfig
from ..models import ValidationOptions

VALIDATION_TYPES: Final[tuple[str, ...]] = (
    "typescript",
    "javascript",
    "eslint",
    "test",
    "build",
    "format",
    "custom",
)

DEFAULT_COMMANDS: Final[Mapping[str, str]] = {
    "typescript": "npx tsc --noEmit",
    "javascript": "node --check",
    "eslint": "npx eslint",
    "test": "npm test",
    "build": "npm run build",
    "format": "npx prettier --check",
}

FIX_COMMANDS: Final[Mapping[str, str]] = {
    "eslint": "npx eslint --fix",
    "format": "npx prettier --write",
}

# Config-file flag spelling differs per tool and must be emitted exactly.
_CONFIG_FLAGS: Final[Mapping[str, str]] = {
    "eslint": "-c",
    "format": "--config",
}


class CommandTable:
    """Resolve default and fix-variant commands, honouring configured overrides."""

    def __init__(self, config: ValidationConfig | None = None) -> None:
        cfg = config or ValidationConfig()
        self._defaults: dict[str, str] = {**DEFAULT_COMMANDS, **cfg.commands}
        self._fixes: dict[str, str] = {**FIX_COMMANDS, **cfg.fix_commands}

    def default_for(self, validation_type: str) -> str | None:
        return self._defaults.get(validation_type)

    def fix_for(self, validation_type: str) -> str | None:
        return self._fixes.get(validation_type)

    def can_auto_fix(self, validation_type: str) -> bool:
        return validation_type in self._fixes


def quote_files(files: tuple[str, ...]) -> str:
    """Return ``files`` as a shell-safe, space separated argument string."""
    return " ".join(shlex.quote(item) for item in files)


def build_command(validation_type: str, options: ValidationOptions, table: CommandTable) -> str:
    """Return the command line to execute for ``validation_type``.

    A caller-supplied ``options.command`` is used verbatim. Otherwise the
    registered default (or its fix variant when ``options.fix`` is set) is
    extended with file arguments and the type-specific flags.

    Raises:
        KeyError: If no command is registered for ``validation_type``.
    """

    if options.command:
        return options.command

    base = table.default_for(validation_type)
    if base is None:
        raise KeyError(f"No default command for validation type: {validation_type}")
    if options.fix and (fix_variant := table.fix_for(validation_type)):
        base = fix_variant

    parts = [base]
    if options.files:
        parts.append(quote_files(options.files))
    if options.config and (flag := _CONFIG_FLAGS.get(validation_type)):
        parts.append(f"{flag} {shlex.quote(options.config)}")
    if options.format and validation_type == "eslint":
        parts.append(f"--format {shlex.quote(options.format)}")
    if options.strict and validation_type == "typescript":
        parts.append("--strict")
    return " ".join(parts)


__all__ = [
    "CommandTable",
    "DEFAULT_COMMANDS",
    "FIX_COMMANDS",
    "VALIDATION_TYPES",
    "build_command",
    "quote_files",
]
