# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the write and validation pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigError

DEFAULT_BACKUP_DIR_NAME: Final[str] = ".patchguard-backup"
DEFAULT_MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024
DEFAULT_COMMAND_TIMEOUT: Final[float] = 300.0
MIN_FILE_SIZE_LIMIT: Final[int] = 1024
MIN_COMMAND_TIMEOUT: Final[float] = 1.0


class WriterConfig(BaseModel):
    """Settings that govern atomic batch writes."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    root: Path = Field(default_factory=Path.cwd)
    backup_dir_name: str = DEFAULT_BACKUP_DIR_NAME
    persist_backups: bool = True
    verify_size: bool = True
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    @field_validator("max_file_size")
    @classmethod
    def _check_max_file_size(cls, value: int) -> int:
        if value < MIN_FILE_SIZE_LIMIT:
            raise ValueError("max_file_size must be at least 1KB")
        return value

    @field_validator("backup_dir_name")
    @classmethod
    def _check_backup_dir_name(cls, value: str) -> str:
        candidate = Path(value)
        if not value.strip() or candidate.is_absolute() or ".." in candidate.parts:
            raise ValueError("backup_dir_name must be a relative directory name inside the working root")
        return value


class ValidationConfig(BaseModel):
    """Settings for external verification commands."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    command_timeout: float = DEFAULT_COMMAND_TIMEOUT
    commands: dict[str, str] = Field(default_factory=dict)
    fix_commands: dict[str, str] = Field(default_factory=dict)

    @field_validator("command_timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value < MIN_COMMAND_TIMEOUT:
            raise ValueError("command_timeout must be at least 1 second")
        return value


class OutputConfig(BaseModel):
    """Presentation toggles for console output."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    emoji: bool = True
    color: bool = True


class Config(BaseModel):
    """Top-level configuration bundle."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    writer: WriterConfig = Field(default_factory=WriterConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level '{value}'")
        return level


__all__ = [
    "Config",
    "ConfigError",
    "DEFAULT_BACKUP_DIR_NAME",
    "DEFAULT_COMMAND_TIMEOUT",
    "DEFAULT_MAX_FILE_SIZE",
    "OutputConfig",
    "ValidationConfig",
    "WriterConfig",
]
