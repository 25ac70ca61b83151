# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading utilities with layered precedence."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError as PydanticValidationError

from .config import Config, ConfigError

LOGGER = logging.getLogger(__name__)

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
CONFIG_FILENAME: Final[str] = ".patchguard.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "patchguard"

# Environment variable -> (section, field); ``None`` section means top level.
ENV_OVERRIDES: Final[dict[str, tuple[str | None, str]]] = {
    "PATCHGUARD_COMMAND_TIMEOUT": ("validation", "command_timeout"),
    "PATCHGUARD_MAX_FILE_SIZE": ("writer", "max_file_size"),
    "PATCHGUARD_LOG_LEVEL": (None, "log_level"),
}


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` recursively updated with ``override``."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class ConfigSource:
    """A single layer of configuration data."""

    name: str = "source"

    def load(self) -> Mapping[str, Any]:
        """Return the raw mapping contributed by this source."""
        raise NotImplementedError


class TomlConfigSource(ConfigSource):
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self._path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Unable to read {self._path}: {exc}") from exc


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.patchguard]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        data = super().load()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return dict(section)


class EnvConfigSource(ConfigSource):
    """Translate ``PATCHGUARD_*`` environment variables into config fragments."""

    name = "environment"

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = os.environ if env is None else env

    def load(self) -> Mapping[str, Any]:
        fragment: dict[str, Any] = {}
        for variable, (section, field) in ENV_OVERRIDES.items():
            raw = self._env.get(variable)
            if raw is None or not raw.strip():
                continue
            if section is None:
                fragment[field] = raw.strip()
            else:
                fragment.setdefault(section, {})[field] = raw.strip()
        return fragment


class ConfigLoader:
    """Apply configuration sources in order, later sources winning."""

    def __init__(self, sources: Sequence[ConfigSource]) -> None:
        self._sources = tuple(sources)

    def load(self) -> Config:
        merged: dict[str, Any] = {}
        for source in self._sources:
            fragment = source.load()
            if fragment:
                LOGGER.debug("applying configuration from %s", source.name)
                merged = _deep_merge(merged, fragment)
        try:
            return Config.model_validate(merged)
        except PydanticValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc


def load_config(root: Path | None = None, *, env: Mapping[str, str] | None = None) -> Config:
    """Return the configuration for ``root`` (defaults to the current directory).

    Precedence, lowest first: built-in defaults, ``[tool.patchguard]`` in
    ``pyproject.toml``, ``.patchguard.toml``, then ``PATCHGUARD_*``
    environment variables. The writer root defaults to ``root`` itself.
    """

    project_root = (root or Path.cwd()).resolve()
    loader = ConfigLoader(
        [
            PyProjectConfigSource(project_root / PYPROJECT_FILENAME),
            TomlConfigSource(project_root / CONFIG_FILENAME),
            EnvConfigSource(env),
        ],
    )
    config = loader.load()
    if "root" not in config.writer.model_fields_set:
        config.writer.root = project_root
    elif not config.writer.root.is_absolute():
        config.writer.root = (project_root / config.writer.root).resolve()
    return config


__all__ = [
    "ConfigLoader",
    "ConfigSource",
    "EnvConfigSource",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "load_config",
]
