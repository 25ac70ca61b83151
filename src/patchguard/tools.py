# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Dispatcher-facing entry points that accept loosely-typed payloads."""

from __future__ import annotations

import logging

from .config import Config
from .normalizer import FileBatchParams, ValidationParams, normalize
from .reporting import format_validation_result, format_write_outcomes
from .validation import ValidationService
from .writer import AtomicFileWriter

LOGGER = logging.getLogger(__name__)


def write_files(payload: object, *, config: Config | None = None) -> str:
    """Normalise ``payload``, apply it atomically and return the write report.

    Raises:
        MutationError: The payload is not a valid, non-empty file batch.
        WriteError: The batch failed and was rolled back.
    """

    cfg = config or Config()
    params = normalize(payload, FileBatchParams)
    LOGGER.debug("write_files received %d mutation(s)", len(params.files))
    outcomes = AtomicFileWriter(cfg.writer).apply_batch(params.files)
    return format_write_outcomes(outcomes, use_emoji=cfg.output.emoji)


def validate_code(payload: object, *, config: Config | None = None) -> str:
    """Normalise ``payload``, run the requested validation and return its report.

    Tool failures are part of the report; only malformed payloads raise
    :class:`~patchguard.errors.ParameterError`.
    """

    cfg = config or Config()
    params = normalize(payload, ValidationParams)
    result = ValidationService(cfg.validation).validate(params.type, params.options)
    return format_validation_result(result, use_emoji=cfg.output.emoji)


__all__ = ["validate_code", "write_files"]
