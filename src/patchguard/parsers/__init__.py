# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Output classifiers keyed by validation type."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from ..errors import ParseError
from ..models import ValidationIssue
from ..severity import Severity
from .base import ParseContext, ParserFn
from .heuristics import parse_build, parse_formatter, parse_generic
from .javascript import parse_eslint, parse_node_check, parse_tsc
from .testing import parse_test_output

LOGGER = logging.getLogger(__name__)

PARSERS: Mapping[str, ParserFn] = MappingProxyType(
    {
        "typescript": parse_tsc,
        "javascript": parse_node_check,
        "eslint": parse_eslint,
        "test": parse_test_output,
        "build": parse_build,
        "format": parse_formatter,
        "custom": parse_generic,
    },
)


def parser_for(validation_type: str) -> ParserFn:
    """Return the parser registered for ``validation_type`` or the generic heuristic."""
    return PARSERS.get(validation_type, parse_generic)


def classify(
    validation_type: str,
    output: str,
    context: ParseContext,
) -> tuple[list[ValidationIssue], list[ValidationIssue]]:
    """Split ``output`` into ``(errors, warnings)`` using the registered parser.

    A parser that cannot interpret the output degrades to the generic
    heuristic rather than failing the validation. Informational issues are
    reported alongside warnings.
    """

    parser = parser_for(validation_type)
    try:
        issues = list(parser(output, context))
    except (ParseError, ValueError, KeyError, TypeError) as exc:
        LOGGER.warning("failed to parse %s output, falling back to generic parser: %s", validation_type, exc)
        issues = list(parse_generic(output, context))

    errors = [issue for issue in issues if issue.severity is Severity.ERROR]
    warnings = [issue for issue in issues if issue.severity is not Severity.ERROR]
    return errors, warnings


__all__ = [
    "PARSERS",
    "ParseContext",
    "ParserFn",
    "classify",
    "parse_build",
    "parse_eslint",
    "parse_formatter",
    "parse_generic",
    "parse_node_check",
    "parse_test_output",
    "parse_tsc",
    "parser_for",
]
