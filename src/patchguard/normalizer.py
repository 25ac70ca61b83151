# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Coerce loosely-typed call payloads into strictly shaped parameter models.

Payloads arrive from a tool dispatcher as already-decoded objects, JSON
strings, bare arrays, or primitives. :func:`normalize` pattern-matches the
raw value and either returns an instance of the requested shape or raises a
:class:`~patchguard.errors.ParameterError` naming the violated constraint.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Final, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import MutationError, ParameterError
from .models import FileMutation, ValidationOptions
from .validation.commands import VALIDATION_TYPES

LOGGER = logging.getLogger(__name__)

_MAX_DEPTH: Final[int] = 8


class ParamShape(BaseModel):
    """Base class for parameter shapes understood by :func:`normalize`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    label: ClassVar[str] = "parameter"
    required_field: ClassVar[str]
    array_field: ClassVar[bool] = False
    bare_string: ClassVar[bool] = False
    alternate_fields: ClassVar[tuple[str, ...]] = ()
    min_items_message: ClassVar[str] = "At least one item is required"
    error_type: ClassVar[type[ParameterError]] = ParameterError


class FileBatchParams(ParamShape):
    """Payload of the file-mutation call."""

    label = "file writer"
    required_field = "files"
    array_field = True
    alternate_fields = ("file", "data")
    min_items_message = "At least one file is required"
    error_type = MutationError

    files: tuple[FileMutation, ...] = Field(min_length=1)


class PathListParams(ParamShape):
    """Payload naming one or more file paths."""

    label = "path list"
    required_field = "paths"
    array_field = True
    alternate_fields = ("path", "files")
    min_items_message = "At least one path is required"

    paths: tuple[str, ...] = Field(min_length=1)

    @field_validator("paths")
    @classmethod
    def _reject_blank_paths(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not item.strip() for item in value):
            raise ValueError("paths cannot be empty")
        return value


class CommandParams(ParamShape):
    """Payload of a shell command invocation; a bare string is the command itself."""

    label = "command"
    required_field = "command"
    bare_string = True
    alternate_fields = ("cmd",)

    command: str = Field(min_length=1)
    timeout: PositiveFloat | None = None

    @field_validator("command")
    @classmethod
    def _reject_blank_command(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Command cannot be empty")
        return value


class ValidationParams(ParamShape):
    """Payload of the validation call; a bare string names the validation type."""

    label = "validation"
    required_field = "type"
    bare_string = True
    alternate_fields = ("validation_type",)

    type: str
    options: ValidationOptions = Field(default_factory=ValidationOptions)

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        if value not in VALIDATION_TYPES:
            raise ValueError(f"unsupported validation type '{value}'; expected one of {', '.join(VALIDATION_TYPES)}")
        return value


ShapeT = TypeVar("ShapeT", bound=ParamShape)


def normalize(raw: object, shape: type[ShapeT]) -> ShapeT:
    """Return ``raw`` coerced into ``shape``.

    Tried in order: an object that already carries the required field is
    validated as-is; a string is JSON-decoded and retried (or, for shapes
    that accept one, used as the bare value); an array is wrapped under the
    shape's array field; an object missing the field is remapped once from a
    small set of alternate field names.

    Raises:
        ParameterError: The payload violates ``shape``. ``MutationError`` for
            file batches.
    """

    return _normalize(raw, shape, depth=0)


def _normalize(raw: object, shape: type[ShapeT], *, depth: int) -> ShapeT:
    if isinstance(raw, shape):
        return raw
    if depth > _MAX_DEPTH:
        raise _reject(shape, "Parameter payload is nested too deeply", constraint="depth")

    match raw:
        case BaseModel():
            return _normalize(raw.model_dump(), shape, depth=depth + 1)
        case Mapping():
            return _from_mapping(raw, shape, depth=depth)
        case str():
            return _from_string(raw, shape, depth=depth)
        case list() | tuple():
            return _from_sequence(raw, shape, depth=depth)
        case None:
            raise _reject(
                shape,
                f"Missing {shape.label} parameters",
                constraint="missing_field",
                field=shape.required_field,
            )
        case _:
            raise _unsupported(shape, raw)


def _from_mapping(raw: Mapping[Any, Any], shape: type[ShapeT], *, depth: int) -> ShapeT:
    field = shape.required_field
    if field in raw:
        value = raw[field]
        if shape.array_field and isinstance(value, Sequence) and not isinstance(value, str) and not value:
            raise _reject(shape, shape.min_items_message, constraint="min_items", field=field)
        return _validate(dict(raw), shape)

    for alternate in shape.alternate_fields:
        if alternate in raw and _remappable(raw[alternate], shape):
            LOGGER.debug("remapping %s parameter field '%s' to '%s'", shape.label, alternate, field)
            remapped = {key: value for key, value in raw.items() if key != alternate}
            remapped[field] = raw[alternate]
            return _normalize(remapped, shape, depth=depth + 1)

    raise _reject(
        shape,
        f"Missing required field '{field}' in {shape.label} parameters",
        constraint="missing_field",
        field=field,
    )


def _from_string(raw: str, shape: type[ShapeT], *, depth: int) -> ShapeT:
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        if shape.bare_string:
            return _bare_string(raw, shape, depth=depth)
        raise _reject(shape, f"Invalid JSON string: {exc.msg}", constraint="invalid_json") from exc

    if shape.bare_string and not isinstance(decoded, (Mapping, list, str)):
        # "123" or "true" decode to scalars; treat them as the literal value.
        return _bare_string(raw, shape, depth=depth)
    return _normalize(decoded, shape, depth=depth + 1)


def _bare_string(raw: str, shape: type[ShapeT], *, depth: int) -> ShapeT:
    if not raw.strip():
        raise _reject(
            shape,
            f"{shape.required_field.capitalize()} cannot be empty",
            constraint="min_length",
            field=shape.required_field,
        )
    return _normalize({shape.required_field: raw}, shape, depth=depth + 1)


def _from_sequence(raw: Sequence[Any], shape: type[ShapeT], *, depth: int) -> ShapeT:
    if not shape.array_field:
        raise _unsupported(shape, raw)
    if not raw:
        raise _reject(shape, shape.min_items_message, constraint="min_items", field=shape.required_field)
    return _normalize({shape.required_field: list(raw)}, shape, depth=depth + 1)


def _remappable(value: object, shape: type[ParamShape]) -> bool:
    if shape.array_field:
        return isinstance(value, (list, tuple))
    return isinstance(value, str)


def _validate(data: Mapping[str, Any], shape: type[ShapeT]) -> ShapeT:
    try:
        return shape.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or shape.required_field
        message = str(first["msg"]).removeprefix("Value error, ")
        raise _reject(
            shape,
            f"Invalid {shape.label} parameters: {location}: {message}",
            constraint=str(first["type"]),
            field=location,
        ) from exc


def _unsupported(shape: type[ParamShape], raw: object) -> ParameterError:
    expected = f"object with '{shape.required_field}' property, JSON string"
    if shape.array_field:
        expected += ", or array"
    elif shape.bare_string:
        expected += ", or plain string"
    return _reject(
        shape,
        f"Unsupported parameter format ({type(raw).__name__}). Expected {expected}",
        constraint="type",
    )


def _reject(
    shape: type[ParamShape],
    message: str,
    *,
    constraint: str,
    field: str | None = None,
) -> ParameterError:
    return shape.error_type(message, constraint=constraint, field=field)


__all__ = [
    "CommandParams",
    "FileBatchParams",
    "ParamShape",
    "PathListParams",
    "ValidationParams",
    "normalize",
]
