# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the write and validate commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import Config
from ..config_loader import load_config
from ..errors import ConfigError, ParameterError, WriteError
from ..logging import configure_logging
from ..models import ValidationOptions
from ..normalizer import FileBatchParams, normalize
from ..reporting import format_validation_result, format_write_outcomes
from ..validation import VALIDATION_TYPES, ValidationService
from ..writer import AtomicFileWriter
from .shared import CLIError, CLILogger, build_cli_logger, read_payload
from .typer_ext import create_typer

app = create_typer(
    name="patchguard",
    help="Transactional file writes and code validation.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode=None,
)

RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        help="Project root used for configuration lookup and as the write boundary.",
        file_okay=False,
    ),
]
NoEmojiOption = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in output.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _prepare(root: Path, *, verbose: bool, no_emoji: bool) -> tuple[Config, CLILogger]:
    try:
        config = load_config(root)
    except ConfigError as exc:
        build_cli_logger(emoji=not no_emoji).fail(str(exc))
        raise typer.Exit(code=2) from exc
    configure_logging("DEBUG" if verbose else config.log_level)
    use_emoji = config.output.emoji and not no_emoji
    logger = build_cli_logger(emoji=use_emoji, color=None if config.output.color else False)
    return config.model_copy(update={"output": config.output.model_copy(update={"emoji": use_emoji})}), logger


@app.command("write")
def write_command(
    payload: Annotated[
        str,
        typer.Argument(help="JSON payload, '@path' to read it from a file, or '-' for stdin."),
    ],
    root: RootOption = Path("."),
    no_emoji: NoEmojiOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Apply a batch of file mutations atomically."""

    config, logger = _prepare(root, verbose=verbose, no_emoji=no_emoji)
    try:
        params = normalize(read_payload(payload), FileBatchParams)
        outcomes = AtomicFileWriter(config.writer).apply_batch(params.files)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except WriteError as exc:
        logger.fail(str(exc))
        for failure in exc.rollback_failures:
            logger.warn(str(failure))
        logger.echo(format_write_outcomes(exc.outcomes, use_emoji=config.output.emoji))
        raise typer.Exit(code=1) from exc
    except ParameterError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    logger.echo(format_write_outcomes(outcomes, use_emoji=config.output.emoji))
    logger.ok(f"Batch committed: {len(outcomes)} file(s)")


@app.command("validate")
def validate_command(
    validation_type: Annotated[
        str,
        typer.Argument(metavar="TYPE", help=f"One of: {', '.join(VALIDATION_TYPES)}."),
    ],
    command: Annotated[str | None, typer.Option("--command", help="Run this command verbatim.")] = None,
    files: Annotated[
        list[str] | None,
        typer.Option("--file", "-f", help="File to validate; repeat for several."),
    ] = None,
    config_path: Annotated[str | None, typer.Option("--config", help="Tool configuration file.")] = None,
    output_format: Annotated[str | None, typer.Option("--format", help="ESLint output format.")] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Enable TypeScript strict mode.")] = False,
    fix: Annotated[bool, typer.Option("--fix", help="Attempt an automatic fix when validation fails.")] = False,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", min=0.001, help="Seconds before the command is killed."),
    ] = None,
    directory: Annotated[
        Path | None,
        typer.Option("--directory", file_okay=False, help="Working directory for the command."),
    ] = None,
    root: RootOption = Path("."),
    no_emoji: NoEmojiOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Run a verification tool and report its normalised findings."""

    config, logger = _prepare(root, verbose=verbose, no_emoji=no_emoji)
    if validation_type not in VALIDATION_TYPES:
        logger.fail(f"Unsupported validation type '{validation_type}'; expected one of {', '.join(VALIDATION_TYPES)}")
        raise typer.Exit(code=2)

    options = ValidationOptions(
        command=command,
        files=tuple(files or ()),
        config=config_path,
        format=output_format,
        strict=strict,
        fix=fix,
        timeout=timeout,
        directory=directory,
    )
    result = ValidationService(config.validation).validate(validation_type, options)
    logger.echo(format_validation_result(result, use_emoji=config.output.emoji))
    if not result.success:
        raise typer.Exit(code=1)


__all__ = ["app"]
