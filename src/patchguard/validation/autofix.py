# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Re-run a tool's fix variant after a failed validation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from ..errors import CommandSpawnError, CommandTimeoutError
from ..models import AutoFixReport, ValidationOptions
from ..process_utils import CommandRunner, run_shell_command
from .commands import CommandTable, quote_files

LOGGER = logging.getLogger(__name__)

_NO_FIX_AVAILABLE: Final[str] = "No auto-fix available for this validation type."


class AutoFixer:
    """Invoke the registered fix command for a validation type."""

    def __init__(self, table: CommandTable, *, runner: CommandRunner = run_shell_command) -> None:
        self._table = table
        self._runner = runner

    def attempt(
        self,
        validation_type: str,
        options: ValidationOptions,
        *,
        cwd: Path,
        timeout: float,
    ) -> AutoFixReport:
        """Run the fix variant and report its output; never raises for tool failures."""

        fix_command = self._table.fix_for(validation_type)
        if fix_command is None:
            return AutoFixReport(command="", success=False, output=_NO_FIX_AVAILABLE)
        if options.files:
            fix_command = f"{fix_command} {quote_files(options.files)}"

        LOGGER.info("attempting auto-fix for %s: %s", validation_type, fix_command)
        try:
            completed = self._runner(fix_command, cwd=cwd, timeout=timeout)
        except (CommandSpawnError, CommandTimeoutError) as exc:
            LOGGER.warning("auto-fix for %s did not run to completion: %s", validation_type, exc)
            return AutoFixReport(command=fix_command, success=False, output=str(exc))

        if completed.ok:
            return AutoFixReport(command=fix_command, success=True, output=completed.stdout)
        return AutoFixReport(
            command=fix_command,
            success=False,
            output=f"command exited with status {completed.returncode}\n{completed.output}",
        )


__all__ = ["AutoFixer"]
