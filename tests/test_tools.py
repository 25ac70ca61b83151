# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the dispatcher-facing entry points."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from patchguard.config import Config, OutputConfig, WriterConfig
from patchguard.errors import MutationError, ParameterError, WriteError
from patchguard.tools import validate_code, write_files


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(writer=WriterConfig(root=tmp_path), output=OutputConfig(emoji=False))


def test_write_files_accepts_json_payload(config: Config, tmp_path: Path) -> None:
    payload = json.dumps({"files": [{"path": "docs/readme.md", "content": "# Title\n"}]})

    report = write_files(payload, config=config)

    assert report.startswith("File operation completed: 1/1 files written successfully")
    assert "docs/readme.md" in report
    assert (tmp_path / "docs" / "readme.md").read_text(encoding="utf-8") == "# Title\n"


def test_write_files_rejects_empty_batch(config: Config) -> None:
    with pytest.raises(MutationError, match="At least one file is required"):
        write_files({"files": []}, config=config)


def test_write_files_rejects_lone_surrogate(config: Config, tmp_path: Path) -> None:
    with pytest.raises(MutationError):
        write_files('{"files": [{"path": "a.txt", "content": "\\ud800"}]}', config=config)

    assert not (tmp_path / "a.txt").exists()


def test_write_files_reports_superseded_duplicates(config: Config, tmp_path: Path) -> None:
    report = write_files(
        [{"path": "d.txt", "content": "1"}, {"path": "d.txt", "content": "2"}],
        config=config,
    )

    assert report.startswith("File operation completed: 2/2 files written successfully")
    assert "d.txt (superseded)" in report
    assert (tmp_path / "d.txt").read_text(encoding="utf-8") == "2"


def test_write_files_propagates_write_error(config: Config, tmp_path: Path) -> None:
    (tmp_path / "blocker").write_text("", encoding="utf-8")
    with pytest.raises(WriteError):
        write_files([{"path": "blocker/a.txt", "content": "x"}], config=config)


def test_validate_code_accepts_bare_type(config: Config) -> None:
    report = validate_code("custom", config=config)

    assert "VALIDATION: CUSTOM" in report
    assert "Status: FAILED" in report
    assert "No default command for validation type: custom" in report


def test_validate_code_runs_requested_command(config: Config, tmp_path: Path) -> None:
    report = validate_code(
        {"type": "build", "options": {"command": "printf 'built\\n'", "directory": str(tmp_path)}},
        config=config,
    )

    assert "Status: PASSED" in report
    assert report.endswith("Command: printf 'built\\n'")


def test_validate_code_rejects_unknown_type(config: Config) -> None:
    with pytest.raises(ParameterError):
        validate_code({"type": "cobol"}, config=config)
