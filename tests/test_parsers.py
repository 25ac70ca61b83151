# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for tool output parsers and the classifier table."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from patchguard.errors import ParseError
from patchguard.parsers import (
    PARSERS,
    ParseContext,
    classify,
    parse_build,
    parse_eslint,
    parse_formatter,
    parse_generic,
    parse_node_check,
    parse_test_output,
    parse_tsc,
    parser_for,
)
from patchguard.severity import IssueCategory, Severity


@pytest.fixture
def context(tmp_path: Path) -> ParseContext:
    return ParseContext(workdir=tmp_path)


def test_tsc_parser_extracts_code_and_location(context: ParseContext) -> None:
    output = "src/a.ts(3,7): error TS2322: Type 'string' is not assignable to type 'number'.\n"

    issues = parse_tsc(output, context)

    assert len(issues) == 1
    issue = issues[0]
    assert (issue.file, issue.line, issue.column) == ("src/a.ts", 3, 7)
    assert issue.rule == "TS2322"
    assert issue.message == "Type 'string' is not assignable to type 'number'."
    assert issue.severity is Severity.ERROR
    assert issue.category is IssueCategory.TYPE
    assert issue.fixable is False


def test_tsc_parser_handles_pretty_and_global_diagnostics(context: ParseContext) -> None:
    output = "\n".join(
        [
            "src/b.ts:10:2 - error TS2304: Cannot find name 'foo'.",
            "",
            "10   foo();",
            "error TS18003: No inputs were found in config file.",
        ],
    )

    issues = parse_tsc(output, context)

    assert [issue.rule for issue in issues] == ["TS2304", "TS18003"]
    assert issues[0].file == "src/b.ts"
    assert issues[1].file is None


def test_eslint_json_and_text_produce_identical_shapes(context: ParseContext) -> None:
    json_output = json.dumps(
        [
            {
                "filePath": "src/app.js",
                "messages": [
                    {
                        "ruleId": "prefer-const",
                        "severity": 2,
                        "message": "'x' is never reassigned. Use 'const' instead.",
                        "line": 1,
                        "column": 5,
                        "fix": {"range": [0, 3], "text": "const"},
                    },
                    {
                        "ruleId": "no-console",
                        "severity": 1,
                        "message": "Unexpected console statement.",
                        "line": 2,
                        "column": 1,
                        "fix": None,
                    },
                ],
            },
        ],
    )
    text_output = "\n".join(
        [
            "src/app.js:1:5: error 'x' is never reassigned. Use 'const' instead. (prefer-const)",
            "src/app.js:2:1: warning Unexpected console statement. (no-console)",
        ],
    )

    from_json = parse_eslint(json_output, context)
    from_text = parse_eslint(text_output, context)

    def shape(issues):
        return [(i.file, i.line, i.column, i.message, i.rule, i.severity, i.category) for i in issues]

    assert shape(from_json) == shape(from_text)
    assert from_json[0].fixable is True
    assert from_json[1].fixable is False
    assert all(issue.category is IssueCategory.LINT for issue in from_text)


def test_eslint_unix_and_stylish_formats(context: ParseContext) -> None:
    unix = "src/app.js:4:10: Missing semicolon. [Error/semi]"
    stylish = "\n".join(
        [
            "/project/src/util.js",
            "  3:1  warning  Unexpected var, use let or const instead  no-var",
            "",
            "✖ 1 problem (0 errors, 1 warning)",
        ],
    )

    unix_issue = parse_eslint(unix, context)[0]
    stylish_issue = parse_eslint(stylish, context)[0]

    assert (unix_issue.rule, unix_issue.severity, unix_issue.line) == ("semi", Severity.ERROR, 4)
    assert stylish_issue.rule == "no-var"
    assert stylish_issue.severity is Severity.WARNING
    assert stylish_issue.message == "Unexpected var, use let or const instead"
    assert (stylish_issue.line, stylish_issue.column) == (3, 1)


def test_eslint_fatal_message_is_syntax(context: ParseContext) -> None:
    payload = [
        {
            "filePath": "src/broken.js",
            "messages": [{"ruleId": None, "fatal": True, "severity": 2, "message": "Parsing error", "line": 1}],
        },
    ]
    issue = parse_eslint(json.dumps(payload), context)[0]
    assert issue.category is IssueCategory.SYNTAX
    assert issue.rule is None


def test_eslint_malformed_json_raises_parse_error(context: ParseContext) -> None:
    with pytest.raises(ParseError):
        parse_eslint('["error: not an eslint result"]', context)


def test_node_check_parser_reports_syntax_error(context: ParseContext) -> None:
    output = "\n".join(
        [
            "app.js:3",
            "const = 5;",
            "      ^",
            "",
            "SyntaxError: Unexpected token '='",
            "    at internalCompileFunction (node:internal/vm:76:18)",
        ],
    )

    issues = parse_node_check(output, context)

    assert len(issues) == 1
    issue = issues[0]
    assert (issue.file, issue.line, issue.column) == ("app.js", 3, 7)
    assert issue.message == "Unexpected token '='"
    assert issue.rule == "SyntaxError"
    assert issue.category is IssueCategory.SYNTAX


def test_node_check_parser_falls_back_to_generic(context: ParseContext) -> None:
    issues = parse_node_check("node: fatal error while loading", context)
    assert len(issues) == 1
    assert issues[0].category is IssueCategory.CUSTOM


def test_test_parser_attaches_current_file(context: ParseContext) -> None:
    output = "\n".join(
        [
            "PASS src/ok.test.js",
            "FAIL src/sum.test.js",
            "  ✕ adds numbers (5 ms)",
            "  ✓ subtracts numbers (1 ms)",
            "FAILED tests/test_api.py::test_login - AssertionError: 401 != 200",
        ],
    )

    issues = parse_test_output(output, context)

    assert [issue.file for issue in issues] == ["src/sum.test.js", "src/sum.test.js", "tests/test_api.py"]
    assert issues[0].message == "Test suite failed"
    assert issues[1].message == "✕ adds numbers (5 ms)"
    assert issues[2].message == "test_login - AssertionError: 401 != 200"
    assert all(issue.category is IssueCategory.TEST for issue in issues)


def test_build_parser_splits_errors_and_warnings(context: ParseContext) -> None:
    output = "Compiling...\nERROR in ./src/index.ts\nWARNING in asset size limit\nDone"

    issues = parse_build(output, context)

    assert [(issue.severity, issue.category) for issue in issues] == [
        (Severity.ERROR, IssueCategory.BUILD),
        (Severity.WARNING, IssueCategory.BUILD),
    ]
    assert issues[0].message == "ERROR in ./src/index.ts"


def test_formatter_parser_strips_prettier_prefixes(context: ParseContext) -> None:
    output = "\n".join(
        [
            "Checking formatting...",
            "[warn] src/a.ts",
            "[warn] styles/main.css",
            "[warn] Code style issues found in 2 files. Run Prettier with --write to fix.",
        ],
    )

    issues = parse_formatter(output, context)

    assert [issue.file for issue in issues] == ["src/a.ts", "styles/main.css"]
    assert all(issue.fixable and issue.category is IssueCategory.FORMAT for issue in issues)


def test_generic_parser_keywords(context: ParseContext) -> None:
    output = "Traceback follows\nException: boom\nWARN deprecated flag\nall good"

    issues = parse_generic(output, context)

    assert [issue.severity for issue in issues] == [Severity.ERROR, Severity.WARNING]


def test_parser_table_is_closed_and_falls_back() -> None:
    with pytest.raises(TypeError):
        PARSERS["python"] = parse_generic  # type: ignore[index]
    assert parser_for("custom") is parse_generic
    assert parser_for("unknown") is parse_generic
    assert parser_for("typescript") is parse_tsc


def test_classify_degrades_to_generic_on_parse_error(context: ParseContext) -> None:
    errors, warnings = classify("eslint", '["error: not an eslint result"]', context)

    assert len(errors) == 1
    assert errors[0].category is IssueCategory.CUSTOM
    assert warnings == []


def test_classify_routes_info_to_warnings(context: ParseContext) -> None:
    payload = [{"filePath": "a.js", "messages": [{"ruleId": "x", "severity": 0, "message": "note", "line": 1}]}]

    errors, warnings = classify("eslint", json.dumps(payload), context)

    assert errors == []
    assert [issue.severity for issue in warnings] == [Severity.INFO]
