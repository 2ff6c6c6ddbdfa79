# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for command-line report rendering."""

from __future__ import annotations

import json
from io import StringIO
from pathlib import Path

from rich.console import Console

from shell_syntax.dialects import Dialect
from shell_syntax.models import Diagnostic, TextRange
from shell_syntax.reporting import CheckStatus, FileReport, format_diagnostic, render_concise, render_json


def _report(status: CheckStatus = CheckStatus.CHECKED, *messages: str) -> FileReport:
    diagnostics = tuple(
        Diagnostic(range=TextRange.full_line(index, 10), message=message, source="bash")
        for index, message in enumerate(messages)
    )
    path = Path("/work/deploy.sh")
    return FileReport(path=path, uri=path.as_uri(), status=status, dialect=Dialect.BASH, diagnostics=diagnostics)


def test_format_diagnostic_uses_one_based_positions() -> None:
    diag = Diagnostic(range=TextRange.full_line(3, 8), message="syntax error", source="sh")
    assert format_diagnostic(Path("x.sh"), diag) == "x.sh:4:1: syntax error [sh]"


def test_render_concise_lists_diagnostics(capsys) -> None:
    buffer = StringIO()
    console = Console(file=buffer, no_color=True, width=200)

    render_concise([_report(CheckStatus.CHECKED, "first", "second")], console=console, use_emoji=False, use_color=False)

    lines = buffer.getvalue().splitlines()
    assert lines == ["/work/deploy.sh:1:1: first [bash]", "/work/deploy.sh:2:1: second [bash]"]
    assert "2 syntax error(s) in 1 file(s)" in capsys.readouterr().out


def test_render_concise_success_and_failures(capsys) -> None:
    console = Console(file=StringIO(), no_color=True)

    render_concise(
        [_report(CheckStatus.CHECKED), _report(CheckStatus.FAILED)],
        console=console,
        use_emoji=False,
        use_color=False,
    )

    out = capsys.readouterr().out
    assert "─── Summary ───" in out
    assert out.index("Summary") < out.index("bash checker could not be launched")
    assert "bash checker could not be launched" in out
    assert "No syntax errors in 1 file(s)" in out


def test_render_json_round_trips_structure() -> None:
    payload = json.loads(render_json([_report(CheckStatus.CHECKED, "boom")]))
    assert payload[0]["status"] == "checked"
    assert payload[0]["dialect"] == "bash"
    diag = payload[0]["diagnostics"][0]
    assert diag["message"] == "boom"
    assert diag["range"]["start"] == {"line": 0, "character": 0}
    assert diag["severity"] == "error"


def test_render_concise_notes_when_nothing_was_checked(capsys) -> None:
    render_concise([_report(CheckStatus.SKIPPED)], console=Console(file=StringIO()), use_emoji=False, use_color=False)

    assert "No shell scripts to check" in capsys.readouterr().out
