# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render per-file check results for the command line."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from rich.console import Console
from rich.text import Text

from .dialects import Dialect
from .logging import fail, info, ok, section, warn
from .models import Diagnostic


class CheckStatus(str, Enum):
    """What happened to one file during a check run."""

    CHECKED = "checked"
    SKIPPED = "skipped"
    FAILED = "failed"


class FileReport(BaseModel):
    """Outcome of checking a single file."""

    model_config = ConfigDict(frozen=True)

    path: Path
    uri: str
    status: CheckStatus
    dialect: Dialect | None = None
    diagnostics: tuple[Diagnostic, ...] = Field(default_factory=tuple)


_REPORTS_ADAPTER: TypeAdapter[list[FileReport]] = TypeAdapter(list[FileReport])


def format_diagnostic(path: Path, diagnostic: Diagnostic) -> str:
    """Return ``path:line:col: message [source]`` with one-based positions."""

    start = diagnostic.range.start
    return f"{path}:{start.line + 1}:{start.character + 1}: {diagnostic.message} [{diagnostic.source}]"


def diagnostic_count(reports: Sequence[FileReport]) -> int:
    """Return the number of diagnostics across ``reports``."""

    return sum(len(report.diagnostics) for report in reports)


def render_concise(
    reports: Sequence[FileReport],
    *,
    console: Console,
    use_emoji: bool,
    use_color: bool,
) -> None:
    """Print one line per diagnostic followed by a summary.

    Args:
        reports: Results to render, in the order files were given.
        console: Console receiving the diagnostic lines.
        use_emoji: Whether summary lines may include emoji glyphs.
        use_color: Whether summary lines may be coloured.
    """

    for report in reports:
        for diagnostic in report.diagnostics:
            line = Text(format_diagnostic(report.path, diagnostic))
            if use_color:
                line.stylize("bold", 0, len(str(report.path)))
            console.print(line)
    section("Summary", use_color=use_color)
    for report in reports:
        if report.status is CheckStatus.FAILED:
            dialect = report.dialect.value if report.dialect is not None else "shell"
            warn(f"{report.path}: {dialect} checker could not be launched", use_emoji=use_emoji, use_color=use_color)

    checked = [report for report in reports if report.status is CheckStatus.CHECKED]
    total = diagnostic_count(reports)
    if total:
        affected = sum(1 for report in checked if report.diagnostics)
        fail(f"{total} syntax error(s) in {affected} file(s)", use_emoji=use_emoji, use_color=use_color)
    elif checked:
        ok(f"No syntax errors in {len(checked)} file(s)", use_emoji=use_emoji, use_color=use_color)
    elif not any(report.status is CheckStatus.FAILED for report in reports):
        info("No shell scripts to check", use_emoji=use_emoji, use_color=use_color)


def render_json(reports: Sequence[FileReport]) -> str:
    """Return ``reports`` serialised as an indented JSON array."""

    return _REPORTS_ADAPTER.dump_json(list(reports), indent=2).decode("utf-8")


__all__ = [
    "CheckStatus",
    "FileReport",
    "diagnostic_count",
    "format_diagnostic",
    "render_concise",
    "render_json",
]
