# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``check`` and ``detect`` command implementations."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from ..classifier import classify
from ..config import ConfigError, ConfigLoader, ShellSyntaxConfig
from ..dialects import Dialect
from ..documents import FileBuffer, InMemoryDiagnosticSink, WorkspaceFolders
from ..interfaces import ProcessRunner
from ..logging import configure_logging
from ..process import AsyncProcessRunner
from ..reporting import CheckStatus, FileReport, diagnostic_count, render_concise, render_json
from ..session import DiagnosticSession, SessionDispatcher
from .shared import EXIT_DIAGNOSTICS, EXIT_ERROR, EXIT_OK, CLIError, CLILogger, build_cli_logger


class OutputFormat(str, Enum):
    """Report formats supported by ``check``."""

    CONCISE = "concise"
    JSON = "json"


PathsArgument = Annotated[
    list[Path],
    typer.Argument(exists=True, dir_okay=False, readable=True, help="Shell scripts to check."),
]
RootOption = Annotated[
    Path | None,
    typer.Option("--root", file_okay=False, help="Project folder holding configuration (default: cwd)."),
]
DefaultShellOption = Annotated[
    Dialect | None,
    typer.Option("--default-shell", case_sensitive=False, help="Dialect used when no extension or #! decides."),
]
NoColorOption = Annotated[bool, typer.Option("--no-color", help="Disable ANSI colour output.")]
NoEmojiOption = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in summaries.")]
DebugOption = Annotated[bool, typer.Option("--debug", help="Log skipped checks and configuration sources.")]


async def collect_reports(
    buffers: Sequence[FileBuffer],
    *,
    config: ShellSyntaxConfig,
    workspace: WorkspaceFolders,
    runner: ProcessRunner | None = None,
) -> list[FileReport]:
    """Check ``buffers`` through a diagnostic session and summarise each file.

    Args:
        buffers: Clean file-backed buffers, as if open at startup.
        config: Active configuration.
        workspace: Locator providing the checker working directory.
        runner: Process runner override; defaults to :class:`AsyncProcessRunner`.

    Returns:
        list[FileReport]: One report per buffer, in input order.
    """

    sink = InMemoryDiagnosticSink(name=config.collection_name)
    session = DiagnosticSession(
        sink=sink,
        runner=runner or AsyncProcessRunner(timeout=config.timeout),
        workspace=workspace,
        default_shell=config.default_shell,
    )
    dispatcher = SessionDispatcher(session)
    dispatcher.start(buffers)
    await dispatcher.drain()

    reports: list[FileReport] = []
    for buffer in buffers:
        dialect = classify(buffer, config.default_shell)
        diagnostics = sink.get(buffer.uri)
        if dialect is None:
            status = CheckStatus.SKIPPED
        elif diagnostics is None:
            status = CheckStatus.FAILED
        else:
            status = CheckStatus.CHECKED
        reports.append(
            FileReport(
                path=buffer.path,
                uri=buffer.uri,
                status=status,
                dialect=dialect,
                diagnostics=diagnostics or (),
            )
        )
    await dispatcher.shutdown()
    return reports


def _load_config(root: Path, logger: CLILogger) -> ShellSyntaxConfig:
    try:
        result = ConfigLoader.for_root(root).load_with_trace()
    except ConfigError as exc:
        raise CLIError(str(exc)) from exc
    for update in result.updates:
        logger.debug(f"config field={update.field} source={update.source} value={update.value}")
    return result.config


def _load_buffers(paths: Sequence[Path]) -> list[FileBuffer]:
    buffers: list[FileBuffer] = []
    for path in paths:
        try:
            buffers.append(FileBuffer.from_path(path))
        except OSError as exc:
            raise CLIError(f"Unable to read {path}: {exc}") from exc
    return buffers


def _exit_code(reports: Sequence[FileReport]) -> int:
    attempted = [report for report in reports if report.status is not CheckStatus.SKIPPED]
    if attempted and all(report.status is CheckStatus.FAILED for report in attempted):
        return EXIT_ERROR
    if diagnostic_count(reports):
        return EXIT_DIAGNOSTICS
    return EXIT_OK


def check_command(
    paths: PathsArgument,
    root: RootOption = None,
    default_shell: DefaultShellOption = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", case_sensitive=False, help="Report format."),
    ] = OutputFormat.CONCISE,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", min=0, help="Seconds before a checker is killed."),
    ] = None,
    no_color: NoColorOption = False,
    no_emoji: NoEmojiOption = False,
    debug: DebugOption = False,
) -> None:
    """Check shell scripts for syntax errors with bash, zsh, or sh."""

    logger = build_cli_logger(emoji=not no_emoji, debug=debug, no_color=no_color)
    configure_logging(debug=debug)
    project_root = (root or Path.cwd()).resolve()
    try:
        config = _load_config(project_root, logger)
        overrides: dict[str, object] = {}
        if default_shell is not None:
            overrides["default_shell"] = default_shell
        if timeout is not None:
            overrides["timeout"] = timeout
        if overrides:
            config = config.model_copy(update=overrides)
        buffers = _load_buffers(paths)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    logger.debug(f"root={project_root} default_shell={config.default_shell.value} files={len(buffers)}")
    reports = asyncio.run(
        collect_reports(buffers, config=config, workspace=WorkspaceFolders.of([project_root])),
    )
    if output_format is OutputFormat.JSON:
        logger.echo(render_json(reports))
    else:
        render_concise(reports, console=logger.console, use_emoji=logger.use_emoji, use_color=logger.use_color)
    raise typer.Exit(code=_exit_code(reports))


def detect_command(
    paths: PathsArgument,
    root: RootOption = None,
    default_shell: DefaultShellOption = None,
    no_color: NoColorOption = False,
    no_emoji: NoEmojiOption = False,
    debug: DebugOption = False,
) -> None:
    """Print the dialect that would check each file."""

    logger = build_cli_logger(emoji=not no_emoji, debug=debug, no_color=no_color)
    try:
        config = _load_config((root or Path.cwd()).resolve(), logger)
        buffers = _load_buffers(paths)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    fallback = default_shell or config.default_shell
    for buffer in buffers:
        dialect = classify(buffer, fallback)
        logger.echo(f"{buffer.path}: {dialect.value if dialect is not None else 'skipped'}")


__all__ = [
    "OutputFormat",
    "check_command",
    "collect_reports",
    "detect_command",
]
