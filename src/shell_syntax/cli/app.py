# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .check import check_command, detect_command

app = typer.Typer(
    help="Check bash, zsh, and sh scripts for syntax errors.",
    add_completion=False,
    no_args_is_help=True,
)
app.command(name="check")(check_command)
app.command(name="detect")(detect_command)


def main() -> None:
    """Run the ``shell-syntax`` command line."""

    app()


__all__ = ["app", "main"]
