# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decide which shell dialect should validate a buffer."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

from .constants import FILE_SCHEME, SHELLSCRIPT_LANGUAGE_ID, SYNTAX_CHECK_FLAG, ZSH_EXTENSIONS
from .dialects import Dialect
from .interfaces import Buffer
from .models import CheckInvocation

ZSH_SHEBANG_PATTERN: Final[re.Pattern[str]] = re.compile(r"^#!.*\bzsh\b")
SH_SHEBANG_PATTERN: Final[re.Pattern[str]] = re.compile(r"^#!.*\bsh\b")


def is_saved_shell_buffer(buffer: Buffer) -> bool:
    """Return whether ``buffer`` is a shell script whose content is on disk.

    Args:
        buffer: Document offered by the host.

    Returns:
        bool: ``True`` for clean ``file``-scheme buffers tagged as shell scripts.
    """

    return not buffer.is_dirty and buffer.scheme == FILE_SCHEME and buffer.language_id == SHELLSCRIPT_LANGUAGE_ID


def first_line(buffer: Buffer) -> str:
    """Return the first line of ``buffer`` without trailing whitespace."""

    if buffer.line_count < 1:
        return ""
    return buffer.line_at(0).rstrip()


def classify(buffer: Buffer, default: Dialect = Dialect.BASH) -> Dialect | None:
    """Return the dialect that should check ``buffer``.

    Rules apply in order and the first match wins: zsh file extensions, a zsh
    shebang, an ``sh`` shebang, then ``default``. Shebang rules only look at
    the first line and match interpreter names as whole words, so
    ``#!/bin/dash`` does not count as ``sh``.

    Args:
        buffer: Document offered by the host.
        default: Dialect used when neither extension nor shebang decides.

    Returns:
        Dialect | None: Chosen dialect, or ``None`` when the buffer must not be
        checked (not a shell script, unsaved, or not backed by a file).
    """

    if not is_saved_shell_buffer(buffer):
        return None
    if str(buffer.path).endswith(ZSH_EXTENSIONS):
        return Dialect.ZSH
    shebang = first_line(buffer)
    if ZSH_SHEBANG_PATTERN.search(shebang):
        return Dialect.ZSH
    if SH_SHEBANG_PATTERN.search(shebang):
        return Dialect.SH
    return default


def build_invocation(buffer: Buffer, dialect: Dialect, cwd: Path) -> CheckInvocation:
    """Return the syntax-check command for ``buffer``.

    Args:
        buffer: Document whose file will be checked.
        dialect: Dialect selected by :func:`classify`.
        cwd: Working directory for the checker process.

    Returns:
        CheckInvocation: ``<dialect> -n <path>`` bound to ``cwd``.
    """

    argv = (dialect.executable, SYNTAX_CHECK_FLAG, str(buffer.path))
    return CheckInvocation(dialect=dialect, argv=argv, cwd=cwd)


__all__ = [
    "SH_SHEBANG_PATTERN",
    "ZSH_SHEBANG_PATTERN",
    "build_invocation",
    "classify",
    "first_line",
    "is_saved_shell_buffer",
]
