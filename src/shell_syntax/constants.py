# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across shell_syntax modules."""

from __future__ import annotations

from typing import Final

SHELLSCRIPT_LANGUAGE_ID: Final[str] = "shellscript"
FILE_SCHEME: Final[str] = "file"

DIAGNOSTIC_COLLECTION_NAME: Final[str] = "shell-syntax"

SYNTAX_CHECK_FLAG: Final[str] = "-n"

ZSH_EXTENSIONS: Final[tuple[str, ...]] = (
    ".zsh",
    ".zshrc",
    ".zprofile",
    ".zlogin",
    ".zlogout",
    ".zshenv",
    ".zsh-theme",
)

# File-backed buffers use these to decide whether a path is a shell script.
SHELL_SUFFIXES: Final[frozenset[str]] = frozenset({".sh", ".bash", ".ksh", ".command", *ZSH_EXTENSIONS})
SHELL_FILENAMES: Final[frozenset[str]] = frozenset(
    {
        ".bashrc",
        ".bash_profile",
        ".bash_login",
        ".bash_logout",
        ".bash_aliases",
        ".profile",
        ".zshrc",
        ".zprofile",
        ".zlogin",
        ".zlogout",
        ".zshenv",
    }
)
SHEBANG_INTERPRETERS: Final[frozenset[str]] = frozenset({"sh", "bash", "zsh", "ksh", "dash"})

TIMEOUT_EXIT_CODE: Final[int] = 124

__all__ = [
    "DIAGNOSTIC_COLLECTION_NAME",
    "FILE_SCHEME",
    "SHEBANG_INTERPRETERS",
    "SHELLSCRIPT_LANGUAGE_ID",
    "SHELL_FILENAMES",
    "SHELL_SUFFIXES",
    "SYNTAX_CHECK_FLAG",
    "TIMEOUT_EXIT_CODE",
    "ZSH_EXTENSIONS",
]
