# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the shell_syntax package."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .dialects import Dialect


class Severity(str, Enum):
    """Severity levels understood by editor diagnostic collections."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


class Position(BaseModel):
    """Zero-based line/character offset inside a buffer."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(ge=0)


class TextRange(BaseModel):
    """Half-open span between two :class:`Position` values."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    @model_validator(mode="after")
    def _ensure_ordered(self) -> TextRange:
        """Reject ranges whose end precedes their start.

        Returns:
            TextRange: The validated range.

        Raises:
            ValueError: If ``end`` sorts before ``start``.
        """

        if (self.end.line, self.end.character) < (self.start.line, self.start.character):
            raise ValueError("range end must not precede range start")
        return self

    @classmethod
    def full_line(cls, line: int, length: int) -> TextRange:
        """Return a range covering ``line`` from column 0 through ``length``.

        Args:
            line: Zero-based line index.
            length: Number of characters on the line.

        Returns:
            TextRange: Range spanning the whole line.
        """

        return cls(start=Position(line=line, character=0), end=Position(line=line, character=length))


class Diagnostic(BaseModel):
    """Syntax error reported by a shell checker, anchored to a buffer line."""

    model_config = ConfigDict(frozen=True)

    range: TextRange
    message: str
    source: str
    severity: Severity = Severity.ERROR

    @property
    def line(self) -> int:
        """Return the zero-based line the diagnostic starts on."""

        return self.range.start.line


DiagnosticSet: TypeAlias = tuple[Diagnostic, ...]


class CheckInvocation(BaseModel):
    """Command that validates one buffer with one dialect's checker."""

    model_config = ConfigDict(frozen=True)

    dialect: Dialect
    argv: tuple[str, ...]
    cwd: Path

    @field_validator("argv")
    @classmethod
    def _require_command(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Ensure the invocation names an executable.

        Args:
            value: Argument vector supplied by the caller.

        Returns:
            tuple[str, ...]: The unchanged argument vector.

        Raises:
            ValueError: If ``value`` is empty.
        """

        if not value:
            raise ValueError("argv requires at least one argument")
        return value


class ProcessOutcome(BaseModel):
    """Exit status and captured streams of a checker that ran to completion.

    A non-zero :attr:`exit_code` is the normal way for a checker to signal that
    it found syntax errors, so it is not treated as a failure. Checkers that
    could not be started at all never produce an outcome.
    """

    model_config = ConfigDict(frozen=True)

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Return ``True`` when the checker exited with status ``0``."""

        return self.exit_code == 0


__all__ = [
    "CheckInvocation",
    "Diagnostic",
    "DiagnosticSet",
    "Position",
    "ProcessOutcome",
    "Severity",
    "TextRange",
]
