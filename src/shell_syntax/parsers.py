# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Convert shell syntax-check output into diagnostics."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from .dialects import Dialect
from .interfaces import Buffer
from .models import Diagnostic, DiagnosticSet, Severity, TextRange


@dataclass(frozen=True, slots=True)
class DialectGrammar:
    """Single-line error grammar emitted by one dialect's ``-n`` mode.

    Attributes:
        dialect: Dialect whose output the grammar understands.
        pattern: Regular expression that must match a whole output line.
        prefix_group: Group holding the script name prefix.
        line_group: Group holding the one-based line number.
        message_group: Group holding the human-readable message.
    """

    dialect: Dialect
    pattern: re.Pattern[str]
    prefix_group: int = 1
    line_group: int = 2
    message_group: int = 3

    @property
    def source(self) -> str:
        """Return the label attached to diagnostics from this grammar."""

        return self.dialect.value


GRAMMARS: Final[Mapping[Dialect, DialectGrammar]] = MappingProxyType(
    {
        # script.sh: line 4: syntax error near unexpected token `fi'
        Dialect.BASH: DialectGrammar(Dialect.BASH, re.compile(r"^(.+): line (\d+): (.+)$")),
        # sample.zsh:5: parse error near `fi'
        Dialect.ZSH: DialectGrammar(Dialect.ZSH, re.compile(r"^(.+):(\d+): (.+)$")),
        # sample.sh: 5: Syntax error: "fi" unexpected
        Dialect.SH: DialectGrammar(Dialect.SH, re.compile(r"^(.+): (\d+): (.+)$")),
    }
)


def iter_pattern_matches(lines: Sequence[str], pattern: re.Pattern[str]) -> Iterator[re.Match[str]]:
    """Yield matches of ``pattern`` against each entry in ``lines``.

    Args:
        lines: Raw output lines emitted by a checker.
        pattern: Compiled grammar that must match the whole line.

    Yields:
        re.Match[str]: One match per matching line, in input order.
    """

    for raw_line in lines:
        line = raw_line.removesuffix("\r")
        if not line:
            continue
        match = pattern.fullmatch(line)
        if match:
            yield match


def line_range(buffer: Buffer, line: int) -> TextRange:
    """Return a range spanning the whole of ``line``, clamped into ``buffer``.

    Checker line numbers are not guaranteed to be in bounds (errors reported at
    end of file point one line past the last one), so out-of-range values snap
    to the nearest existing line.

    Args:
        buffer: Document the diagnostic refers to.
        line: Zero-based line index reported by the checker.

    Returns:
        TextRange: Range from column 0 to the end of the clamped line.
    """

    if buffer.line_count < 1:
        return TextRange.full_line(0, 0)
    clamped = min(max(line, 0), buffer.line_count - 1)
    return TextRange.full_line(clamped, len(buffer.line_at(clamped)))


def normalize(buffer: Buffer, output: str, dialect: Dialect) -> DiagnosticSet:
    """Parse ``output`` from ``dialect``'s checker into diagnostics for ``buffer``.

    Lines that do not match the dialect grammar are dropped; checkers print
    context lines that are not errors in their own right.

    Args:
        buffer: Document whose file was checked.
        output: Standard error captured from the checker.
        dialect: Dialect whose grammar should be applied.

    Returns:
        DiagnosticSet: Diagnostics in the order they were reported.
    """

    grammar = GRAMMARS[dialect]
    diagnostics: list[Diagnostic] = []
    for match in iter_pattern_matches(output.split("\n"), grammar.pattern):
        line_number = int(match.group(grammar.line_group))
        diagnostics.append(
            Diagnostic(
                range=line_range(buffer, line_number - 1),
                message=match.group(grammar.message_group),
                source=grammar.source,
                severity=Severity.ERROR,
            )
        )
    return tuple(diagnostics)


__all__ = [
    "GRAMMARS",
    "DialectGrammar",
    "iter_pattern_matches",
    "line_range",
    "normalize",
]
