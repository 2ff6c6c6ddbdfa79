# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Host adapters used when running outside an editor."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .constants import (
    DIAGNOSTIC_COLLECTION_NAME,
    FILE_SCHEME,
    SHEBANG_INTERPRETERS,
    SHELL_FILENAMES,
    SHELL_SUFFIXES,
    SHELLSCRIPT_LANGUAGE_ID,
)
from .interfaces import Buffer
from .models import Diagnostic, DiagnosticSet

PLAINTEXT_LANGUAGE_ID: Final[str] = "plaintext"

_LINE_BREAK: Final[re.Pattern[str]] = re.compile(r"\r\n|\r|\n")
_SHEBANG: Final[re.Pattern[str]] = re.compile(r"^#!\s*(?P<command>\S+)(?P<arguments>.*)$")


def split_lines(text: str) -> tuple[str, ...]:
    """Split ``text`` the way editors count lines.

    A trailing line break starts a final empty line, and empty text is a
    single empty line.
    """

    return tuple(_LINE_BREAK.split(text))


def _shebang_interpreter(line: str) -> str | None:
    match = _SHEBANG.match(line)
    if match is None:
        return None
    command = Path(match.group("command")).name
    if command != "env":
        return command
    # Skip env options such as ``-S`` and variable assignments.
    for argument in match.group("arguments").split():
        if argument.startswith("-") or "=" in argument:
            continue
        return Path(argument).name
    return None


def detect_language_id(path: Path, first_line: str) -> str:
    """Return the editor language identifier for ``path``.

    Args:
        path: File location, used for suffix and dotfile-name checks.
        first_line: First line of the file, used for shebang detection.

    Returns:
        str: ``shellscript`` for shell scripts, ``plaintext`` otherwise.
    """

    if path.name in SHELL_FILENAMES or path.suffix in SHELL_SUFFIXES:
        return SHELLSCRIPT_LANGUAGE_ID
    if _shebang_interpreter(first_line) in SHEBANG_INTERPRETERS:
        return SHELLSCRIPT_LANGUAGE_ID
    return PLAINTEXT_LANGUAGE_ID


@dataclass(frozen=True, slots=True)
class FileBuffer:
    """Immutable snapshot of a file on disk presented as an editor buffer."""

    path: Path
    lines: tuple[str, ...]
    language_id: str
    is_dirty: bool = False
    scheme: str = FILE_SCHEME

    @classmethod
    def from_path(cls, path: Path, *, language_id: str | None = None) -> FileBuffer:
        """Load ``path`` from disk.

        Args:
            path: File to read; undecodable bytes are replaced.
            language_id: Explicit language identifier overriding detection.

        Returns:
            FileBuffer: Clean buffer holding the file's current content.

        Raises:
            OSError: If the file cannot be read.
        """

        resolved = path.resolve()
        text = resolved.read_text(encoding="utf-8", errors="replace")
        lines = split_lines(text)
        language = language_id or detect_language_id(resolved, lines[0])
        return cls(path=resolved, lines=lines, language_id=language)

    @property
    def uri(self) -> str:
        """Return the ``file://`` URI of the buffer."""

        return self.path.as_uri()

    @property
    def line_count(self) -> int:
        """Return the number of lines in the buffer."""

        return len(self.lines)

    def line_at(self, index: int) -> str:
        """Return line ``index`` without its terminator.

        Raises:
            IndexError: If ``index`` is outside the buffer.
        """

        if index < 0 or index >= len(self.lines):
            raise IndexError(f"line {index} is out of range for {self.path}")
        return self.lines[index]


@dataclass(slots=True)
class InMemoryDiagnosticSink:
    """Diagnostic collection kept in a dictionary keyed by URI."""

    name: str = DIAGNOSTIC_COLLECTION_NAME
    _store: dict[str, DiagnosticSet] = field(default_factory=dict)

    def set(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        """Replace the diagnostics published for ``uri``."""

        self._store[uri] = tuple(diagnostics)

    def delete(self, uri: str) -> None:
        """Remove the diagnostics published for ``uri``."""

        self._store.pop(uri, None)

    def get(self, uri: str) -> DiagnosticSet | None:
        """Return the diagnostics published for ``uri``, if any."""

        return self._store.get(uri)

    def items(self) -> Iterator[tuple[str, DiagnosticSet]]:
        """Yield ``(uri, diagnostics)`` pairs in publication order."""

        yield from self._store.items()

    def __contains__(self, uri: object) -> bool:
        return uri in self._store

    def __len__(self) -> int:
        return len(self._store)


@dataclass(frozen=True, slots=True)
class WorkspaceFolders:
    """Resolve buffers to the innermost configured project folder."""

    folders: tuple[Path, ...] = ()

    @classmethod
    def of(cls, folders: Iterable[Path]) -> WorkspaceFolders:
        """Return a locator for ``folders`` after resolving each path."""

        return cls(folders=tuple(folder.resolve() for folder in folders))

    def folder_for(self, buffer: Buffer) -> Path | None:
        """Return the deepest folder containing ``buffer``'s path, if any."""

        candidates = [folder for folder in self.folders if buffer.path.is_relative_to(folder)]
        if not candidates:
            return None
        return max(candidates, key=lambda folder: len(folder.parts))


__all__ = [
    "FileBuffer",
    "InMemoryDiagnosticSink",
    "PLAINTEXT_LANGUAGE_ID",
    "WorkspaceFolders",
    "detect_language_id",
    "split_lines",
]
