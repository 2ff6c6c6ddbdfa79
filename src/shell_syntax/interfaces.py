# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Protocols describing the host editor boundary."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from .models import Diagnostic, ProcessOutcome


@runtime_checkable
class Buffer(Protocol):
    """Read-only view of an editor document."""

    @property
    @abstractmethod
    def uri(self) -> str:
        """Return the identity of the document."""

        raise NotImplementedError

    @property
    @abstractmethod
    def scheme(self) -> str:
        """Return the URI scheme (``file`` for documents saved to disk)."""

        raise NotImplementedError

    @property
    @abstractmethod
    def path(self) -> Path:
        """Return the filesystem path backing the document."""

        raise NotImplementedError

    @property
    @abstractmethod
    def is_dirty(self) -> bool:
        """Return ``True`` when the document has unsaved changes."""

        raise NotImplementedError

    @property
    @abstractmethod
    def language_id(self) -> str:
        """Return the language identifier declared by the host."""

        raise NotImplementedError

    @property
    @abstractmethod
    def line_count(self) -> int:
        """Return the number of lines in the document."""

        raise NotImplementedError

    @abstractmethod
    def line_at(self, index: int) -> str:
        """Return the text of line ``index`` without its line terminator."""

        raise NotImplementedError


@runtime_checkable
class DiagnosticSink(Protocol):
    """Namespaced diagnostic collection owned by the checker."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the collection namespace."""

        raise NotImplementedError

    @abstractmethod
    def set(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        """Replace every diagnostic published for ``uri``."""

        raise NotImplementedError

    @abstractmethod
    def delete(self, uri: str) -> None:
        """Remove every diagnostic published for ``uri``."""

        raise NotImplementedError


@runtime_checkable
class WorkspaceLocator(Protocol):
    """Resolve the project folder that owns a document."""

    @abstractmethod
    def folder_for(self, buffer: Buffer) -> Path | None:
        """Return the workspace folder containing ``buffer`` or ``None``."""

        raise NotImplementedError


@runtime_checkable
class ProcessRunner(Protocol):
    """Run an external command without blocking the event loop."""

    @abstractmethod
    async def run(self, cwd: Path, argv: Sequence[str]) -> ProcessOutcome:
        """Execute ``argv`` inside ``cwd`` and return its outcome."""

        raise NotImplementedError


__all__ = [
    "Buffer",
    "DiagnosticSink",
    "ProcessRunner",
    "WorkspaceLocator",
]
