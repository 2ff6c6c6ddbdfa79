# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from shell_syntax.constants import SHELLSCRIPT_LANGUAGE_ID
from shell_syntax.documents import FileBuffer, split_lines
from shell_syntax.models import ProcessOutcome
from shell_syntax.process import CheckerLaunchError

BufferFactory = Callable[..., FileBuffer]


@pytest.fixture
def make_buffer() -> BufferFactory:
    """Return a factory building in-memory shell buffers."""

    def _factory(
        name: str = "script.sh",
        text: str = "echo hi\n",
        *,
        dirty: bool = False,
        language_id: str = SHELLSCRIPT_LANGUAGE_ID,
        scheme: str = "file",
        folder: Path = Path("/work/project"),
    ) -> FileBuffer:
        return FileBuffer(
            path=folder / name,
            lines=split_lines(text),
            language_id=language_id,
            is_dirty=dirty,
            scheme=scheme,
        )

    return _factory


@dataclass
class FakeRunner:
    """Process runner returning canned outcomes and recording invocations."""

    stderr: str = ""
    exit_code: int = 0
    missing: set[str] = field(default_factory=set)
    calls: list[tuple[Path, tuple[str, ...]]] = field(default_factory=list)
    gate: asyncio.Event | None = None

    async def run(self, cwd: Path, argv: Sequence[str]) -> ProcessOutcome:
        self.calls.append((cwd, tuple(argv)))
        if argv[0] in self.missing:
            raise CheckerLaunchError(argv, FileNotFoundError(f"Executable '{argv[0]}' was not found on PATH"))
        stderr = self.stderr
        if self.gate is not None:
            await self.gate.wait()
        return ProcessOutcome(exit_code=self.exit_code, stderr=stderr)


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Return a runner that reports no syntax errors by default."""

    return FakeRunner()
