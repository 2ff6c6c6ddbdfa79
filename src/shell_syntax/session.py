# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-buffer diagnostic state driven by editor lifecycle events."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from .classifier import build_invocation, classify
from .dialects import Dialect
from .interfaces import Buffer, DiagnosticSink, ProcessRunner, WorkspaceLocator
from .models import DiagnosticSet
from .parsers import normalize
from .process import CheckerLaunchError, resolve_working_directory

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Ticket:
    """Identify one check so stale completions can be recognised."""

    generation: int
    epoch: int
    sequence: int


class DiagnosticSession:
    """Own the mapping from buffer URI to its latest diagnostic set.

    The session is the only writer of its :class:`DiagnosticSink`. Entries are
    replaced wholesale on every completed check and removed when the buffer is
    closed. A check that finishes after its buffer was closed, after the session
    was disposed, or after a newer check of the same buffer was applied, is
    discarded.
    """

    def __init__(
        self,
        *,
        sink: DiagnosticSink,
        runner: ProcessRunner,
        workspace: WorkspaceLocator | None = None,
        default_shell: Dialect = Dialect.BASH,
    ) -> None:
        """Initialise an empty session.

        Args:
            sink: Diagnostic collection receiving published results.
            runner: Process runner used to invoke checkers.
            workspace: Optional resolver for the project folder owning a buffer.
            default_shell: Dialect used when extension and shebang do not decide.
        """

        self._sink = sink
        self._runner = runner
        self._workspace = workspace
        self.default_shell = default_shell
        self._entries: dict[str, DiagnosticSet] = {}
        self._generation = 0
        self._in_flight: dict[str, int] = {}
        self._epochs: dict[str, int] = {}
        self._issued: dict[str, int] = {}
        self._applied: dict[str, int] = {}

    @property
    def entries(self) -> Mapping[str, DiagnosticSet]:
        """Return a read-only view of the current diagnostic sets."""

        return MappingProxyType(self._entries)

    def get(self, uri: str) -> DiagnosticSet | None:
        """Return the diagnostics last published for ``uri``, if any."""

        return self._entries.get(uri)

    async def check(self, buffer: Buffer) -> DiagnosticSet | None:
        """Check ``buffer`` and publish the result.

        Buffers that :func:`classify` rejects are left untouched, so a dirty
        buffer keeps the diagnostics from its last save. Launch failures are
        logged and leave existing diagnostics unchanged.

        Args:
            buffer: Document that was opened or saved.

        Returns:
            DiagnosticSet | None: The applied diagnostics, or ``None`` when
            nothing was published.
        """

        dialect = classify(buffer, self.default_shell)
        if dialect is None:
            return None

        ticket = self._issue_ticket(buffer.uri)
        try:
            return await self._run_ticket(buffer, dialect, ticket)
        finally:
            self._finish_ticket(buffer.uri, ticket)

    async def _run_ticket(self, buffer: Buffer, dialect: Dialect, ticket: _Ticket) -> DiagnosticSet | None:
        uri = buffer.uri
        folder = self._workspace.folder_for(buffer) if self._workspace is not None else None
        invocation = build_invocation(buffer, dialect, resolve_working_directory(folder))
        try:
            outcome = await self._runner.run(invocation.cwd, invocation.argv)
        except CheckerLaunchError as exc:
            LOGGER.debug("Skipping %s check for %s: %s", dialect.value, uri, exc)
            return None

        diagnostics = normalize(buffer, outcome.stderr, dialect)
        if not self._is_current(uri, ticket):
            LOGGER.debug("Discarding stale %s result for %s", dialect.value, uri)
            return None
        self._applied[uri] = ticket.sequence
        self._entries[uri] = diagnostics
        self._sink.set(uri, diagnostics)
        return diagnostics

    async def start(self, buffers: Iterable[Buffer]) -> None:
        """Check every buffer that was already open when the session started."""

        await asyncio.gather(*(self.check(buffer) for buffer in buffers))

    def close(self, uri: str) -> None:
        """Forget ``uri`` and clear its published diagnostics.

        Args:
            uri: Identity of the buffer that was closed.
        """

        self._applied.pop(uri, None)
        self._entries.pop(uri, None)
        if self._in_flight.get(uri, 0):
            self._epochs[uri] = self._epochs.get(uri, 0) + 1
        else:
            self._forget(uri)
        self._sink.delete(uri)

    def dispose(self) -> None:
        """Clear every published diagnostic and reset the session."""

        for uri in list(self._entries):
            self._sink.delete(uri)
        self._generation += 1
        self._entries.clear()
        self._in_flight.clear()
        self._epochs.clear()
        self._issued.clear()
        self._applied.clear()

    def _issue_ticket(self, uri: str) -> _Ticket:
        sequence = self._issued.get(uri, 0) + 1
        self._issued[uri] = sequence
        self._in_flight[uri] = self._in_flight.get(uri, 0) + 1
        return _Ticket(generation=self._generation, epoch=self._epochs.get(uri, 0), sequence=sequence)

    def _finish_ticket(self, uri: str, ticket: _Ticket) -> None:
        if ticket.generation != self._generation:
            return
        remaining = self._in_flight.get(uri, 0) - 1
        if remaining > 0:
            self._in_flight[uri] = remaining
            return
        self._in_flight.pop(uri, None)
        # Counters of a buffer with nothing published are only needed while checks run.
        if uri not in self._applied:
            self._forget(uri)

    def _forget(self, uri: str) -> None:
        self._in_flight.pop(uri, None)
        self._epochs.pop(uri, None)
        self._issued.pop(uri, None)

    def _is_current(self, uri: str, ticket: _Ticket) -> bool:
        if ticket.generation != self._generation:
            return False
        if self._epochs.get(uri, 0) != ticket.epoch:
            return False
        return ticket.sequence > self._applied.get(uri, 0)


class LifecycleEvent(str, Enum):
    """Document events the host forwards to the checker."""

    OPEN = "open"
    SAVE = "save"
    CLOSE = "close"


class SessionDispatcher:
    """Turn lifecycle events into independent asyncio tasks.

    Every open or save schedules one check task; nothing orders tasks of
    different buffers against each other. Failures are logged per task and
    never reach the event source.
    """

    def __init__(self, session: DiagnosticSession) -> None:
        self.session = session
        self._tasks: set[asyncio.Task[DiagnosticSet | None]] = set()

    @property
    def pending(self) -> int:
        """Return the number of in-flight check tasks."""

        return len(self._tasks)

    def dispatch(self, event: LifecycleEvent, buffer: Buffer) -> asyncio.Task[DiagnosticSet | None] | None:
        """Handle ``event`` for ``buffer``.

        Args:
            event: Lifecycle event raised by the host.
            buffer: Document the event refers to.

        Returns:
            asyncio.Task | None: Scheduled check task, or ``None`` for ``close``.
        """

        if event is LifecycleEvent.CLOSE:
            self.session.close(buffer.uri)
            return None
        task = asyncio.get_running_loop().create_task(self.session.check(buffer))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def on_open(self, buffer: Buffer) -> asyncio.Task[DiagnosticSet | None] | None:
        """Schedule a check for a newly opened buffer."""

        return self.dispatch(LifecycleEvent.OPEN, buffer)

    def on_save(self, buffer: Buffer) -> asyncio.Task[DiagnosticSet | None] | None:
        """Schedule a check for a buffer that was just saved."""

        return self.dispatch(LifecycleEvent.SAVE, buffer)

    def on_close(self, buffer: Buffer) -> None:
        """Drop the diagnostics of a closed buffer."""

        self.dispatch(LifecycleEvent.CLOSE, buffer)

    def start(self, buffers: Iterable[Buffer]) -> list[asyncio.Task[DiagnosticSet | None]]:
        """Schedule a check for every buffer already open at startup."""

        tasks: list[asyncio.Task[DiagnosticSet | None]] = []
        for buffer in buffers:
            task = self.on_open(buffer)
            if task is not None:
                tasks.append(task)
        return tasks

    async def drain(self) -> None:
        """Wait until every scheduled check has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel in-flight checks and dispose of the session."""

        for task in list(self._tasks):
            task.cancel()
        await self.drain()
        self.session.dispose()

    def _task_done(self, task: asyncio.Task[DiagnosticSet | None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Syntax check failed: %s", exc, exc_info=exc)


__all__ = [
    "DiagnosticSession",
    "LifecycleEvent",
    "SessionDispatcher",
]
