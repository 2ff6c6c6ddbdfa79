# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Asynchronous wrapper around external syntax-checker processes."""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Mapping, Sequence
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path

from .constants import TIMEOUT_EXIT_CODE
from .models import ProcessOutcome

LOGGER = logging.getLogger(__name__)


class CheckerLaunchError(RuntimeError):
    """Raised when a checker executable could not be started at all."""

    def __init__(self, command: Sequence[str], reason: OSError) -> None:
        """Initialise the error with the command that failed to start.

        Args:
            command: Argument vector the caller asked to execute.
            reason: Operating-system error raised while spawning the process.
        """
        super().__init__(f"Could not launch '{command[0]}': {reason}")
        self.command = tuple(command)
        self.reason = reason


def resolve_working_directory(folder: Path | None) -> Path:
    """Return ``folder`` or the current process working directory.

    Args:
        folder: Workspace folder owning the buffer, if any.

    Returns:
        Path: Directory the checker should run in.
    """

    return folder if folder is not None else Path.cwd()


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable in ``args`` against ``PATH``.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Argument list whose first entry is an absolute executable path.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def _decode(raw: bytes | None) -> str:
    if not raw:
        return ""
    return raw.decode("utf-8", errors="replace")


@dataclass(slots=True)
class AsyncProcessRunner:
    """Run checker commands as asyncio subprocesses.

    Only the awaiting task is suspended while the child runs, so several
    buffers can be checked concurrently from one event loop.
    """

    timeout: float | None = None
    env: Mapping[str, str] | None = field(default=None)

    async def run(
        self,
        cwd: Path,
        argv: Sequence[str],
        *,
        stdin: str | None = None,
    ) -> ProcessOutcome:
        """Execute ``argv`` inside ``cwd`` and capture its output.

        Args:
            cwd: Working directory for the child process.
            argv: Command and arguments, executed without a shell.
            stdin: Optional text fed to standard input; ``/dev/null`` otherwise.

        Returns:
            ProcessOutcome: Exit code plus decoded stdout and stderr. Non-zero
            exit codes are returned, not raised.

        Raises:
            CheckerLaunchError: If the executable is missing or cannot be spawned.
        """

        try:
            normalized = _normalize_args(argv)
            # Commands come from the dialect table; arguments are passed without shell expansion.
            process = await asyncio.create_subprocess_exec(  # nosec B603
                *normalized,
                cwd=str(cwd),
                env=dict(self.env) if self.env is not None else None,
                stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            LOGGER.error("Command error %s: %s", list(argv), exc)
            raise CheckerLaunchError(argv, exc) from exc

        stdin_bytes = stdin.encode("utf-8") if stdin is not None else None
        try:
            if self.timeout is None:
                stdout_bytes, stderr_bytes = await process.communicate(stdin_bytes)
            else:
                stdout_bytes, stderr_bytes = await asyncio.wait_for(
                    process.communicate(stdin_bytes),
                    timeout=self.timeout,
                )
        except TimeoutError:
            with suppress(ProcessLookupError):
                process.kill()
            stdout_bytes, stderr_bytes = await process.communicate()
            stderr = _decode(stderr_bytes)
            timeout_msg = f"Command timed out after {self.timeout:.1f}s"
            LOGGER.warning("%s: %s", timeout_msg, list(argv))
            return ProcessOutcome(
                exit_code=TIMEOUT_EXIT_CODE,
                stdout=_decode(stdout_bytes),
                stderr=f"{stderr}\n{timeout_msg}" if stderr else timeout_msg,
            )
        except asyncio.CancelledError:
            with suppress(ProcessLookupError):
                process.kill()
            await process.communicate()
            raise

        exit_code = process.returncode if process.returncode is not None else 0
        return ProcessOutcome(exit_code=exit_code, stdout=_decode(stdout_bytes), stderr=_decode(stderr_bytes))


__all__ = [
    "AsyncProcessRunner",
    "CheckerLaunchError",
    "resolve_working_directory",
]
