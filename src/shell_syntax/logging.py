# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import sys
from functools import cache
from typing import Final, Literal

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

PACKAGE_LOGGER_NAME: Final[str] = "shell_syntax"


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a cached Rich console configured for ``color`` and ``emoji``.

    Args:
        color: ``True`` when ANSI colour output should be enabled.
        emoji: ``True`` when Rich should render emoji glyphs.

    Returns:
        Console: Console shared by every caller asking for the same preferences.
    """

    tty = detect_tty()
    color_system: Literal["auto"] | None = "auto" if color and tty else None
    return Console(
        color_system=color_system,
        no_color=not (color and tty),
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def section(title: str, *, use_color: bool | None = None) -> None:
    """Print a section header framed by rules."""

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=False)
    text = Text()
    text.append("\n")
    text.append("───", style="blue" if color_enabled else "")
    text.append(" ")
    text.append(title, style="cyan" if color_enabled else "")
    text.append(" ")
    text.append("───", style="blue" if color_enabled else "")
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    prefix = emoji("ℹ️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    prefix = emoji("✅ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    prefix = emoji("⚠️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    prefix = emoji("❌ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def configure_logging(*, debug: bool) -> logging.Logger:
    """Stream package log records to stderr.

    Launch failures are always reported; ``debug`` also surfaces skipped and
    discarded checks.

    Args:
        debug: Whether ``DEBUG`` records should be emitted.

    Returns:
        logging.Logger: The configured package logger.
    """

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        # A stderr console resolves ``sys.stderr`` on every write rather than at construction.
        handler = RichHandler(
            console=Console(stderr=True, highlight=False, soft_wrap=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    return logger


__all__ = [
    "configure_logging",
    "detect_tty",
    "emoji",
    "fail",
    "get_console",
    "info",
    "ok",
    "section",
    "warn",
]
