# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell dialects understood by the syntax checker."""

from __future__ import annotations

from enum import Enum


class Dialect(str, Enum):
    """Shell dialects with a syntax-check mode we know how to read."""

    BASH = "bash"
    ZSH = "zsh"
    SH = "sh"

    @property
    def executable(self) -> str:
        """Return the interpreter name invoked for this dialect.

        Returns:
            str: Executable looked up on ``PATH`` when checking a buffer.
        """

        return self.value


def coerce_dialect(value: Dialect | str) -> Dialect:
    """Return ``value`` as a :class:`Dialect`.

    Args:
        value: Dialect instance or case-insensitive dialect name.

    Returns:
        Dialect: Matching dialect member.

    Raises:
        ValueError: If ``value`` does not name a supported dialect.
    """

    if isinstance(value, Dialect):
        return value
    normalised = str(value).strip().lower()
    try:
        return Dialect(normalised)
    except ValueError as exc:
        choices = ", ".join(member.value for member in Dialect)
        raise ValueError(f"unknown shell dialect '{value}' (expected one of: {choices})") from exc


__all__ = ["Dialect", "coerce_dialect"]
