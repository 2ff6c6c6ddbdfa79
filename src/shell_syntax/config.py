# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and layered loading for shell_syntax."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import DIAGNOSTIC_COLLECTION_NAME
from .dialects import Dialect, coerce_dialect

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEYS: Final[tuple[str, ...]] = ("shell-syntax", "shell_syntax")
CONFIG_FILENAME: Final[str] = ".shell-syntax.toml"
ENV_PREFIX: Final[str] = "SHELL_SYNTAX_"

# Editor-style setting names map onto model fields.
_KEY_ALIASES: Final[dict[str, str]] = {
    "defaultShell": "default_shell",
    "collectionName": "collection_name",
}


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class ShellSyntaxConfig(BaseModel):
    """Settings that influence how buffers are checked."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    default_shell: Dialect = Dialect.BASH
    timeout: float | None = Field(default=None, ge=0)
    collection_name: str = DIAGNOSTIC_COLLECTION_NAME

    @field_validator("default_shell", mode="before")
    @classmethod
    def _coerce_default_shell(cls, value: Dialect | str) -> Dialect:
        """Accept dialect names regardless of case or surrounding whitespace."""

        return coerce_dialect(value)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as plain JSON-compatible data."""

        return self.model_dump(mode="json")


class ConfigSource(Protocol):
    """Provide one layer of configuration values."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return raw configuration values keyed by field name."""

        raise NotImplementedError


def _normalise_keys(data: Mapping[str, Any], *, source: str) -> dict[str, Any]:
    """Return ``data`` with kebab-case and editor-style keys mapped to field names."""

    normalised: dict[str, Any] = {}
    for raw_key, value in data.items():
        if not isinstance(raw_key, str):
            raise ConfigError(f"{source}: configuration keys must be strings")
        key = _KEY_ALIASES.get(raw_key, raw_key.replace("-", "_"))
        normalised[key] = value
    return normalised


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return ShellSyntaxConfig().to_dict()


class TomlConfigSource:
    """Load top-level keys from a standalone TOML document."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = str(path)

    def load(self) -> Mapping[str, Any]:
        if not self.path.is_file():
            return {}
        return _normalise_keys(_read_toml(self.path), source=self.name)


class PyProjectConfigSource:
    """Read configuration from ``[tool.shell-syntax]`` within ``pyproject.toml``."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = f"{path} [tool.shell-syntax]"

    def load(self) -> Mapping[str, Any]:
        if not self.path.is_file():
            return {}
        tool_section = _read_toml(self.path).get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        for key in PYPROJECT_SECTION_KEYS:
            section = tool_section.get(key)
            if section is None:
                continue
            if not isinstance(section, Mapping):
                raise ConfigError(f"{self.name} must be a table")
            return _normalise_keys(section, source=self.name)
        return {}


class EnvironmentConfigSource:
    """Read ``SHELL_SYNTAX_*`` variables from the process environment."""

    name = "environment"

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = env if env is not None else os.environ

    def load(self) -> Mapping[str, Any]:
        values: dict[str, Any] = {}
        for field_name in ShellSyntaxConfig.model_fields:
            raw = self._env.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is None or not raw.strip():
                continue
            values[field_name] = raw.strip()
        return values


@dataclass(frozen=True, slots=True)
class FieldUpdate:
    """Record which source supplied a configuration value."""

    field: str
    source: str
    value: Any


@dataclass(frozen=True, slots=True)
class ConfigLoadResult:
    """Loaded configuration plus the provenance of non-default values."""

    config: ShellSyntaxConfig
    updates: tuple[FieldUpdate, ...] = ()


class ConfigLoader:
    """Merge configuration sources in order; later sources win."""

    def __init__(self, sources: Sequence[ConfigSource]) -> None:
        self.sources = tuple(sources)

    @classmethod
    def for_root(cls, root: Path, *, env: Mapping[str, str] | None = None) -> ConfigLoader:
        """Return a loader reading the standard locations under ``root``.

        Args:
            root: Project directory holding ``pyproject.toml`` or ``.shell-syntax.toml``.
            env: Environment mapping; defaults to :data:`os.environ`.

        Returns:
            ConfigLoader: Loader for defaults, pyproject, the dedicated file, and environment.
        """

        return cls(
            [
                DefaultConfigSource(),
                PyProjectConfigSource(root / PYPROJECT_FILENAME),
                TomlConfigSource(root / CONFIG_FILENAME),
                EnvironmentConfigSource(env),
            ]
        )

    def load_with_trace(self) -> ConfigLoadResult:
        """Load every source and report which one supplied each value.

        Returns:
            ConfigLoadResult: Validated configuration and its field updates.

        Raises:
            ConfigError: If a source is unreadable or a value fails validation.
        """

        merged: dict[str, Any] = {}
        updates: list[FieldUpdate] = []
        for source in self.sources:
            fragment = source.load()
            for key, value in fragment.items():
                if source.name != DefaultConfigSource.name:
                    updates.append(FieldUpdate(field=key, source=source.name, value=value))
                merged[key] = value
        try:
            config = ShellSyntaxConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc
        return ConfigLoadResult(config=config, updates=tuple(updates))

    def load(self) -> ShellSyntaxConfig:
        """Return the validated configuration."""

        return self.load_with_trace().config


def load_config(root: Path, *, env: Mapping[str, str] | None = None) -> ShellSyntaxConfig:
    """Load configuration for the project rooted at ``root``."""

    return ConfigLoader.for_root(root, env=env).load()


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ConfigLoadResult",
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "EnvironmentConfigSource",
    "FieldUpdate",
    "PyProjectConfigSource",
    "ShellSyntaxConfig",
    "TomlConfigSource",
    "load_config",
]
