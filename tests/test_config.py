# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from shell_syntax.config import ConfigError, ConfigLoader, ShellSyntaxConfig, load_config
from shell_syntax.constants import DIAGNOSTIC_COLLECTION_NAME
from shell_syntax.dialects import Dialect


def test_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path, env={})
    assert config.default_shell is Dialect.BASH
    assert config.timeout is None
    assert config.collection_name == DIAGNOSTIC_COLLECTION_NAME


def test_pyproject_section(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n[tool.shell-syntax]\ndefault-shell = "zsh"\ntimeout = 5\n',
        encoding="utf-8",
    )
    config = load_config(tmp_path, env={})
    assert config.default_shell is Dialect.ZSH
    assert config.timeout == 5.0


def test_editor_style_key(tmp_path: Path) -> None:
    (tmp_path / ".shell-syntax.toml").write_text('defaultShell = "SH"\n', encoding="utf-8")
    assert load_config(tmp_path, env={}).default_shell is Dialect.SH


def test_precedence_and_trace(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.shell_syntax]\ndefault_shell = "zsh"\n', encoding="utf-8")
    (tmp_path / ".shell-syntax.toml").write_text('default-shell = "sh"\n', encoding="utf-8")
    env = {"SHELL_SYNTAX_TIMEOUT": "2.5"}

    result = ConfigLoader.for_root(tmp_path, env=env).load_with_trace()

    assert result.config.default_shell is Dialect.SH
    assert result.config.timeout == 2.5
    sources = [(update.field, update.source) for update in result.updates]
    assert ("timeout", "environment") in sources
    assert [field for field, _ in sources].count("default_shell") == 2


def test_environment_overrides_files(tmp_path: Path) -> None:
    (tmp_path / ".shell-syntax.toml").write_text('default-shell = "sh"\n', encoding="utf-8")
    config = load_config(tmp_path, env={"SHELL_SYNTAX_DEFAULT_SHELL": "zsh"})
    assert config.default_shell is Dialect.ZSH


def test_unknown_dialect_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".shell-syntax.toml").write_text('default-shell = "fish"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="fish"):
        load_config(tmp_path, env={})


def test_unknown_key_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".shell-syntax.toml").write_text("colour = true\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path, env={})


def test_invalid_toml_is_reported(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.shell-syntax\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path, env={})


def test_section_must_be_table(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool]\nshell-syntax = "bash"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="must be a table"):
        load_config(tmp_path, env={})


def test_negative_timeout_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path, env={"SHELL_SYNTAX_TIMEOUT": "-1"})


def test_assignment_is_validated() -> None:
    config = ShellSyntaxConfig()
    config.default_shell = " ZSH "
    assert config.default_shell is Dialect.ZSH
    with pytest.raises(ValidationError):
        config.default_shell = "ksh"
