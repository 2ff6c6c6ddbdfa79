# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the file-backed host adapters."""

from __future__ import annotations

from pathlib import Path

import pytest

from shell_syntax.classifier import classify
from shell_syntax.constants import DIAGNOSTIC_COLLECTION_NAME, SHELLSCRIPT_LANGUAGE_ID
from shell_syntax.dialects import Dialect
from shell_syntax.documents import (
    PLAINTEXT_LANGUAGE_ID,
    FileBuffer,
    InMemoryDiagnosticSink,
    WorkspaceFolders,
    detect_language_id,
    split_lines,
)
from shell_syntax.interfaces import Buffer, DiagnosticSink, ProcessRunner, WorkspaceLocator
from shell_syntax.models import Diagnostic, TextRange


def test_split_lines_matches_editor_counting() -> None:
    assert split_lines("") == ("",)
    assert split_lines("a\n") == ("a", "")
    assert split_lines("a\r\nb\rc") == ("a", "b", "c")


@pytest.mark.parametrize(
    ("name", "first_line", "expected"),
    [
        ("deploy.sh", "", SHELLSCRIPT_LANGUAGE_ID),
        ("prompt.zsh", "", SHELLSCRIPT_LANGUAGE_ID),
        (".bashrc", "", SHELLSCRIPT_LANGUAGE_ID),
        ("agnoster.zsh-theme", "", SHELLSCRIPT_LANGUAGE_ID),
        ("custom.zshrc", "", SHELLSCRIPT_LANGUAGE_ID),
        ("work.zshenv", "", SHELLSCRIPT_LANGUAGE_ID),
        ("host.zprofile", "", SHELLSCRIPT_LANGUAGE_ID),
        ("session.zlogin", "", SHELLSCRIPT_LANGUAGE_ID),
        ("session.zlogout", "", SHELLSCRIPT_LANGUAGE_ID),
        ("configure", "#!/bin/sh", SHELLSCRIPT_LANGUAGE_ID),
        ("run", "#!/usr/bin/env bash", SHELLSCRIPT_LANGUAGE_ID),
        ("run", "#!/usr/bin/env -S bash -e", SHELLSCRIPT_LANGUAGE_ID),
        ("run", "#!/usr/bin/env LC_ALL=C zsh", SHELLSCRIPT_LANGUAGE_ID),
        ("run", "#!/usr/bin/env -S", PLAINTEXT_LANGUAGE_ID),
        ("run", "#!/usr/bin/env python3", PLAINTEXT_LANGUAGE_ID),
        ("notes.txt", "hello", PLAINTEXT_LANGUAGE_ID),
    ],
)
def test_detect_language_id(name: str, first_line: str, expected: str) -> None:
    assert detect_language_id(Path("/tmp") / name, first_line) == expected


def test_file_buffer_from_path(tmp_path: Path) -> None:
    script = tmp_path / "hook"
    script.write_text("#!/bin/sh\necho hi\n", encoding="utf-8")

    buffer = FileBuffer.from_path(script)

    assert isinstance(buffer, Buffer)
    assert buffer.path == script.resolve()
    assert buffer.uri.startswith("file://")
    assert buffer.scheme == "file"
    assert buffer.language_id == SHELLSCRIPT_LANGUAGE_ID
    assert not buffer.is_dirty
    assert buffer.line_count == 3
    assert buffer.line_at(1) == "echo hi"
    with pytest.raises(IndexError):
        buffer.line_at(3)


def test_file_buffer_language_override(tmp_path: Path) -> None:
    script = tmp_path / "data.txt"
    script.write_text("echo hi\n", encoding="utf-8")
    assert FileBuffer.from_path(script, language_id=SHELLSCRIPT_LANGUAGE_ID).language_id == SHELLSCRIPT_LANGUAGE_ID


def test_in_memory_sink_replaces_and_deletes() -> None:
    sink = InMemoryDiagnosticSink()
    diag = Diagnostic(range=TextRange.full_line(0, 3), message="boom", source="bash")

    assert isinstance(sink, DiagnosticSink)
    assert sink.name == DIAGNOSTIC_COLLECTION_NAME
    sink.set("file:///a.sh", [diag, diag])
    sink.set("file:///a.sh", [diag])
    assert sink.get("file:///a.sh") == (diag,)
    assert list(sink.items()) == [("file:///a.sh", (diag,))]

    sink.delete("file:///a.sh")
    sink.delete("file:///missing.sh")
    assert len(sink) == 0


def test_workspace_folders_pick_innermost(tmp_path: Path, make_buffer) -> None:
    outer = tmp_path
    inner = tmp_path / "pkg"
    locator = WorkspaceFolders.of([outer, inner])

    assert isinstance(locator, WorkspaceLocator)
    assert locator.folder_for(make_buffer("a.sh", folder=inner.resolve())) == inner.resolve()
    assert locator.folder_for(make_buffer("b.sh", folder=outer.resolve())) == outer.resolve()
    assert locator.folder_for(make_buffer("c.sh", folder=Path("/elsewhere"))) is None


def test_zsh_dotfile_variant_is_checked_as_zsh(tmp_path: Path) -> None:
    path = tmp_path / "custom.zshrc"
    path.write_text("#!/bin/bash\nsetopt prompt_subst\n", encoding="utf-8")

    buffer = FileBuffer.from_path(path)

    assert buffer.language_id == SHELLSCRIPT_LANGUAGE_ID
    assert classify(buffer) is Dialect.ZSH


def test_host_protocol_members_are_abstract() -> None:
    assert {"uri", "scheme", "path", "is_dirty", "language_id", "line_count", "line_at"} <= Buffer.__abstractmethods__
    assert {"name", "set", "delete"} <= DiagnosticSink.__abstractmethods__
    assert "folder_for" in WorkspaceLocator.__abstractmethods__
    assert "run" in ProcessRunner.__abstractmethods__
