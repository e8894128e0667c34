"""Unit tests for atomic hook file writes."""

from __future__ import annotations

import os
import stat

from hookgen.atomic_file import atomic_write_text


def test_atomic_write_text_creates_parents(tmp_path):
    target = tmp_path / "completions" / "app.bash"
    atomic_write_text(target, "complete -F f app;\n")

    assert target.read_text(encoding="utf-8") == "complete -F f app;\n"
    assert list(target.parent.iterdir()) == [target]


def test_atomic_write_text_replaces_and_keeps_mode(tmp_path):
    """Test that an existing hook file keeps its permissions."""
    target = tmp_path / "app.zsh"
    target.write_text("old", encoding="utf-8")
    os.chmod(target, 0o600)

    atomic_write_text(target, "new")

    assert target.read_text(encoding="utf-8") == "new"
    assert stat.S_IMODE(target.stat().st_mode) == 0o600
