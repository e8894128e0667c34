"""Unit tests for the completion command side of the hook protocol."""

from __future__ import annotations

import pytest

from hookgen.protocol import (
    DEFAULT_WORDBREAKS,
    PATH_COMPLETION_STATUS,
    CompletionContext,
    ProtocolError,
    format_candidates,
)


def test_path_completion_status():
    """Test the reserved exit status the hooks check for."""
    assert PATH_COMPLETION_STATUS == 200


def test_from_environ_reads_hook_variables():
    """Test that all three exported variables are picked up."""
    ctx = CompletionContext.from_environ(
        {
            "CMDLINE_CONTENTS": "app deploy --env pr",
            "CMDLINE_CURSOR_INDEX": "19",
            "CMDLINE_WORDBREAKS": " =",
        }
    )

    assert ctx.command_line == "app deploy --env pr"
    assert ctx.cursor == 19
    assert ctx.wordbreaks == " ="
    assert ctx.words == ["app", "deploy", "--env", "pr"]
    assert ctx.current_word == "pr"


def test_from_environ_cursor_in_middle():
    """Test that only text before the cursor is considered."""
    ctx = CompletionContext.from_environ(
        {"CMDLINE_CONTENTS": "app dep --force", "CMDLINE_CURSOR_INDEX": "7"}
    )
    assert ctx.words == ["app", "dep"]
    assert ctx.current_word == "dep"


def test_from_environ_after_trailing_space():
    """Test that a new, empty word starts after whitespace."""
    ctx = CompletionContext.from_environ(
        {"CMDLINE_CONTENTS": "app ", "CMDLINE_CURSOR_INDEX": "4"}
    )
    assert ctx.words == ["app"]
    assert ctx.current_word == ""


def test_from_environ_defaults():
    """Test defaults for the optional variables."""
    ctx = CompletionContext.from_environ({"CMDLINE_CONTENTS": "app st"})
    assert ctx.cursor == len("app st")
    assert ctx.wordbreaks == DEFAULT_WORDBREAKS


def test_from_environ_clamps_cursor():
    """Test that a cursor past the end is clamped to the line length."""
    ctx = CompletionContext.from_environ(
        {"CMDLINE_CONTENTS": "app", "CMDLINE_CURSOR_INDEX": "99"}
    )
    assert ctx.cursor == 3


def test_from_environ_missing_contents():
    """Test that running outside a hook is reported."""
    with pytest.raises(ProtocolError, match="CMDLINE_CONTENTS is not set"):
        CompletionContext.from_environ({})


@pytest.mark.parametrize("cursor", ["abc", "-1", "1.5"])
def test_from_environ_bad_cursor(cursor):
    """Test that a malformed cursor is rejected."""
    with pytest.raises(ProtocolError, match="CMDLINE_CURSOR_INDEX"):
        CompletionContext.from_environ(
            {"CMDLINE_CONTENTS": "app", "CMDLINE_CURSOR_INDEX": cursor}
        )


def test_from_environ_uses_os_environ(monkeypatch):
    """Test that os.environ is read by default."""
    monkeypatch.setenv("CMDLINE_CONTENTS", "app x")
    monkeypatch.setenv("CMDLINE_CURSOR_INDEX", "5")
    monkeypatch.delenv("CMDLINE_WORDBREAKS", raising=False)

    ctx = CompletionContext.from_environ()
    assert ctx.current_word == "x"


def test_format_candidates():
    """Test that candidates are emitted one per line."""
    assert format_candidates(["deploy", "destroy"]) == "deploy\ndestroy"
    assert format_candidates([]) == ""
