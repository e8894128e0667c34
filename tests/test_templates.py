"""Unit tests for the hook template registry."""

from __future__ import annotations

import dataclasses

import pytest

from hookgen.protocol import PATH_COMPLETION_STATUS
from hookgen.templates import (
    PLACEHOLDERS,
    TEMPLATES,
    ShellTemplate,
    get_template,
    list_shell_types,
)


def test_list_shell_types_default_registry():
    """Test that bash and zsh are registered, once each, in order."""
    shells = list_shell_types()
    assert shells == ("bash", "zsh")
    assert len(set(shells)) == len(shells)


def test_registry_is_read_only():
    """Test that templates cannot be added or replaced at runtime."""
    with pytest.raises(TypeError):
        TEMPLATES["fish"] = ShellTemplate(shell="fish", body="")  # type: ignore[index]


def test_templates_are_frozen():
    """Test that a template's body cannot be reassigned."""
    with pytest.raises(dataclasses.FrozenInstanceError):
        TEMPLATES["bash"].body = ""  # type: ignore[misc]


def test_template_keys_match_shell_field():
    """Test that each template is stored under its own shell name."""
    for key, template in TEMPLATES.items():
        assert template.shell == key


def test_get_template():
    """Test lookup of registered and unknown shells."""
    assert get_template("zsh") is TEMPLATES["zsh"]
    assert get_template("fish") is None


@pytest.mark.parametrize("shell", ["bash", "zsh"])
def test_templates_use_every_placeholder(shell):
    """Test that each template references all four placeholders."""
    body = TEMPLATES[shell].body
    for token in PLACEHOLDERS:
        assert token in body


@pytest.mark.parametrize("shell", ["bash", "zsh"])
def test_templates_use_no_other_placeholders(shell):
    """Test that templates rely on no dynamic token besides the known four."""
    body = TEMPLATES[shell].body
    for token in PLACEHOLDERS:
        body = body.replace(token, "")
    assert "%%" not in body


@pytest.mark.parametrize("shell", ["bash", "zsh"])
def test_templates_follow_completion_contract(shell):
    """Test that both hooks export state, check status 200 and report errors."""
    body = TEMPLATES[shell].body
    assert "CMDLINE_CONTENTS" in body
    assert "CMDLINE_CURSOR_INDEX" in body
    assert "</dev/null" in body
    assert "$STATUS -eq 200" in body
    assert "$STATUS -ne 0" in body
    assert "return $STATUS;" in body
    assert ">&2 echo" in body


def test_bash_template_exports_wordbreaks():
    """Test that bash passes COMP_WORDBREAKS on to the completion command."""
    body = TEMPLATES["bash"].body
    assert 'CMDLINE_WORDBREAKS="$COMP_WORDBREAKS"' in body
    assert "export CMDLINE_CONTENTS CMDLINE_CURSOR_INDEX CMDLINE_WORDBREAKS;" in body


@pytest.mark.parametrize("shell", ["bash", "zsh"])
def test_templates_check_path_completion_status(shell):
    """Test that hooks test for the status the protocol module reserves."""
    assert f"$STATUS -eq {PATH_COMPLETION_STATUS}" in TEMPLATES[shell].body
