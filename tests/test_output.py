"""Unit tests for output control."""

from __future__ import annotations

import json

import pytest

from hookgen.output import (
    OutputConfig,
    format_json_output,
    get_output_config,
    print_json_output,
    print_output,
    set_output_config,
)


@pytest.fixture(autouse=True)
def reset_output_config():
    """Reset global output config before and after each test."""
    import hookgen.output as output_module

    original = output_module._output_config
    output_module._output_config = None
    yield
    output_module._output_config = original


def test_get_output_config_defaults():
    config = get_output_config()
    assert config.verbosity == "normal"
    assert config.format == "text"


@pytest.mark.parametrize(
    "verbosity, level, printed",
    [
        ("quiet", "quiet", True),
        ("quiet", "normal", False),
        ("quiet", "verbose", False),
        ("normal", "normal", True),
        ("normal", "verbose", False),
        ("verbose", "verbose", True),
    ],
)
def test_print_output_respects_verbosity(capsys, verbosity, level, printed):
    """Test which levels print under each verbosity."""
    set_output_config(OutputConfig(verbosity=verbosity))
    print_output("message", level=level)

    out = capsys.readouterr().out
    assert (out == "message\n") is printed


def test_print_output_errors_always_go_to_stderr(capsys):
    """Test that errors print even in quiet JSON mode."""
    set_output_config(OutputConfig(verbosity="quiet", format="json"))
    print_output("boom", level="error")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "boom\n"


def test_print_output_suppressed_in_json_mode(capsys):
    set_output_config(OutputConfig(format="json"))
    print_output("hello", level="quiet")
    assert capsys.readouterr().out == ""


def test_print_json_output(capsys):
    """Test that JSON is printed only in JSON mode."""
    print_json_output({"shells": ["bash"]})
    assert capsys.readouterr().out == ""

    set_output_config(OutputConfig(format="json"))
    print_json_output({"shells": ["bash"]})
    assert json.loads(capsys.readouterr().out) == {"shells": ["bash"]}


def test_format_json_output_keeps_key_order():
    text = format_json_output({"b": 1, "a": 2})
    assert text.index('"b"') < text.index('"a"')
