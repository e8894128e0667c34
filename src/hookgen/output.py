"""Output control for the hookgen CLI.

Hooks are written to stdout untouched; everything else (installation hints,
listings, errors) goes through print_output so that quiet mode and JSON
output behave consistently.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

# -------------------------
# Dataclasses
# -------------------------


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        verbosity: Output level - "quiet", "normal", or "verbose"
        format: Output format - "text" or "json"
    """

    verbosity: str = "normal"  # quiet|normal|verbose
    format: str = "text"  # text|json


# -------------------------
# Global state
# -------------------------

_output_config: Optional[OutputConfig] = None


def get_output_config() -> OutputConfig:
    """Return the configuration set by the CLI, or defaults."""
    if _output_config is not None:
        return _output_config
    return OutputConfig()


def set_output_config(config: OutputConfig) -> None:
    global _output_config
    _output_config = config


def print_output(message: str, level: str = "normal", file: Any = None) -> None:
    """Print *message* if the current verbosity allows it.

    - "error": always printed, to stderr by default
    - "quiet": printed in every mode
    - "normal": suppressed in quiet mode
    - "verbose": only printed in verbose mode

    Text output is suppressed entirely in JSON mode, except errors.
    """
    config = get_output_config()

    if level == "error":
        print(message, file=file or sys.stderr)
        return

    if config.format == "json":
        return

    if level == "quiet":
        should_print = True
    elif level == "verbose":
        should_print = config.verbosity == "verbose"
    else:
        should_print = config.verbosity in ("normal", "verbose")

    if should_print:
        print(message, file=file or sys.stdout)


def format_json_output(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, sort_keys=False, ensure_ascii=False)


def print_json_output(data: Dict[str, Any]) -> None:
    """Print *data* as JSON when in JSON format mode."""
    if get_output_config().format == "json":
        print(format_json_output(data))
