"""Completion hook generation.

Turns a shell template into a ready-to-install hook by stripping its comments
and substituting the function name, program name, program path and
completion command placeholders.

Generation is pure string computation: no I/O, no logging.

Examples:
    >>> hook = generate_hook("bash", "/usr/local/bin/app", "app")
    >>> 'complete -F _app_' in hook
    True
"""

from __future__ import annotations

import hashlib
import os
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Mapping, Optional, Sequence

from .templates import (
    COMPLETION_COMMAND,
    FUNCTION_NAME,
    PROGRAM_NAME,
    PROGRAM_PATH,
    get_template,
    list_shell_types,
)

# Subcommand the target program answers completion requests on
COMPLETION_SUBCOMMAND = "_completion"

# Shared dispatcher: the program being completed arrives as the first argument
MULTIPLE_PROGRAM_DISPATCH = "$1"

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_]+")


class UnknownShellType(Exception):
    """Raised when no hook template is registered for a shell type."""

    def __init__(self, shell_type: str, available: Sequence[str]):
        self.shell_type = shell_type
        self.available = tuple(available)
        super().__init__(
            f"Cannot generate hook for unknown shell type '{shell_type}'. "
            f"Available hooks are: {', '.join(self.available)}"
        )


@dataclass(frozen=True)
class HookRequest:
    """Parameters for one generated hook.

    Attributes:
        shell_type: Key of the template to use ("bash", "zsh")
        program_path: Location of the executable providing completions
        program_name: Command name to register; defaults to program_path
        multiple: Whether one hook function serves several programs
    """

    shell_type: str
    program_path: str
    program_name: Optional[str] = None
    multiple: bool = False

    @property
    def resolved_name(self) -> str:
        return self.program_name or self.program_path

    @property
    def completion_command(self) -> str:
        if self.multiple:
            return f"{MULTIPLE_PROGRAM_DISPATCH} {COMPLETION_SUBCOMMAND}"
        return f"{self.program_path} {COMPLETION_SUBCOMMAND}"

    @property
    def function_name(self) -> str:
        return generate_function_name(self.program_path, self.resolved_name)


def sanitize_function_name(name: str) -> str:
    """Make *name* safe for use in a shell function name.

    Hyphens become underscores and anything outside ``[A-Za-z0-9_]`` is
    dropped. The result may be empty.
    """
    return _UNSAFE_NAME_CHARS.sub("", name.replace("-", "_"))


def generate_function_name(program_path: str, program_name: str) -> str:
    """Return a function name unlikely to clash with other generated hooks.

    The name combines the sanitized basename of *program_name* with the first
    16 hex digits of the MD5 of the unsanitized *program_path*, so the same
    path and name always produce the same function while two installs at
    different paths do not collide.

    Examples:
        >>> generate_function_name("/bin/my-tool", "my-tool")[:9]
        '_my_tool_'
    """
    basename = PurePosixPath(program_name).name if program_name else ""
    path_hash = hashlib.md5(program_path.encode("utf-8")).hexdigest()[:16]
    return f"_{sanitize_function_name(basename)}_{path_hash}_complete"


def strip_comments(script: str) -> str:
    """Remove every line whose first non-whitespace character is ``#``.

    Removed lines take their line terminator with them. Comments have to go
    because an unquoted ``eval $(...)`` joins the hook onto a single line,
    where a comment would swallow everything after it.
    """
    return "".join(
        line
        for line in script.splitlines(keepends=True)
        if not line.lstrip().startswith("#")
    )


def render_hook(request: HookRequest) -> str:
    """Return the hook script for *request*.

    Raises:
        UnknownShellType: If no template is registered for request.shell_type
    """
    template = get_template(request.shell_type)
    if template is None:
        raise UnknownShellType(request.shell_type, list_shell_types())

    replacements = {
        FUNCTION_NAME: request.function_name,
        PROGRAM_NAME: request.resolved_name,
        PROGRAM_PATH: request.program_path,
        COMPLETION_COMMAND: request.completion_command,
    }
    # One pass over the text so substituted values are never re-scanned
    pattern = re.compile("|".join(re.escape(token) for token in replacements))
    return pattern.sub(
        lambda match: replacements[match.group(0)],
        strip_comments(template.body),
    )


def generate_hook(
    shell_type: str,
    program_path: str,
    program_name: Optional[str] = None,
    multiple: bool = False,
) -> str:
    """Return a completion hook for *program_path* in *shell_type* syntax.

    Args:
        shell_type: A registered shell type (see list_shell_types)
        program_path: Path of the program completions are generated by
        program_name: Command name to register completion for; the program
            path is used when omitted or empty
        multiple: Emit a hook that dispatches to whichever program is being
            completed instead of calling program_path directly

    Returns:
        The hook script with comments removed and placeholders resolved

    Raises:
        UnknownShellType: If shell_type has no registered template

    Comments are stripped from the template before substitution, and the
    substituted values are inserted unescaped. A program path or name that
    itself contains a newline followed by ``#`` therefore yields a comment
    line in the output; such values are not valid command names anyway.
    """
    return render_hook(
        HookRequest(
            shell_type=shell_type,
            program_path=program_path,
            program_name=program_name,
            multiple=multiple,
        )
    )


def detect_shell(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the registered shell type named by ``$SHELL``, if any."""
    env = os.environ if environ is None else environ
    shell = env.get("SHELL", "")
    name = PurePosixPath(shell).name if shell else ""
    if name in list_shell_types():
        return name
    return None


__all__ = [
    "COMPLETION_SUBCOMMAND",
    "HookRequest",
    "UnknownShellType",
    "detect_shell",
    "generate_function_name",
    "generate_hook",
    "render_hook",
    "sanitize_function_name",
    "strip_comments",
]
