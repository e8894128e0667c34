"""The completion command's side of the hook protocol.

A generated hook exports the command line and cursor position, then runs
``<program> _completion``. The program answers by printing candidates and
exiting 0, exiting with PATH_COMPLETION_STATUS to ask the shell for path
completion, or exiting with any other status to report an error.

This module only reads that environment and formats the answer; working out
the candidates is up to the program.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

CONTENTS_VAR = "CMDLINE_CONTENTS"
CURSOR_VAR = "CMDLINE_CURSOR_INDEX"
WORDBREAKS_VAR = "CMDLINE_WORDBREAKS"

# Exit status asking the hook to fall back to the shell's path completion
PATH_COMPLETION_STATUS = 200

# bash's default COMP_WORDBREAKS
DEFAULT_WORDBREAKS = "\"'><=;|&(: \t\n"


class ProtocolError(Exception):
    """The completion environment is missing or malformed."""

    pass


@dataclass(frozen=True)
class CompletionContext:
    """Command line state handed over by a hook.

    Attributes:
        command_line: Full text of the command line being completed
        cursor: Offset of the cursor within command_line
        wordbreaks: Characters the shell treats as word separators
    """

    command_line: str
    cursor: int
    wordbreaks: str = DEFAULT_WORDBREAKS

    @classmethod
    def from_environ(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "CompletionContext":
        """Build a context from the variables a hook exports.

        Raises:
            ProtocolError: If CMDLINE_CONTENTS is unset or the cursor is not
                a non-negative integer
        """
        env = os.environ if environ is None else environ

        command_line = env.get(CONTENTS_VAR)
        if command_line is None:
            raise ProtocolError(
                f"{CONTENTS_VAR} is not set; was the program run from a completion hook?"
            )

        raw_cursor = env.get(CURSOR_VAR, "").strip()
        if not raw_cursor:
            cursor = len(command_line)
        else:
            try:
                cursor = int(raw_cursor)
            except ValueError:
                raise ProtocolError(
                    f"{CURSOR_VAR} must be an integer, got {raw_cursor!r}"
                ) from None
            if cursor < 0:
                raise ProtocolError(f"{CURSOR_VAR} must not be negative, got {cursor}")
            cursor = min(cursor, len(command_line))

        wordbreaks = env.get(WORDBREAKS_VAR) or DEFAULT_WORDBREAKS
        return cls(command_line=command_line, cursor=cursor, wordbreaks=wordbreaks)

    @property
    def words(self) -> List[str]:
        """Whitespace-separated words before the cursor."""
        return self.command_line[: self.cursor].split()

    @property
    def current_word(self) -> str:
        """The partial word under the cursor, empty after whitespace."""
        before = self.command_line[: self.cursor]
        if not before or before[-1].isspace():
            return ""
        return before.split()[-1]


def format_candidates(candidates: Iterable[str]) -> str:
    """Return *candidates* as the newline-separated text a hook expects."""
    return "\n".join(str(c) for c in candidates)


__all__ = [
    "CONTENTS_VAR",
    "CURSOR_VAR",
    "CompletionContext",
    "DEFAULT_WORDBREAKS",
    "PATH_COMPLETION_STATUS",
    "ProtocolError",
    "WORDBREAKS_VAR",
    "format_candidates",
]
