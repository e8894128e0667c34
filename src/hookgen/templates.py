"""Shell hook templates for completion integration.

Each template is a shell-specific script that copies the host shell's
completion state into the environment read by the completion command, runs
that command, and hands its output back to the shell.

The following placeholders are replaced when a hook is generated:

    %%function_name%%      - name of the generated shell function
    %%program_name%%       - command name completion is registered for
    %%program_path%%       - path to the program providing completions
    %%completion_command%% - command run to compute completions

Comments are stripped before substitution. Hooks are commonly loaded with an
unquoted ``eval $(program ...)``, which collapses newlines, so every statement
below ends with ``;`` or a shell keyword.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

FUNCTION_NAME = "%%function_name%%"
PROGRAM_NAME = "%%program_name%%"
PROGRAM_PATH = "%%program_path%%"
COMPLETION_COMMAND = "%%completion_command%%"

PLACEHOLDERS: Tuple[str, ...] = (
    FUNCTION_NAME,
    PROGRAM_NAME,
    PROGRAM_PATH,
    COMPLETION_COMMAND,
)


@dataclass(frozen=True)
class ShellTemplate:
    """Raw hook script for one shell type."""

    shell: str
    body: str


_BASH_HOOK = r"""# BASH completion for %%program_path%%
function %%function_name%% {

    # Copy bash's completion state to the variables the completion command reads
    local CMDLINE_CONTENTS="$COMP_LINE";
    local CMDLINE_CURSOR_INDEX="$COMP_POINT";
    local CMDLINE_WORDBREAKS="$COMP_WORDBREAKS";

    export CMDLINE_CONTENTS CMDLINE_CURSOR_INDEX CMDLINE_WORDBREAKS;

    local RESULT STATUS cur mail_check_backup;

    # Mail notifications would interleave with the completion output
    mail_check_backup=$MAILCHECK;
    MAILCHECK=-1;

    RESULT="$(%%completion_command%% </dev/null)";
    STATUS=$?;

    _get_comp_words_by_ref -n : cur;

    # Status 200 asks for the shell's own path completion
    if [ $STATUS -eq 200 ]; then
        MAILCHECK=$mail_check_backup;
        _filedir;
        return 0;

    # Any other failure is reported verbatim
    elif [ $STATUS -ne 0 ]; then
        MAILCHECK=$mail_check_backup;
        echo -e "$RESULT";
        return $STATUS;
    fi;

    COMPREPLY=(`compgen -W "$RESULT" -- $cur`);

    __ltrim_colon_completions "$cur";

    MAILCHECK=$mail_check_backup;
};

if [ "$(type -t _get_comp_words_by_ref)" == "function" ]; then
    complete -F %%function_name%% "%%program_name%%";
else
    >&2 echo "Completion was not registered for %%program_name%%:";
    >&2 echo "The 'bash-completion' package is required but doesn't appear to be installed.";
fi
"""

_ZSH_HOOK = r"""# ZSH completion for %%program_path%%
function %%function_name%% {
    local -x CMDLINE_CONTENTS="$words";
    local -x CMDLINE_CURSOR_INDEX;
    (( CMDLINE_CURSOR_INDEX = ${#${(j. .)words[1,CURRENT]}} ));

    local RESULT STATUS;
    RESULT=("${(@f)$( %%completion_command%% </dev/null )}");
    STATUS=$?;

    # Status 200 asks for the shell's own path completion
    if [ $STATUS -eq 200 ]; then
        _path_files;
        return 0;

    # Any other failure is reported verbatim
    elif [ $STATUS -ne 0 ]; then
        echo -e "$RESULT";
        return $STATUS;
    fi;

    compadd -- $RESULT;
};

if (( $+functions[compdef] )); then
    compdef %%function_name%% "%%program_name%%";
else
    >&2 echo "Completion was not registered for %%program_name%%:";
    >&2 echo "The zsh completion system doesn't appear to be loaded (run 'autoload -Uz compinit && compinit').";
fi
"""

TEMPLATES: Mapping[str, ShellTemplate] = MappingProxyType(
    {
        "bash": ShellTemplate(shell="bash", body=_BASH_HOOK),
        "zsh": ShellTemplate(shell="zsh", body=_ZSH_HOOK),
    }
)


def list_shell_types() -> Tuple[str, ...]:
    """Return the shell types that have hooks, in registration order."""
    return tuple(TEMPLATES)


def get_template(shell_type: str) -> ShellTemplate | None:
    """Return the template registered for *shell_type*, or None."""
    return TEMPLATES.get(shell_type)


__all__ = [
    "COMPLETION_COMMAND",
    "FUNCTION_NAME",
    "PLACEHOLDERS",
    "PROGRAM_NAME",
    "PROGRAM_PATH",
    "ShellTemplate",
    "TEMPLATES",
    "get_template",
    "list_shell_types",
]
