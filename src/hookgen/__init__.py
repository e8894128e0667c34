"""Generate shell hooks that wire a program into bash or zsh tab completion."""

from .completion import (
    HookRequest,
    UnknownShellType,
    generate_function_name,
    generate_hook,
)
from .templates import list_shell_types

__version__ = "0.1.0"

__all__ = [
    "HookRequest",
    "UnknownShellType",
    "__version__",
    "generate_function_name",
    "generate_hook",
    "list_shell_types",
]
