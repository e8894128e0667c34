"""YAML manifests describing several completion hooks.

A manifest lets one file drive the generation of hooks for many programs:

    version: 1
    hooks:
      - shell: bash
        program: /usr/local/bin/app
        name: app
      - shell: zsh
        program: /opt/tools/bin/tool
        multiple: true
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from .completion import HookRequest, render_hook

logger = logging.getLogger(__name__)

MANIFEST_VERSION = 1

_ALLOWED_KEYS = {"shell", "program", "name", "multiple"}


def _request_from_entry(index: int, entry: Any) -> HookRequest:
    if not isinstance(entry, dict):
        raise ValueError(f"Hook at index {index} must be a dictionary")

    unknown = sorted(set(entry) - _ALLOWED_KEYS)
    if unknown:
        raise ValueError(
            f"Hook at index {index} has unknown field(s): {', '.join(map(str, unknown))}"
        )

    if "shell" not in entry:
        raise ValueError(f"Hook at index {index} missing required 'shell' field")

    program = entry.get("program")
    if program is None or not str(program).strip():
        raise ValueError(f"Hook at index {index} missing required 'program' field")

    multiple = entry.get("multiple", False)
    if not isinstance(multiple, bool):
        raise ValueError(f"Hook at index {index}: 'multiple' must be true or false")

    name = entry.get("name")
    return HookRequest(
        shell_type=str(entry["shell"]),
        program_path=str(program),
        program_name=str(name) if name is not None else None,
        multiple=multiple,
    )


def parse_manifest(text: str) -> List[HookRequest]:
    """Parse manifest YAML *text* into hook requests.

    Raises:
        ValueError: If the YAML is invalid or doesn't match the manifest schema
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Manifest root must be a dictionary")

    version = data.get("version")
    if version != MANIFEST_VERSION:
        raise ValueError(
            f"Unsupported manifest version: {version} (expected {MANIFEST_VERSION})"
        )

    hooks = data.get("hooks")
    if hooks is None:
        raise ValueError("Manifest must have 'hooks' field")
    if not isinstance(hooks, list):
        raise ValueError("Manifest 'hooks' field must be a list")

    return [_request_from_entry(i, entry) for i, entry in enumerate(hooks)]


def load_manifest(path: Path) -> List[HookRequest]:
    """Load hook requests from the manifest at *path*.

    Raises:
        FileNotFoundError: If the manifest doesn't exist
        ValueError: If the manifest is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Manifest not found: {path}")

    requests = parse_manifest(path.read_text(encoding="utf-8"))
    logger.debug("Loaded %d hook(s) from %s", len(requests), path)
    return requests


def render_manifest(requests: Sequence[HookRequest]) -> str:
    """Generate every hook in *requests* and join them in order.

    Raises:
        UnknownShellType: If any request names an unregistered shell
    """
    return "\n".join(render_hook(request) for request in requests)


def dump_manifest(requests: Sequence[HookRequest]) -> str:
    """Serialise *requests* as manifest YAML."""
    hooks: List[Dict[str, Any]] = []
    for request in requests:
        entry: Dict[str, Any] = {
            "shell": request.shell_type,
            "program": request.program_path,
        }
        if request.program_name:
            entry["name"] = request.program_name
        if request.multiple:
            entry["multiple"] = True
        hooks.append(entry)

    return yaml.safe_dump(
        {"version": MANIFEST_VERSION, "hooks": hooks},
        default_flow_style=False,
        sort_keys=False,
    )


__all__ = [
    "MANIFEST_VERSION",
    "dump_manifest",
    "load_manifest",
    "parse_manifest",
    "render_manifest",
]
