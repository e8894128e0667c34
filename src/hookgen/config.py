from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

try:
    import tomllib  # py>=3.11
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

logger = logging.getLogger(__name__)

VERBOSITY_LEVELS = ("quiet", "normal", "verbose")
OUTPUT_FORMATS = ("text", "json")


# -------------------------
# Dataclasses
# -------------------------


@dataclass(frozen=True)
class HookDefaults:
    shell: Optional[str] = None  # None => detect from $SHELL
    program: Optional[str] = None
    name: Optional[str] = None
    multiple: bool = False


@dataclass(frozen=True)
class OutputSettings:
    verbosity: str = "normal"  # quiet|normal|verbose
    format: str = "text"  # text|json


@dataclass(frozen=True)
class Config:
    hook: HookDefaults
    output: OutputSettings


# -------------------------
# Parsing helpers
# -------------------------


_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}

# Top-level tables hookgen reads; anything else in the file is ignored
SECTIONS = ("hook", "output")


def _parse_bool(value: Any, default: bool) -> bool:
    """Accept TOML booleans, or the usual words when written as a string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return default


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}


def _config_paths(project_root: Path) -> List[Path]:
    """Existing config files, lowest precedence first."""
    candidates = [
        project_root / ".hookgen" / "hookgen.toml",
        project_root / "hookgen.toml",
    ]

    env = os.environ.get("HOOKGEN_CONFIG")
    if env:
        override = Path(env)
        if not override.is_absolute():
            override = (project_root / override).resolve()
        if not override.exists():
            logger.debug("HOOKGEN_CONFIG points at missing file: %s", override)
        candidates.append(override)

    return [p for p in candidates if p.exists()]


def _load_sections(project_root: Path) -> Tuple[Dict[str, Dict[str, Any]], List[Path]]:
    """Return the known tables merged key by key across files, and the files read."""
    sections: Dict[str, Dict[str, Any]] = {name: {} for name in SECTIONS}
    paths = _config_paths(project_root)

    for path in paths:
        data = _load_toml(path)
        for name in SECTIONS:
            table = data.get(name)
            if isinstance(table, dict):
                sections[name].update(table)
            elif table is not None:
                logger.warning("Ignoring [%s] in %s: not a table", name, path)

    return sections, paths


# -------------------------
# Public API
# -------------------------


def load_config(project_root: Path) -> Config:
    """Load and normalize configuration.

    Key behavior:
    - Reads .hookgen/hookgen.toml (if present).
    - Allows ./hookgen.toml to override.
    - Allows $HOOKGEN_CONFIG to override both.

    The returned config is always usable (defaults applied).

    Raises:
        ValueError: If output.verbosity or output.format is not recognised
    """

    sections, read_paths = _load_sections(project_root)
    for p in read_paths:
        logger.debug("Loaded config from %s", p)

    hook_raw = sections["hook"]
    output_raw = sections["output"]

    program = _optional_str(hook_raw.get("program"))
    if program is not None:
        program = os.path.expanduser(program)

    hook = HookDefaults(
        shell=_optional_str(hook_raw.get("shell")),
        program=program,
        name=_optional_str(hook_raw.get("name")),
        multiple=_parse_bool(hook_raw.get("multiple"), HookDefaults.multiple),
    )

    verbosity = str(output_raw.get("verbosity", OutputSettings.verbosity)).strip().lower()
    if verbosity not in VERBOSITY_LEVELS:
        raise ValueError(
            f"Invalid output.verbosity: {verbosity!r}. Must be one of: "
            f"{', '.join(VERBOSITY_LEVELS)}."
        )

    format_type = str(output_raw.get("format", OutputSettings.format)).strip().lower()
    if format_type not in OUTPUT_FORMATS:
        raise ValueError(
            f"Invalid output.format: {format_type!r}. Must be one of: "
            f"{', '.join(OUTPUT_FORMATS)}."
        )

    return Config(
        hook=hook,
        output=OutputSettings(verbosity=verbosity, format=format_type),
    )
