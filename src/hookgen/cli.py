from __future__ import annotations

import argparse
import logging
import os
import shlex
import sys
from pathlib import Path

from . import __version__
from .atomic_file import atomic_write_text
from .completion import HookRequest, UnknownShellType, detect_shell, render_hook
from .config import OUTPUT_FORMATS, Config, load_config
from .logging_config import setup_logging
from .manifest import dump_manifest, load_manifest, render_manifest
from .output import (
    OutputConfig,
    print_json_output,
    print_output,
    set_output_config,
)
from .templates import list_shell_types

logger = logging.getLogger(__name__)

EXIT_USAGE = 2


def _project_root() -> Path:
    return Path(os.getcwd()).resolve()


def _rc_file(shell: str) -> str:
    return "~/.zshrc" if shell == "zsh" else "~/.bashrc"


def _regenerate_argv(request: HookRequest) -> list[str]:
    """Return a command that prints exactly this hook and nothing else.

    Every setting is spelled out so that a hookgen.toml in whatever directory
    the shell starts in cannot change the result.
    """
    argv = [
        "hookgen",
        "-q",
        "generate",
        request.shell_type,
        "--program",
        request.program_path,
    ]
    if request.program_name:
        argv += ["--name", request.program_name]
    argv.append("--multiple" if request.multiple else "--no-multiple")
    return argv


def _print_install_hints(request: HookRequest, output_path: Path | None) -> None:
    rc_file = _rc_file(request.shell_type)
    print_output("\n# Installation instructions:", level="normal", file=sys.stderr)
    if output_path is not None:
        print_output(
            f"# Add to {rc_file}: source {output_path}",
            level="normal",
            file=sys.stderr,
        )
        return

    print_output(
        f'# Add to {rc_file}: eval "$({shlex.join(_regenerate_argv(request))})"',
        level="normal",
        file=sys.stderr,
    )
    print_output(
        f"# Or save the hook to a file and source it from {rc_file}",
        level="normal",
        file=sys.stderr,
    )


def _report_unknown_shell(exc: UnknownShellType) -> int:
    print_output(f"Error: {exc}", level="error")
    return EXIT_USAGE


def _write_output(text: str, output: str) -> Path:
    path = Path(output).expanduser()
    atomic_write_text(path, text)
    logger.debug("Wrote %d bytes to %s", len(text), path)
    print_output(f"Hook written to {path}", level="normal", file=sys.stderr)
    return path


def _write_or_print(text: str, output: str | None) -> Path | None:
    if output is None:
        sys.stdout.write(text)
        return None
    return _write_output(text, output)


def _append_to_manifest(request: HookRequest, manifest: str) -> Path:
    path = Path(manifest).expanduser()
    requests = load_manifest(path) if path.exists() else []
    if request not in requests:
        requests.append(request)
    atomic_write_text(path, dump_manifest(requests))
    logger.debug("Manifest %s now lists %d hook(s)", path, len(requests))
    return path


# -------------------------
# generate
# -------------------------


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate a completion hook for one program."""
    cfg: Config = args.config

    shell = args.shell or cfg.hook.shell or detect_shell()
    if not shell:
        print_output(
            "Error: could not determine the shell type from $SHELL; pass one of: "
            f"{', '.join(list_shell_types())}",
            level="error",
        )
        return EXIT_USAGE

    program = args.program or cfg.hook.program
    if not program:
        print_output(
            "Error: --program is required (or set hook.program in hookgen.toml)",
            level="error",
        )
        return EXIT_USAGE

    request = HookRequest(
        shell_type=shell,
        program_path=program,
        program_name=args.name or cfg.hook.name,
        multiple=cfg.hook.multiple if args.multiple is None else args.multiple,
    )
    logger.debug("Generating %s hook for %s", request.shell_type, request.program_path)

    try:
        hook = render_hook(request)
    except UnknownShellType as e:
        return _report_unknown_shell(e)

    if args.save_manifest:
        try:
            _append_to_manifest(request, args.save_manifest)
        except (FileNotFoundError, ValueError) as e:
            print_output(f"Error: {e}", level="error")
            return 1

    if args.format == "json":
        output_path = _write_output(hook, args.output) if args.output else None
        print_json_output(
            {
                "shell": request.shell_type,
                "program_path": request.program_path,
                "program_name": request.resolved_name,
                "function_name": request.function_name,
                "multiple": request.multiple,
                "output": str(output_path) if output_path else None,
                "hook": hook,
            }
        )
        return 0

    output_path = _write_or_print(hook, args.output)
    _print_install_hints(request, output_path)
    return 0


# -------------------------
# shells
# -------------------------


def cmd_shells(args: argparse.Namespace) -> int:
    """List the shell types hooks can be generated for."""
    shells = list_shell_types()
    if args.format == "json":
        print_json_output({"shells": list(shells)})
        return 0
    for shell in shells:
        print_output(shell, level="quiet")
    return 0


# -------------------------
# manifest
# -------------------------


def cmd_manifest(args: argparse.Namespace) -> int:
    """Generate every hook listed in a YAML manifest."""
    try:
        requests = load_manifest(Path(args.manifest).expanduser())
    except (FileNotFoundError, ValueError) as e:
        print_output(f"Error: {e}", level="error")
        return 1

    try:
        script = render_manifest(requests)
    except UnknownShellType as e:
        return _report_unknown_shell(e)

    if args.format == "json":
        output_path = _write_output(script, args.output) if args.output else None
        print_json_output(
            {
                "output": str(output_path) if output_path else None,
                "hooks": [
                    {
                        "shell": r.shell_type,
                        "program_path": r.program_path,
                        "program_name": r.resolved_name,
                        "function_name": r.function_name,
                    }
                    for r in requests
                ],
                "script": script,
            }
        )
        return 0

    _write_or_print(script, args.output)
    print_output(
        f"Generated {len(requests)} hook(s)", level="verbose", file=sys.stderr
    )
    return 0


# -------------------------
# Parser
# -------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hookgen",
        description="Generate shell hooks that enable tab completion for a program",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only print the hook and errors"
    )
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Print debug logging to stderr"
    )
    p.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: text, or output.format in hookgen.toml)",
    )
    p.add_argument("--log-file", type=Path, help="Also write debug logs to this file")

    sub = p.add_subparsers(dest="cmd", required=True)

    p_generate = sub.add_parser(
        "generate", help="Generate a completion hook for a program"
    )
    p_generate.add_argument(
        "shell",
        nargs="?",
        help=(
            f"Shell type ({', '.join(list_shell_types())}); "
            "defaults to hook.shell in hookgen.toml, then $SHELL"
        ),
    )
    p_generate.add_argument(
        "--program",
        help="Path of the program that answers '_completion' requests",
    )
    p_generate.add_argument(
        "--name",
        help="Command name to register completion for (default: the program path)",
    )
    p_generate.add_argument(
        "--multiple",
        action=argparse.BooleanOptionalAction,
        default=None,
        help=(
            "Generate a hook that can serve several programs "
            "(default: hook.multiple in hookgen.toml, else off)"
        ),
    )
    p_generate.add_argument(
        "-o", "--output", help="Write the hook to this file instead of stdout"
    )
    p_generate.add_argument(
        "--save-manifest",
        metavar="FILE",
        help="Also record this hook in a YAML manifest (created if missing)",
    )
    p_generate.set_defaults(func=cmd_generate)

    p_shells = sub.add_parser("shells", help="List supported shell types")
    p_shells.set_defaults(func=cmd_shells)

    p_manifest = sub.add_parser(
        "manifest", help="Generate every hook described in a YAML manifest"
    )
    p_manifest.add_argument("manifest", help="Path to the manifest file")
    p_manifest.add_argument(
        "-o", "--output", help="Write the hooks to this file instead of stdout"
    )
    p_manifest.set_defaults(func=cmd_manifest)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_config(_project_root())
    except ValueError as e:
        print_output(f"Error: {e}", level="error")
        return 1

    if args.quiet:
        verbosity = "quiet"
    elif args.verbose:
        verbosity = "verbose"
    else:
        verbosity = cfg.output.verbosity
    args.format = args.format or cfg.output.format
    args.config = cfg

    set_output_config(OutputConfig(verbosity=verbosity, format=args.format))
    setup_logging(
        verbose=verbosity == "verbose",
        quiet=verbosity == "quiet",
        log_file=args.log_file,
    )
    logger.debug("hookgen v%s starting", __version__)
    logger.debug("Command: %s", args.cmd)

    try:
        return int(args.func(args))
    except Exception as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
