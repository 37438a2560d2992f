"""Command-line front door for trypy.

Parses CLI options, loads configuration, and either takes the workspace
name from the arguments or runs the interactive selector. The resulting
shell command is the only thing written to stdout.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import TextIO

from loguru import logger

from . import __version__
from .config import APP_NAME, LauncherConfig, load_configuration
from .dispatch import resolve_selection
from .logs import DEFAULT_LEVEL, setup_logging
from .runtime import run_selector
from .shell import Shell, detect_shell, setup_shell
from .state import SelectionState
from .terminal import TerminalController


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Workspace manager for your temporary experiments. "
        "Prints a shell command; use the shell integration (--setup) to run it.",
    )
    parser.add_argument(
        "name_or_url",
        nargs="?",
        metavar="NAME_OR_URL",
        help="Create or jump to an experiment, or clone a repo. Starts the selector if omitted.",
    )
    parser.add_argument(
        "--setup",
        choices=[shell.value for shell in Shell],
        help="Install shell integration for the given shell.",
    )
    parser.add_argument("-s", "--shallow-clone", action="store_true", help="Clone with --depth 1.")
    parser.add_argument("--no-color", action="store_true", help="Disable colors in the selector.")
    parser.add_argument("--log-level", default=DEFAULT_LEVEL, help="Log file level (default: %(default)s).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _confirm(prompt: str, stdin: TextIO, stderr: TextIO) -> bool:
    """Ask a ``[Y/n]`` question on stderr; an empty answer means yes."""
    stderr.write(prompt)
    stderr.flush()
    answer = stdin.readline().strip()
    return not answer or answer.lower() == "y"


def offer_shell_setup(stdin: TextIO | None = None, stderr: TextIO | None = None) -> None:
    stdin = sys.stdin if stdin is None else stdin
    stderr = sys.stderr if stderr is None else stderr
    shell = detect_shell()
    if shell is None:
        return
    stderr.write(f"Detected shell: {shell.value}\n")
    if _confirm(f"Shell integration not configured. Set it up for {shell.value}? [Y/n] ", stdin, stderr):
        setup_shell(shell)


def run_interactive(config: LauncherConfig) -> tuple[str | None, bool]:
    """Scan the tries dir and run the selector on the controlling terminal."""
    if not sys.stdin.isatty():
        raise SystemExit(f"{APP_NAME}: the selector needs an interactive terminal.")
    state = SelectionState.from_scan(config.tries_dir, editor_cmd=config.editor_cmd)
    terminal = TerminalController(sys.stdin.fileno(), sys.stderr.fileno())
    return run_selector(state, terminal, config.theme)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, pick a workspace, and print the command to evaluate."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    no_color = args.no_color or bool(os.environ.get("NO_COLOR"))
    config = load_configuration(no_color=no_color)

    try:
        config.tries_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SystemExit(f"{APP_NAME}: cannot create {config.tries_dir}: {exc}") from exc

    if args.setup is not None:
        try:
            setup_shell(Shell(args.setup))
        except OSError as exc:
            raise SystemExit(f"{APP_NAME}: shell setup failed: {exc}") from exc
        return

    if config.is_first_run:
        try:
            offer_shell_setup()
        except OSError as exc:
            logger.warning("first-run shell setup failed: {}", exc)
            sys.stderr.write(f"Shell setup failed: {exc}\n")

    if args.name_or_url:
        selection, open_editor = args.name_or_url, False
    else:
        selection, open_editor = run_interactive(config)

    if selection is None:
        return
    command = resolve_selection(
        selection,
        config.tries_dir,
        editor_cmd=config.editor_cmd,
        open_editor=open_editor,
        shallow_clone=args.shallow_clone,
    )
    if command is not None:
        sys.stdout.write(command + "\n")


if __name__ == "__main__":
    main()
