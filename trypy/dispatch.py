"""Turn a final selection into the shell command printed on stdout.

An existing workspace is entered (or opened in the editor); a git URL is
cloned first; anything else becomes a new empty workspace directory.
"""

from __future__ import annotations

import shlex
import subprocess
import sys
from pathlib import Path

from loguru import logger

from .paths import extract_repo_name, is_git_url


def enter_command(path: Path, editor_cmd: str | None, open_editor: bool) -> str:
    """Return ``cd '<path>'`` or ``<editor> '<path>'`` for the shell to eval."""
    quoted = shlex.quote(str(path))
    if open_editor and editor_cmd:
        return f"{editor_cmd} {quoted}"
    return f"cd {quoted}"


def clone_command(url: str, target: Path, shallow: bool) -> list[str]:
    cmd = ["git", "clone"]
    if shallow:
        cmd.extend(["--depth", "1"])
    cmd.extend([url, str(target), "--recurse-submodules", "--no-single-branch"])
    return cmd


def clone_repository(url: str, target: Path, shallow: bool = False) -> bool:
    """Clone ``url`` into ``target``; git progress goes to our stderr."""
    sys.stderr.write(f"Cloning {url} into {target.name}...\n")
    try:
        completed = subprocess.run(
            clone_command(url, target, shallow),
            stdout=subprocess.DEVNULL,
            check=False,
        )
    except OSError as exc:
        logger.warning("git clone of {} failed to start: {}", url, exc)
        return False
    if completed.returncode != 0:
        logger.warning("git clone of {} exited with {}", url, completed.returncode)
        return False
    logger.info("cloned {} into {}", url, target)
    return True


def resolve_selection(
    selection: str,
    tries_dir: Path,
    editor_cmd: str | None = None,
    open_editor: bool = False,
    shallow_clone: bool = False,
) -> str | None:
    """Materialize ``selection`` under ``tries_dir`` and return the shell command.

    Returns ``None`` after reporting on stderr when the workspace could not be
    created or cloned.
    """
    target = tries_dir / selection
    if target.exists():
        return enter_command(target, editor_cmd, open_editor)

    if is_git_url(selection):
        clone_target = tries_dir / extract_repo_name(selection)
        if not clone_repository(selection, clone_target, shallow_clone):
            sys.stderr.write("Error: Failed to clone the repository.\n")
            return None
        return enter_command(clone_target, editor_cmd, open_editor)

    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("could not create {}: {}", target, exc)
        sys.stderr.write(f"Error: could not create {target}: {exc}\n")
        return None
    logger.info("created workspace {}", target)
    return enter_command(target, editor_cmd, open_editor)
