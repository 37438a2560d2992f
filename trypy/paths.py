"""Path and git-URL helpers shared by config loading and command dispatch."""

from __future__ import annotations

import os
import re
from pathlib import Path

GIT_URL_PREFIXES = ("http://", "https://", "git@", "ssh://")
FALLBACK_REPO_NAME = "cloned-repo"


def expand_path(path_str: str) -> Path:
    """Expand a leading ``~/`` to the home directory."""
    if path_str.startswith("~/") or (os.name == "nt" and path_str.startswith("~\\")):
        return Path.home() / path_str[2:]
    return Path(path_str)


def is_git_url(text: str) -> bool:
    return text.startswith(GIT_URL_PREFIXES) or text.endswith(".git")


def extract_repo_name(url: str) -> str:
    """Return the repository directory name for a clone URL.

    ``https://github.com/tobi/try.git`` and ``git@github.com:tobi/try`` both
    give ``try``.
    """
    clean = url.rstrip("/")
    if clean.endswith(".git"):
        clean = clean[: -len(".git")]
    last = re.split(r"[/:]", clean)[-1]
    return last or FALLBACK_REPO_NAME
