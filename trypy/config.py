"""TOML configuration loading.

Resolves the tries directory, editor command, and color theme from the
environment and ``config.toml``. All access is defensive: a missing or
malformed config falls back to defaults and never aborts startup.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from platformdirs import user_config_dir

from .paths import expand_path
from .ui_theme import DEFAULT_THEME, Theme, theme_from_config

APP_NAME = "trypy"
DEFAULT_CONFIG_NAME = "config"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))


@dataclass(frozen=True)
class LauncherConfig:
    tries_dir: Path
    theme: Theme = DEFAULT_THEME
    editor_cmd: str | None = None
    is_first_run: bool = False
    config_path: Path | None = None


def default_tries_dir() -> Path:
    return Path.home() / "work" / "tries"


def config_file_path(environ: Mapping[str, str] | None = None, config_dir: Path | None = None) -> Path:
    """Return ``<config dir>/<$TRY_CONFIG or 'config'>.toml``."""
    env = os.environ if environ is None else environ
    name = env.get("TRY_CONFIG") or DEFAULT_CONFIG_NAME
    base = CONFIG_DIR if config_dir is None else config_dir
    return (base / name).with_suffix(".toml")


def load_config_file(path: Path) -> dict[str, object]:
    """Parse a TOML config file; malformed or unreadable files yield ``{}``."""
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring config {}: {}", path, exc)
        return {}


def _write_default_config(path: Path, tries_dir: Path) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"tries_path = {json.dumps(str(tries_dir))}\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write default config {}: {}", path, exc)
        return False
    logger.info("wrote default config {}", path)
    return True


def load_configuration(
    environ: Mapping[str, str] | None = None,
    config_dir: Path | None = None,
    *,
    no_color: bool = False,
) -> LauncherConfig:
    """Resolve tries dir, editor, and theme.

    Precedence for the tries dir is ``$TRY_PATH``, then ``tries_path`` from
    the config file, then ``~/work/tries``. The config ``editor`` beats
    ``$VISUAL`` which beats ``$EDITOR``. When no config file exists a default
    one is written and ``is_first_run`` is set.
    """
    env = os.environ if environ is None else environ
    path = config_file_path(env, config_dir)

    env_tries = env.get("TRY_PATH")
    tries_dir = Path(env_tries) if env_tries else default_tries_dir()
    editor_cmd = env.get("VISUAL") or env.get("EDITOR") or None
    theme = theme_from_config(None, no_color=no_color)
    is_first_run = False

    if path.exists():
        data = load_config_file(path)
        tries_path = data.get("tries_path")
        if isinstance(tries_path, str) and tries_path and not env_tries:
            tries_dir = expand_path(tries_path)
        editor = data.get("editor")
        if isinstance(editor, str) and editor.strip():
            editor_cmd = editor.strip()
        colors = data.get("colors")
        if isinstance(colors, dict):
            theme = theme_from_config(colors, no_color=no_color)
    else:
        is_first_run = _write_default_config(path, tries_dir)

    return LauncherConfig(
        tries_dir=tries_dir,
        theme=theme,
        editor_cmd=editor_cmd,
        is_first_run=is_first_run,
        config_path=path,
    )
