"""Shell integration snippets and installers.

The binary prints a command on stdout; these wrappers run it and evaluate
that output in the calling shell. Installing is idempotent: the ``source``
line is appended to an rc file only when it is not already present.
"""

from __future__ import annotations

import enum
import os
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from platformdirs import user_config_dir

from .config import APP_NAME, CONFIG_DIR

MARKER_COMMENT = f"# {APP_NAME} integration"

POSIX_FUNCTION = f"""{APP_NAME}() {{
    local output
    output=$(command {APP_NAME} "$@")

    if [ -n "$output" ]; then
        eval "$output"
    fi
}}
"""

FISH_FUNCTION = f"""function {APP_NAME}
    set command (command {APP_NAME} $argv | string collect)

    if test -n "$command"
        eval $command
    end
end
"""

POWERSHELL_FUNCTION = f"""function {APP_NAME} {{
    $command = (& (Get-Command {APP_NAME} -CommandType Application) @args)

    if ($command) {{
        Invoke-Expression $command
    }}
}}
"""

NUSHELL_FUNCTION = f"""def --env --wrapped {APP_NAME} [...args] {{
    let output = (^{APP_NAME} ...$args)

    if ($output | is-not-empty) {{
        let path = ($output | split row ' ' | last | str replace --all "'" '')
        cd $path
    }}
}}
"""


class Shell(enum.Enum):
    FISH = "fish"
    ZSH = "zsh"
    BASH = "bash"
    POWERSHELL = "powershell"
    NUSHELL = "nushell"


@dataclass(frozen=True)
class ShellIntegration:
    """Where a shell's wrapper lives and which rc file should source it."""

    script_path: Path
    content: str
    rc_path: Path | None
    source_line: str


def _config_root() -> Path:
    return Path(user_config_dir(appauthor=False))


def _powershell_profile(home: Path) -> Path:
    modern = home / "Documents" / "PowerShell" / "Microsoft.PowerShell_profile.ps1"
    legacy = home / "Documents" / "WindowsPowerShell" / "Microsoft.PowerShell_profile.ps1"
    if not modern.exists() and legacy.exists():
        return legacy
    return modern


def integration_for(shell: Shell, home: Path | None = None, config_root: Path | None = None) -> ShellIntegration:
    home = Path.home() if home is None else home
    root = _config_root() if config_root is None else config_root
    app_dir = CONFIG_DIR if config_root is None else root / APP_NAME
    if shell is Shell.FISH:
        script = root / "fish" / "functions" / f"{APP_NAME}.fish"
        # fish autoloads functions from this directory.
        return ShellIntegration(script, FISH_FUNCTION, None, "")
    if shell is Shell.ZSH:
        script = app_dir / f"{APP_NAME}.zsh"
        return ShellIntegration(script, POSIX_FUNCTION, home / ".zshrc", f"source {script}")
    if shell is Shell.BASH:
        script = app_dir / f"{APP_NAME}.bash"
        return ShellIntegration(script, POSIX_FUNCTION, home / ".bashrc", f"source {script}")
    if shell is Shell.POWERSHELL:
        script = app_dir / f"{APP_NAME}.ps1"
        return ShellIntegration(script, POWERSHELL_FUNCTION, _powershell_profile(home), f". '{script}'")
    script = app_dir / f"{APP_NAME}.nu"
    return ShellIntegration(script, NUSHELL_FUNCTION, root / "nushell" / "config.nu", f"source {script}")


def _append_source_line(rc_path: Path, source_line: str, create: bool, report: Callable[[str], None]) -> None:
    if rc_path.exists():
        existing = rc_path.read_text(encoding="utf-8", errors="replace")
        if source_line in existing:
            report(f"Configuration already present in {rc_path}")
            return
        with rc_path.open("a", encoding="utf-8") as handle:
            handle.write(f"\n{MARKER_COMMENT}\n{source_line}\n")
        report(f"Added configuration to {rc_path}")
        return
    if not create:
        report(f"You need to source this file in {rc_path}:")
        report(source_line)
        return
    rc_path.parent.mkdir(parents=True, exist_ok=True)
    rc_path.write_text(f"{MARKER_COMMENT}\n{source_line}\n", encoding="utf-8")
    report(f"Created and configured {rc_path}")


def setup_shell(
    shell: Shell,
    home: Path | None = None,
    config_root: Path | None = None,
    report: Callable[[str], None] | None = None,
) -> ShellIntegration:
    """Write the wrapper for ``shell`` and hook it into the shell's rc file.

    ``OSError`` propagates to the caller; the CLI reports it and exits.
    """
    say = report if report is not None else _stderr_report
    integration = integration_for(shell, home=home, config_root=config_root)
    integration.script_path.parent.mkdir(parents=True, exist_ok=True)
    integration.script_path.write_text(integration.content, encoding="utf-8")
    say(f"{shell.value} function written to {integration.script_path}")
    logger.info("installed {} integration at {}", shell.value, integration.script_path)

    if integration.rc_path is not None:
        _append_source_line(
            integration.rc_path,
            integration.source_line,
            create=shell is Shell.POWERSHELL,
            report=say,
        )
    say("Restart your shell or source the file to apply changes.")
    return integration


def detect_shell(environ: Mapping[str, str] | None = None) -> Shell | None:
    """Guess the interactive shell from the environment."""
    env = os.environ if environ is None else environ
    if os.name == "nt":
        return Shell.POWERSHELL
    if env.get("NU_VERSION"):
        return Shell.NUSHELL
    login_shell = env.get("SHELL", "")
    for shell in (Shell.FISH, Shell.ZSH, Shell.BASH):
        if shell.value in login_shell:
            return shell
    return None


def _stderr_report(message: str) -> None:
    sys.stderr.write(message + "\n")
