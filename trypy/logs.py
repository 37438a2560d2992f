"""Loguru setup.

stderr is the drawing surface and stdout carries the shell command, so logs
only go to a rotating file under the platform log directory.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILENAME = f"{APP_NAME}.log"
DEFAULT_LEVEL = "WARNING"


def log_file_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def setup_logging(level: str = DEFAULT_LEVEL, path: Path | None = None) -> Path | None:
    """Replace loguru's default stderr sink with a file sink at ``level``.

    Returns the log path, or ``None`` when the file cannot be opened (logging
    is then disabled rather than failing startup).
    """
    logger.remove()
    target = log_file_path() if path is None else path
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(target),
            level=level.upper(),
            rotation="1 MB",
            retention=3,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}",
        )
    except OSError:
        return None
    return target
