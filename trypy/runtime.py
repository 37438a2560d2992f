"""Interactive event loop for the workspace selector.

Each iteration renders the current state, waits briefly for one key, and
applies the matching transition until a quit action occurs.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from .input import read_key as default_read_key
from .key_handlers import handle_key
from .render import build_frame, paint_frame
from .state import SelectionState
from .terminal import TerminalController
from .ui_theme import Theme

POLL_INTERVAL_MS = 50


@dataclass(frozen=True)
class RuntimeLoopHooks:
    """Injected I/O used by ``run_selector`` so tests can drive it headless."""

    read_key: Callable[..., str] = default_read_key
    terminal_size: Callable[[], os.terminal_size] = lambda: shutil.get_terminal_size((80, 24))


def run_selector(
    state: SelectionState,
    terminal: TerminalController,
    theme: Theme,
    hooks: RuntimeLoopHooks | None = None,
    poll_ms: int = POLL_INTERVAL_MS,
) -> tuple[str | None, bool]:
    """Run the selector until quit; return ``(selection, open_in_editor)``.

    The bounded key poll is the only wait; a frame is only written when its
    content or the terminal size changed since the last one.
    """
    ops = hooks if hooks is not None else RuntimeLoopHooks()
    last_payload = ""
    with terminal.raw_mode():
        while not state.should_quit:
            size = ops.terminal_size()
            payload = paint_frame(build_frame(state, theme, size.columns, size.lines))
            if payload != last_payload:
                terminal.write(payload)
                last_payload = payload

            key = ops.read_key(terminal.stdin_fd, timeout_ms=poll_ms)
            if key:
                handle_key(state, key)

    selection, open_in_editor = state.outcome()
    logger.debug("selector finished: selection={!r} editor={}", selection, open_in_editor)
    return selection, open_in_editor
