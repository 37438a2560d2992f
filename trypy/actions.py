"""State transitions for the selector.

Each action mutates ``SelectionState`` in place. Only ``delete_selected``
touches the filesystem; failures surface as status text, never exceptions.
"""

from __future__ import annotations

import shutil

from loguru import logger

from .fuzzy import rank_entries
from .state import Mode, SelectionResult, SelectionState

NO_EDITOR_MESSAGE = "No editor configured in config.toml"


def refilter(state: SelectionState) -> None:
    """Rebuild the filtered view for the current query and reset the cursor."""
    state.entries.filtered = rank_entries(state.entries.all, state.query)
    state.cursor = 0
    state.clamp_cursor()


def type_character(state: SelectionState, ch: str) -> None:
    state.query += ch
    state.status_message = None
    refilter(state)


def delete_last_character(state: SelectionState) -> None:
    state.query = state.query[:-1]
    refilter(state)


def move_cursor(state: SelectionState, delta: int) -> None:
    """Move the cursor by ``delta`` rows, saturating at both ends."""
    state.cursor += delta
    state.clamp_cursor()


def _resolve_pick(state: SelectionState) -> str | None:
    selected = state.selected_entry()
    if selected is not None:
        return selected.name
    if state.query:
        return state.query
    return None


def confirm_selection(state: SelectionState, open_in_editor: bool = False) -> None:
    """Finish with the highlighted entry, or the raw query when nothing matches.

    With no entries and an empty query there is nothing to pick and the
    selector keeps running.
    """
    pick = _resolve_pick(state)
    if pick is None:
        return
    state.result = SelectionResult(name=pick, open_in_editor=open_in_editor)
    state.should_quit = True


def cancel(state: SelectionState) -> None:
    state.result = None
    state.should_quit = True


def request_delete(state: SelectionState) -> None:
    if state.entries.filtered:
        state.mode = Mode.DELETE_CONFIRM


def decline_delete(state: SelectionState) -> None:
    state.mode = Mode.NORMAL


def request_edit(state: SelectionState) -> None:
    if not state.editor_cmd:
        state.status_message = NO_EDITOR_MESSAGE
        return
    confirm_selection(state, open_in_editor=True)


def delete_selected(state: SelectionState) -> None:
    """Remove the highlighted directory tree and drop it from the model.

    On failure the entry stays in memory even if part of the tree was already
    removed; the error is reported through ``status_message``.
    """
    selected = state.selected_entry()
    if selected is not None:
        target = state.root / selected.name
        try:
            shutil.rmtree(target)
        except OSError as exc:
            logger.warning("failed to delete {}: {}", target, exc)
            state.status_message = f"Error deleting: {exc}"
        else:
            logger.info("deleted {}", target)
            state.entries.remove(selected.name)
            refilter(state)
            state.status_message = f"Deleted: {target}"
    state.mode = Mode.NORMAL
