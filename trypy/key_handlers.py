"""Key-token dispatch for the selector's normal and delete-confirm modes."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from . import actions
from .state import Mode, SelectionState

Action = Callable[[SelectionState], None]


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens to a single state action."""

    keys: tuple[str, ...]
    action: Action


@dataclass
class ModeKeymap:
    """Dispatch table for one mode with an optional printable-text fallback."""

    bindings: dict[str, Action] = field(default_factory=dict)
    on_text: Callable[[SelectionState, str], None] | None = None

    def bind(self, *bindings: KeyBinding) -> ModeKeymap:
        for binding in bindings:
            for key in binding.keys:
                self.bindings[key] = binding.action
        return self

    def dispatch(self, state: SelectionState, key: str) -> bool:
        action = self.bindings.get(key)
        if action is not None:
            action(state)
            return True
        if self.on_text is not None and is_text_key(key):
            self.on_text(state, key)
            return True
        return False


def is_text_key(key: str) -> bool:
    """Return whether ``key`` is a single printable character token."""
    return len(key) == 1 and key.isprintable()


def _bindings(pairs: Iterable[tuple[tuple[str, ...], Action]]) -> list[KeyBinding]:
    return [KeyBinding(keys, action) for keys, action in pairs]


NORMAL_KEYMAP = ModeKeymap(on_text=actions.type_character).bind(
    *_bindings(
        [
            (("BACKSPACE",), actions.delete_last_character),
            (("UP", "CTRL_P"), lambda state: actions.move_cursor(state, -1)),
            (("DOWN", "CTRL_N"), lambda state: actions.move_cursor(state, 1)),
            (("ENTER",), actions.confirm_selection),
            (("ESC", "CTRL_C"), actions.cancel),
            (("CTRL_D",), actions.request_delete),
            (("CTRL_E",), actions.request_edit),
        ]
    )
)

DELETE_CONFIRM_KEYMAP = ModeKeymap().bind(
    *_bindings(
        [
            (("y", "Y"), actions.delete_selected),
            (("n", "N", "ESC"), actions.decline_delete),
            (("CTRL_C",), actions.cancel),
        ]
    )
)

KEYMAPS: dict[Mode, ModeKeymap] = {
    Mode.NORMAL: NORMAL_KEYMAP,
    Mode.DELETE_CONFIRM: DELETE_CONFIRM_KEYMAP,
}


def handle_key(state: SelectionState, key: str) -> bool:
    """Apply the transition bound to ``key`` in the current mode.

    Returns ``False`` when the key means nothing in this mode.
    """
    if not key:
        return False
    return KEYMAPS[state.mode].dispatch(state, key)
