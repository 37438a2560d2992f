"""Behavior tests for selector key dispatch.

Drives ``handle_key`` with key tokens the way the runtime loop does and
checks the resulting state: navigation, selection, deletion, and editing.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from trypy.actions import NO_EDITOR_MESSAGE
from trypy.entries import Entry, EntryCollection
from trypy.key_handlers import handle_key, is_text_key
from trypy.state import Mode, SelectionState


def _state(*names: str, root: Path | None = None, editor_cmd: str | None = None) -> SelectionState:
    entries = [Entry(name, modified_at=float(100 - idx)) for idx, name in enumerate(names)]
    return SelectionState(
        root=root if root is not None else Path("/tmp/tries"),
        entries=EntryCollection.from_entries(entries),
        editor_cmd=editor_cmd,
    )


def _press(state: SelectionState, *keys: str) -> None:
    for key in keys:
        handle_key(state, key)


class NormalModeTests(unittest.TestCase):
    def test_cursor_saturates_at_both_ends(self) -> None:
        state = _state("a", "b", "c")

        _press(state, "UP")
        self.assertEqual(state.cursor, 0)

        _press(state, "DOWN", "CTRL_N", "DOWN", "DOWN")
        self.assertEqual(state.cursor, 2)

        _press(state, "CTRL_P")
        self.assertEqual(state.cursor, 1)

    def test_typing_filters_and_resets_cursor(self) -> None:
        state = _state("abc", "zzz", "albatross")
        _press(state, "DOWN", "DOWN")

        _press(state, "a", "b")

        self.assertEqual(state.query, "ab")
        self.assertEqual(state.cursor, 0)
        self.assertEqual([entry.name for entry in state.filtered], ["abc", "albatross"])

    def test_backspace_widens_filter(self) -> None:
        state = _state("abc", "zzz")
        _press(state, "a", "BACKSPACE")

        self.assertEqual(state.query, "")
        self.assertEqual([entry.name for entry in state.filtered], ["abc", "zzz"])

    def test_backspace_on_empty_query_is_harmless(self) -> None:
        state = _state("abc")

        _press(state, "BACKSPACE")

        self.assertEqual(state.query, "")
        self.assertEqual(len(state.filtered), 1)

    def test_enter_selects_highlighted_entry(self) -> None:
        state = _state("first", "second")
        _press(state, "DOWN", "ENTER")

        self.assertTrue(state.should_quit)
        self.assertEqual(state.outcome(), ("second", False))

    def test_enter_without_matches_uses_query_as_new_name(self) -> None:
        state = _state("alpha", "beta")

        _press(state, *"newproj", "ENTER")

        self.assertEqual(state.filtered, [])
        self.assertEqual(state.outcome(), ("newproj", False))

    def test_enter_with_nothing_to_pick_keeps_running(self) -> None:
        state = _state()

        self.assertTrue(handle_key(state, "ENTER"))

        self.assertFalse(state.should_quit)
        self.assertIsNone(state.result)

    def test_escape_and_ctrl_c_quit_without_result(self) -> None:
        for key in ("ESC", "CTRL_C"):
            state = _state("a")
            _press(state, key)
            self.assertTrue(state.should_quit)
            self.assertEqual(state.outcome(), (None, False))

    def test_edit_without_editor_sets_status(self) -> None:
        state = _state("proj")

        _press(state, "CTRL_E")

        self.assertFalse(state.should_quit)
        self.assertEqual(state.status_message, NO_EDITOR_MESSAGE)

    def test_edit_with_editor_selects_for_editor(self) -> None:
        state = _state("proj", editor_cmd="code")

        _press(state, "CTRL_E")

        self.assertEqual(state.outcome(), ("proj", True))

    def test_typing_clears_status_message(self) -> None:
        state = _state("proj")
        state.status_message = "Deleted: /tmp/tries/old"

        _press(state, "p")

        self.assertIsNone(state.status_message)

    def test_unbound_tokens_are_ignored(self) -> None:
        state = _state("a")

        self.assertFalse(handle_key(state, "CTRL_U"))
        self.assertFalse(handle_key(state, ""))
        self.assertEqual(state.query, "")

    def test_ctrl_d_with_empty_list_stays_in_normal_mode(self) -> None:
        state = _state()

        _press(state, "CTRL_D")

        self.assertIs(state.mode, Mode.NORMAL)


class DeleteConfirmTests(unittest.TestCase):
    def test_confirm_removes_directory_and_entry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "keep").mkdir()
            (root / "doomed" / "nested").mkdir(parents=True)
            state = _state("doomed", "keep", root=root)

            _press(state, "CTRL_D")
            self.assertIs(state.mode, Mode.DELETE_CONFIRM)
            _press(state, "y")

            self.assertFalse((root / "doomed").exists())
            self.assertTrue((root / "keep").exists())

        self.assertIs(state.mode, Mode.NORMAL)
        self.assertEqual([entry.name for entry in state.entries.all], ["keep"])
        self.assertEqual([entry.name for entry in state.filtered], ["keep"])
        self.assertEqual(state.cursor, 0)
        self.assertEqual(state.status_message, f"Deleted: {root / 'doomed'}")

    def test_delete_keeps_current_filter(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ("abc", "albatross", "zzz"):
                (root / name).mkdir()
            state = _state("abc", "albatross", "zzz", root=root)

            _press(state, "a", "b", "CTRL_D", "Y")

        self.assertEqual([entry.name for entry in state.filtered], ["albatross"])
        self.assertEqual(len(state.entries.all), 2)

    def test_failed_delete_reports_error_and_keeps_entry(self) -> None:
        state = _state("stuck", "other")

        with mock.patch("trypy.actions.shutil.rmtree", side_effect=OSError("permission denied")):
            _press(state, "CTRL_D", "y")

        self.assertIs(state.mode, Mode.NORMAL)
        self.assertEqual(state.status_message, "Error deleting: permission denied")
        self.assertEqual([entry.name for entry in state.entries.all], ["stuck", "other"])
        self.assertFalse(state.should_quit)

    def test_decline_returns_to_normal_mode(self) -> None:
        for key in ("n", "N", "ESC"):
            state = _state("safe")
            with mock.patch("trypy.actions.shutil.rmtree") as rmtree_mock:
                _press(state, "CTRL_D", key)
            rmtree_mock.assert_not_called()
            self.assertIs(state.mode, Mode.NORMAL)
            self.assertFalse(state.should_quit)
            self.assertEqual(len(state.entries.all), 1)

    def test_ctrl_c_quits_from_confirm(self) -> None:
        state = _state("safe")

        _press(state, "CTRL_D", "CTRL_C")

        self.assertTrue(state.should_quit)
        self.assertIsNone(state.result)

    def test_other_keys_are_ignored_while_confirming(self) -> None:
        state = _state("safe")
        _press(state, "CTRL_D")

        self.assertFalse(handle_key(state, "x"))
        self.assertFalse(handle_key(state, "ENTER"))

        self.assertIs(state.mode, Mode.DELETE_CONFIRM)
        self.assertEqual(state.query, "")


class TextKeyTests(unittest.TestCase):
    def test_only_single_printable_characters_are_text(self) -> None:
        self.assertTrue(is_text_key("a"))
        self.assertTrue(is_text_key("é"))
        self.assertFalse(is_text_key("UP"))
        self.assertFalse(is_text_key("\x01"))
        self.assertFalse(is_text_key(""))


if __name__ == "__main__":
    unittest.main()
