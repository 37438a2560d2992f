"""Mutable selector state shared by key handlers, renderer, and the loop."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path

from .entries import Entry, EntryCollection


class Mode(enum.Enum):
    NORMAL = "normal"
    DELETE_CONFIRM = "delete_confirm"


@dataclass(frozen=True)
class SelectionResult:
    """Final pick handed to command dispatch."""

    name: str
    open_in_editor: bool = False


@dataclass
class SelectionState:
    root: Path
    entries: EntryCollection = field(default_factory=EntryCollection)
    query: str = ""
    cursor: int = 0
    mode: Mode = Mode.NORMAL
    status_message: str | None = None
    should_quit: bool = False
    result: SelectionResult | None = None
    editor_cmd: str | None = None

    @classmethod
    def from_scan(cls, root: Path, editor_cmd: str | None = None) -> SelectionState:
        """Build initial state from a directory scan of ``root``."""
        return cls(root=root, entries=EntryCollection.from_scan(root), editor_cmd=editor_cmd)

    @property
    def filtered(self) -> list[Entry]:
        return self.entries.filtered

    def selected_entry(self) -> Entry | None:
        """Return the entry under the cursor, if any."""
        if not self.entries.filtered:
            return None
        if 0 <= self.cursor < len(self.entries.filtered):
            return self.entries.filtered[self.cursor]
        return None

    def clamp_cursor(self) -> None:
        """Keep ``cursor`` inside ``[0, len(filtered))`` (``0`` when empty)."""
        last = len(self.entries.filtered) - 1
        self.cursor = max(0, min(self.cursor, last))

    def outcome(self) -> tuple[str | None, bool]:
        """Return ``(name, open_in_editor)`` or ``(None, False)`` without a result."""
        if self.result is None:
            return None, False
        return self.result.name, self.result.open_in_editor
