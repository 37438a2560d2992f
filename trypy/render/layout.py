"""Pure projection of selector state onto declarative screen regions.

``build_frame`` never mutates state or writes to the terminal; the painter
turns the resulting ``Frame`` into escape sequences. Directory listings for
the preview pane come from an injectable reader so tests need no tree.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .. import __version__
from ..ansi import display_width, truncate_with_ellipsis
from ..entries import DEFAULT_MARKERS, Entry
from ..state import Mode, SelectionState
from ..ui_theme import BOLD, MARKER_COLORS, Theme

LIST_PERCENT = 70
MODAL_WIDTH_PERCENT = 60
MODAL_HEIGHT_PERCENT = 20
HIGHLIGHT_SYMBOL = "→ "
FOLDER_ICON = "📁"
FILE_ICON = "📄"

MARKER_GLYPHS: dict[str, str] = {
    "cargo": "\ue7a8",
    "maven": "\ue738",
    "flutter": "\ue64c",
    "go": "\ue627",
    "python": "\ue73c",
    "mise": "\U000f0b14",
    "git": "\uf1d2",
}

PreviewReader = Callable[[Path, int], list[tuple[str, bool]]]


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    def inner(self) -> Rect:
        """Area left inside a one-cell border."""
        return Rect(self.x + 1, self.y + 1, max(0, self.width - 2), max(0, self.height - 2))

    @property
    def empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class Span:
    text: str
    style: str = ""


Line = tuple[Span, ...]


@dataclass(frozen=True)
class Region:
    """One declarative widget: bordered or bare text lines inside ``rect``."""

    name: str
    rect: Rect
    lines: tuple[Line, ...] = ()
    title: str = ""
    border: bool = False
    align: str = "left"
    border_style: str = ""
    fill_style: str = ""
    clear: bool = False
    highlight_row: int | None = None
    highlight_style: str = ""


@dataclass(frozen=True)
class Frame:
    width: int
    height: int
    regions: tuple[Region, ...]

    def region(self, name: str) -> Region | None:
        for region in self.regions:
            if region.name == name:
                return region
        return None


def line_width(line: Line) -> int:
    return sum(display_width(span.text) for span in line)


def line_text(line: Line) -> str:
    return "".join(span.text for span in line)


def read_preview_children(directory: Path, limit: int) -> list[tuple[str, bool]]:
    """Return up to ``limit`` ``(name, is_dir)`` children; unreadable means empty."""
    children: list[tuple[str, bool]] = []
    if limit <= 0:
        return children
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                try:
                    is_dir = child.is_dir()
                except OSError:
                    is_dir = False
                children.append((child.name, is_dir))
                if len(children) >= limit:
                    break
    except OSError:
        return []
    return children


def format_age(modified_at: float, now: float) -> str:
    elapsed = max(0, int(now - modified_at))
    days, rem = divmod(elapsed, 86_400)
    hours, rem = divmod(rem, 3_600)
    minutes = rem // 60
    return f"({days:02d}d {hours:02d}h {minutes:02d}m)"


def format_created(created_at: float) -> str:
    try:
        return datetime.fromtimestamp(created_at).strftime("%Y-%m-%d")
    except (OverflowError, OSError, ValueError):
        return "????-??-??"


def format_entry_row(entry: Entry, width: int, now: float, theme: Theme) -> Line:
    """Build one list row that fits exactly in ``width`` columns.

    Decorations are dropped (age first, then marker glyphs, then the created
    date) when even a one-character name would not fit next to them.
    """
    if width <= 0:
        return ()
    date_style = theme.list_date.fg()
    age = Span(format_age(entry.modified_at, now), date_style)
    markers = [
        Span(f"{MARKER_GLYPHS.get(name, '*')} ", MARKER_COLORS[name].fg() if name in MARKER_COLORS else "")
        for name in DEFAULT_MARKERS
        if entry.has_marker(name)
    ]
    markers.extend(
        Span("* ") for name in sorted(entry.markers) if name not in DEFAULT_MARKERS
    )
    created = Span(format_created(entry.created_at), date_style)
    icon = Span(FOLDER_ICON)

    right: list[Span] = [*markers, age]
    left: list[Span] = [icon, created]

    def reserved() -> int:
        # One space before the name and at least one before the right side.
        return line_width(tuple(left)) + line_width(tuple(right)) + 2

    while reserved() + 1 > width and right:
        right.pop()
    while reserved() + 1 > width and len(left) > 1:
        left.pop()
    if reserved() + 1 > width:
        return (Span(truncate_with_ellipsis(entry.name, width)),)

    available = width - reserved()
    name = truncate_with_ellipsis(entry.name, available)
    padding = width - reserved() - display_width(name) + 1
    return (*left, Span(f" {name}"), Span(" " * padding), *right)


def _vertical_areas(width: int, height: int) -> dict[str, Rect]:
    title_h = 1 if height >= 6 else 0
    footer_h = 1 if height >= 2 else 0
    search_h = 3 if height - title_h - footer_h >= 4 else 0
    content_h = max(0, height - title_h - search_h - footer_h)
    y = 0
    areas: dict[str, Rect] = {}
    areas["title"] = Rect(0, y, width, title_h)
    y += title_h
    areas["search"] = Rect(0, y, width, search_h)
    y += search_h
    list_w = width * LIST_PERCENT // 100
    areas["list"] = Rect(0, y, list_w, content_h)
    areas["preview"] = Rect(list_w, y, width - list_w, content_h)
    y += content_h
    areas["footer"] = Rect(0, y, width, footer_h)
    return areas


def modal_rect(width: int, height: int) -> Rect:
    """Centered popup area, about 60% wide and 20% tall (at least 3 rows)."""
    modal_w = min(width, max(1, width * MODAL_WIDTH_PERCENT // 100))
    modal_h = min(height, max(3, height * MODAL_HEIGHT_PERCENT // 100))
    return Rect((width - modal_w) // 2, (height - modal_h) // 2, modal_w, modal_h)


def _title_region(rect: Rect, theme: Theme) -> Region:
    dim = theme.dim.fg()
    line: Line = (
        Span("🐍 try", theme.style(BOLD, theme.title_try.fg())),
        Span("-", dim),
        Span("py", theme.style(BOLD, theme.title_py.fg())),
        Span(f" v{__version__} ", dim),
        Span("🐍", theme.style(BOLD, theme.title_py.fg())),
    )
    return Region("title", rect, lines=(line,), align="center")


def _list_region(state: SelectionState, rect: Rect, theme: Theme, now: float) -> Region:
    inner = rect.inner()
    row_width = max(0, inner.width - len(HIGHLIGHT_SYMBOL) - 1)
    visible = inner.height
    entries = state.entries.filtered
    offset = 0
    if visible > 0 and state.cursor >= visible:
        offset = state.cursor - visible + 1
    lines: list[Line] = []
    highlight_row: int | None = None
    for idx in range(offset, min(len(entries), offset + visible)):
        selected = idx == state.cursor
        prefix = Span(HIGHLIGHT_SYMBOL if selected else " " * len(HIGHLIGHT_SYMBOL))
        lines.append((prefix, *format_entry_row(entries[idx], row_width, now, theme)))
        if selected:
            highlight_row = idx - offset
    return Region(
        "list",
        rect,
        lines=tuple(lines),
        title=" Folders ",
        border=True,
        highlight_row=highlight_row,
        highlight_style=theme.style(BOLD, theme.list_highlight_bg.bg(), theme.list_highlight_fg.fg()),
    )


def _preview_region(
    state: SelectionState,
    rect: Rect,
    theme: Theme,
    list_preview: PreviewReader,
) -> Region:
    selected = state.selected_entry()
    lines: list[Line] = []
    if selected is not None:
        limit = rect.inner().height
        icon_style = theme.title_try.fg()
        for name, is_dir in list_preview(state.root / selected.name, limit)[: max(0, limit)]:
            icon = FOLDER_ICON if is_dir else FILE_ICON
            lines.append((Span(f"{icon} ", icon_style), Span(name)))
        if not lines:
            lines.append((Span(" (empty) ", theme.dim.fg()),))
    return Region("preview", rect, lines=tuple(lines), title=" Preview ", border=True)


def _help_line(state: SelectionState, theme: Theme) -> Line:
    if state.status_message:
        return (Span(state.status_message, theme.style(BOLD, theme.status_message.fg())),)
    if state.mode is Mode.DELETE_CONFIRM:
        pairs = (("y", ": Confirm delete  "), ("n/Esc", ": Cancel  "), ("Ctrl+C", ": Exit"))
    else:
        pairs = (
            ("↑↓", ": Navigate  "),
            ("Enter", ": Select  "),
            ("Ctrl-D", ": Delete  "),
            ("Ctrl-E", ": Edit    "),
            ("Esc/Ctrl+C", ": Exit"),
        )
    text_style = theme.help_text.fg()
    spans: list[Span] = []
    for key, label in pairs:
        spans.append(Span(key, theme.style(BOLD, text_style)))
        spans.append(Span(label, text_style))
    return tuple(spans)


def _modal_region(state: SelectionState, width: int, height: int, theme: Theme) -> Region | None:
    selected = state.selected_entry()
    if state.mode is not Mode.DELETE_CONFIRM or selected is None:
        return None
    text_style = theme.style(BOLD, theme.popup_bg.bg(), theme.popup_text.fg())
    prompt: Line = (Span(f"Delete '{selected.name}'? (y/n)", text_style),)
    return Region(
        "modal",
        modal_rect(width, height),
        lines=(prompt,),
        title=" WARNING ",
        border=True,
        align="center",
        border_style=theme.popup_bg.bg(),
        fill_style=theme.popup_bg.bg(),
        clear=True,
    )


def build_frame(
    state: SelectionState,
    theme: Theme,
    width: int,
    height: int,
    now: float | None = None,
    list_preview: PreviewReader = read_preview_children,
) -> Frame:
    """Project ``state`` onto title, search, list, preview, footer and modal regions.

    Regions that do not fit the viewport are omitted rather than overflowing.
    """
    width = max(0, width)
    height = max(0, height)
    if now is None:
        now = time.time()
    areas = _vertical_areas(width, height)
    regions: list[Region] = []

    if not areas["title"].empty:
        regions.append(_title_region(areas["title"], theme))
    if not areas["search"].empty:
        regions.append(
            Region(
                "search",
                areas["search"],
                lines=((Span(state.query, theme.search_box.fg()),),),
                title=" Search/New ",
                border=True,
            )
        )
    if not areas["list"].empty:
        regions.append(_list_region(state, areas["list"], theme, now))
    if not areas["preview"].empty:
        regions.append(_preview_region(state, areas["preview"], theme, list_preview))
    if not areas["footer"].empty:
        regions.append(Region("footer", areas["footer"], lines=(_help_line(state, theme),), align="center"))

    if width > 0 and height > 0:
        modal = _modal_region(state, width, height, theme)
        if modal is not None:
            regions.append(modal)

    return Frame(width=width, height=height, regions=tuple(regions))
