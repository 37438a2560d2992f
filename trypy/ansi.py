"""ANSI-aware text measurement and clipping utilities.

Measures display columns for wide glyphs and styled text.
Row builders and the painter use these so nothing overflows its pane.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "..."


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks and control characters consume no columns, East Asian
    wide/fullwidth characters (including most emoji) consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.category(ch) in {"Cc", "Cf"}:
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return visible width of ``text``, ignoring ANSI escape sequences."""
    plain = ANSI_ESCAPE_RE.sub("", text)
    return sum(char_display_width(ch) for ch in plain)


def clip_text(text: str, max_cols: int) -> str:
    """Trim plain text to at most ``max_cols`` display columns."""
    if max_cols <= 0 or not text:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)


def truncate_with_ellipsis(text: str, max_cols: int) -> str:
    """Fit ``text`` in ``max_cols`` columns, marking cuts with ``...``.

    When even the ellipsis does not fit, the text is hard-clipped instead.
    """
    if display_width(text) <= max_cols:
        return text
    if max_cols <= len(ELLIPSIS):
        return clip_text(text, max_cols)
    return clip_text(text, max_cols - len(ELLIPSIS)) + ELLIPSIS


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)
