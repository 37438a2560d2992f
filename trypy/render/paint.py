"""ANSI painter for layout frames.

Turns the declarative regions from ``layout`` into one escape-sequence
string using absolute cursor moves and rounded box borders.
"""

from __future__ import annotations

from ..ansi import clip_text, display_width
from ..ui_theme import RESET
from .layout import Frame, Line, Rect, Region, line_width

CLEAR_SCREEN = "\033[H\033[2J"


def _move(x: int, y: int) -> str:
    return f"\033[{y + 1};{x + 1}H"


def _styled(text: str, *styles: str) -> str:
    prefix = "".join(styles)
    if not prefix:
        return text
    return f"{prefix}{text}{RESET}"


def compose_line(line: Line, width: int, align: str = "left", base_style: str = "", pad: bool = False) -> str:
    """Render spans into at most ``width`` columns.

    ``base_style`` is layered on top of every span. With ``pad`` the row is
    filled to full width so background colors cover the whole row.
    """
    if width <= 0:
        return ""
    used = min(width, line_width(line))
    left_pad = (width - used) // 2 if align == "center" else 0
    out: list[str] = []
    if left_pad:
        out.append(_styled(" " * left_pad, base_style))
    col = left_pad
    for span in line:
        if col >= width:
            break
        text = clip_text(span.text, width - col)
        if not text:
            continue
        out.append(_styled(text, span.style, base_style))
        col += display_width(text)
    if pad and col < width:
        out.append(_styled(" " * (width - col), base_style))
    return "".join(out)


def _border(rect: Rect, title: str, style: str) -> list[str]:
    inner_w = rect.width - 2
    label = clip_text(title, inner_w)
    top = "╭" + label + "─" * (inner_w - display_width(label)) + "╮"
    bottom = "╰" + "─" * inner_w + "╯"
    out = [_move(rect.x, rect.y), _styled(top, style)]
    for row in range(1, rect.height - 1):
        out.append(_move(rect.x, rect.y + row))
        out.append(_styled("│", style))
        out.append(_move(rect.x + rect.width - 1, rect.y + row))
        out.append(_styled("│", style))
    out.append(_move(rect.x, rect.y + rect.height - 1))
    out.append(_styled(bottom, style))
    return out


def paint_region(region: Region) -> str:
    rect = region.rect
    if rect.empty:
        return ""
    out: list[str] = []
    if region.clear or region.fill_style:
        blank = _styled(" " * rect.width, region.fill_style)
        for row in range(rect.height):
            out.append(_move(rect.x, rect.y + row))
            out.append(blank)

    content = rect
    if region.border and rect.width >= 2 and rect.height >= 2:
        out.extend(_border(rect, region.title, region.border_style))
        content = rect.inner()

    for row, line in enumerate(region.lines[: content.height]):
        highlighted = row == region.highlight_row
        base_style = region.highlight_style if highlighted else region.fill_style
        out.append(_move(content.x, content.y + row))
        out.append(compose_line(line, content.width, region.align, base_style, pad=highlighted))
    return "".join(out)


def paint_frame(frame: Frame) -> str:
    """Return the full escape-sequence payload that draws ``frame``."""
    return CLEAR_SCREEN + "".join(paint_region(region) for region in frame.regions)
