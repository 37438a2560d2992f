"""Rendering: pure layout projection plus the ANSI painter."""

from __future__ import annotations

from .layout import (
    Frame,
    Line,
    Rect,
    Region,
    Span,
    build_frame,
    format_entry_row,
    line_text,
    line_width,
    modal_rect,
    read_preview_children,
)
from .paint import compose_line, paint_frame, paint_region

__all__ = [
    "Frame",
    "Line",
    "Rect",
    "Region",
    "Span",
    "build_frame",
    "compose_line",
    "format_entry_row",
    "line_text",
    "line_width",
    "modal_rect",
    "paint_frame",
    "paint_region",
    "read_preview_children",
]
