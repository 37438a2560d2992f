"""UI theme definitions and color parsing.

A theme is plain data: named colors consumed only by the renderer. Colors
come from the ``[colors]`` config table as names, ``#rrggbb``, or palette
indexes; anything unparseable keeps the default.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace

from loguru import logger

RESET = "\033[0m"
BOLD = "\033[1m"

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{6})$")

# Named colors map to SGR foreground codes; background is +10.
_NAMED_COLORS: dict[str, int] = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "gray": 37,
    "grey": 37,
    "darkgray": 90,
    "darkgrey": 90,
    "lightred": 91,
    "lightgreen": 92,
    "lightyellow": 93,
    "lightblue": 94,
    "lightmagenta": 95,
    "lightcyan": 96,
    "white": 97,
}


@dataclass(frozen=True)
class Color:
    """Terminal color stored as SGR parameters for foreground and background."""

    fg_params: str
    bg_params: str

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> Color:
        return cls(f"38;2;{r};{g};{b}", f"48;2;{r};{g};{b}")

    @classmethod
    def indexed(cls, index: int) -> Color:
        return cls(f"38;5;{index}", f"48;5;{index}")

    @classmethod
    def named(cls, name: str) -> Color:
        code = _NAMED_COLORS[name]
        return cls(str(code), str(code + 10))

    def fg(self) -> str:
        return f"\033[{self.fg_params}m" if self.fg_params else ""

    def bg(self) -> str:
        return f"\033[{self.bg_params}m" if self.bg_params else ""


NO_COLOR = Color("", "")


def parse_color(value: str) -> Color | None:
    """Parse a config color string; ``None`` when not recognized."""
    text = value.strip().lower().replace(" ", "").replace("_", "").replace("-", "")
    if not text:
        return None
    match = _HEX_RE.match(text)
    if match:
        raw = match.group(1)
        return Color.rgb(int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16))
    if text.isdigit():
        index = int(text)
        return Color.indexed(index) if 0 <= index <= 255 else None
    if text in _NAMED_COLORS:
        return Color.named(text)
    return None


@dataclass(frozen=True)
class Theme:
    """Named colors for every region the renderer draws."""

    title_try: Color
    title_py: Color
    search_box: Color
    list_date: Color
    list_highlight_bg: Color
    list_highlight_fg: Color
    help_text: Color
    status_message: Color
    popup_bg: Color
    popup_text: Color
    dim: Color
    use_color: bool = True

    def style(self, *parts: str) -> str:
        """Join escape sequences, or return ``""`` when color is disabled."""
        if not self.use_color:
            return ""
        return "".join(parts)


# Catppuccin Mocha palette.
DEFAULT_THEME = Theme(
    title_try=Color.rgb(137, 180, 250),
    title_py=Color.rgb(243, 139, 168),
    search_box=Color.rgb(250, 179, 135),
    list_date=Color.rgb(166, 173, 200),
    list_highlight_bg=Color.rgb(88, 91, 112),
    list_highlight_fg=Color.rgb(205, 214, 244),
    help_text=Color.rgb(147, 153, 178),
    status_message=Color.rgb(249, 226, 175),
    popup_bg=Color.rgb(30, 30, 46),
    popup_text=Color.rgb(243, 139, 168),
    dim=Color.named("darkgray"),
)

PLAIN_THEME = replace(
    DEFAULT_THEME,
    **{f.name: NO_COLOR for f in fields(Theme) if f.name != "use_color"},
    use_color=False,
)

# Marker glyph colors are fixed; they identify ecosystems, not the theme.
MARKER_COLORS: dict[str, Color] = {
    "cargo": Color.rgb(230, 100, 50),
    "maven": Color.rgb(255, 150, 50),
    "flutter": Color.rgb(2, 123, 222),
    "go": Color.rgb(0, 173, 216),
    "python": Color.named("yellow"),
    "mise": Color.rgb(250, 179, 135),
    "git": Color.rgb(240, 80, 50),
}

THEME_COLOR_KEYS: tuple[str, ...] = tuple(
    f.name for f in fields(Theme) if f.name not in {"use_color", "dim"}
)


def theme_from_config(colors: Mapping[str, object] | None, *, no_color: bool = False) -> Theme:
    """Overlay a ``[colors]`` config table on the default theme."""
    if no_color:
        return PLAIN_THEME
    if not colors:
        return DEFAULT_THEME
    overrides: dict[str, Color] = {}
    for key in THEME_COLOR_KEYS:
        raw = colors.get(key)
        if raw is None:
            continue
        parsed = parse_color(raw) if isinstance(raw, str) else None
        if parsed is None:
            logger.warning("ignoring invalid color {}={!r}", key, raw)
            continue
        overrides[key] = parsed
    return replace(DEFAULT_THEME, **overrides)
