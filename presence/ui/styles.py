"""Terminal styles: SGR escape sequences per character classification."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from presence.core.session import Classification

ESC = "\x1b"
RESET = f"{ESC}[0m"


def hex_to_rgb(value: str) -> Optional[Tuple[int, int, int]]:
    """Parse ``#RRGGBB``; anything else gives None."""
    value = value.strip()
    if not (value.startswith("#") and len(value) == 7):
        return None
    try:
        return int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16)
    except ValueError:
        return None


@dataclass(frozen=True)
class Style:
    fg: Optional[str] = None
    bg: Optional[str] = None
    underline: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Style":
        return cls(
            fg=data.get("fg"),
            bg=data.get("bg"),
            underline=bool(data.get("underline", False)),
        )

    def sgr_codes(self) -> list[str]:
        codes: list[str] = []
        if self.underline:
            codes.append("4")
        fg = hex_to_rgb(self.fg) if self.fg else None
        if fg:
            codes.append("38;2;%d;%d;%d" % fg)
        bg = hex_to_rgb(self.bg) if self.bg else None
        if bg:
            codes.append("48;2;%d;%d;%d" % bg)
        return codes

    def render(self, text: str) -> str:
        codes = self.sgr_codes()
        if not codes or not text:
            return text
        return f"{ESC}[{';'.join(codes)}m{text}{RESET}"


def terminal_is_dark(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Guess the background from ``COLORFGBG`` (``fg;bg``); dark when unknown."""
    environ = os.environ if environ is None else environ
    value = environ.get("COLORFGBG", "")
    try:
        background = int(value.split(";")[-1])
    except ValueError:
        return True
    return background in (0, 1, 2, 3, 4, 5, 6, 8)


@dataclass(frozen=True)
class StylePalette:
    """One style per classification; this is the renderer's styling function."""

    styles: Mapping[Classification, Style] = field(default_factory=dict)
    enabled: bool = True

    @classmethod
    def from_config(cls, config: Any, environ: Optional[Mapping[str, str]] = None) -> "StylePalette":
        theme = config.theme
        if theme == "auto":
            theme = "dark" if terminal_is_dark(environ) else "light"
        entries = config.palette.get(theme) or config.palette.get("dark", {})
        styles = {}
        for classification in Classification:
            data = entries.get(classification.value)
            if data:
                styles[classification] = Style.from_mapping(data)
        return cls(styles=styles, enabled=config.color)

    def render(self, char: str, classification: Classification) -> str:
        if not self.enabled or classification is Classification.PLAIN:
            return char
        style = self.styles.get(classification)
        if char == "\n":
            # A line break has no cell of its own; show the cursor on a blank before it.
            if classification is Classification.CURSOR and style is not None:
                return style.render(" ") + "\n"
            return char
        if style is None:
            return char
        return style.render(char)
