"""Tests for presence.ui.styles – SGR styling and palettes."""

from __future__ import annotations

import pytest

from presence.config import AppConfig
from presence.core.session import Classification
from presence.ui.styles import RESET, Style, StylePalette, hex_to_rgb, terminal_is_dark


# ===========================================================================
# hex_to_rgb
# ===========================================================================

class TestHexToRgb:
    def test_parses(self):
        assert hex_to_rgb("#FF4400") == (255, 68, 0)

    def test_lowercase_and_whitespace(self):
        assert hex_to_rgb(" #ff4400 ") == (255, 68, 0)

    @pytest.mark.parametrize("value", ["FF4400", "#FFF", "#GGGGGG", ""])
    def test_invalid(self, value):
        assert hex_to_rgb(value) is None


# ===========================================================================
# Style
# ===========================================================================

class TestStyle:
    def test_foreground(self):
        assert Style(fg="#FF0000").render("a") == f"\x1b[38;2;255;0;0ma{RESET}"

    def test_underline_and_background(self):
        rendered = Style(fg="#000000", bg="#FFFFFF", underline=True).render("a")
        assert rendered == f"\x1b[4;38;2;0;0;0;48;2;255;255;255ma{RESET}"

    def test_empty_style_is_plain(self):
        assert Style().render("a") == "a"

    def test_bad_colour_ignored(self):
        assert Style(fg="red").render("a") == "a"

    def test_from_mapping(self):
        style = Style.from_mapping({"fg": "#111111", "underline": True})
        assert style == Style(fg="#111111", underline=True)


# ===========================================================================
# terminal_is_dark
# ===========================================================================

class TestTerminalIsDark:
    def test_dark_background(self):
        assert terminal_is_dark({"COLORFGBG": "15;0"})

    def test_light_background(self):
        assert not terminal_is_dark({"COLORFGBG": "0;15"})

    def test_unknown_defaults_to_dark(self):
        assert terminal_is_dark({})
        assert terminal_is_dark({"COLORFGBG": "default"})


# ===========================================================================
# StylePalette
# ===========================================================================

class TestStylePalette:
    def test_from_config_dark(self):
        palette = StylePalette.from_config(AppConfig(theme="dark"))
        assert palette.styles[Classification.CORRECT] == Style(fg="#FAFAFA")
        assert palette.styles[Classification.CURSOR].underline

    def test_from_config_auto_light(self):
        palette = StylePalette.from_config(AppConfig(), environ={"COLORFGBG": "0;15"})
        assert palette.styles[Classification.CORRECT] == Style(fg="#1A1A1A")

    def test_plain_is_never_styled(self):
        palette = StylePalette.from_config(AppConfig(theme="dark"))
        assert palette.render("x", Classification.PLAIN) == "x"

    def test_newline_is_styled_only_under_the_cursor(self):
        palette = StylePalette.from_config(AppConfig(theme="dark"))
        assert palette.render("\n", Classification.PENDING) == "\n"
        assert palette.render("\n", Classification.CORRECT) == "\n"

    def test_cursor_on_newline_shows_a_blank_cell(self):
        palette = StylePalette({Classification.CURSOR: Style(underline=True)})
        assert palette.render("\n", Classification.CURSOR) == f"\x1b[4m {RESET}\n"

    def test_cursor_on_newline_disabled(self):
        palette = StylePalette({Classification.CURSOR: Style(underline=True)}, enabled=False)
        assert palette.render("\n", Classification.CURSOR) == "\n"

    def test_disabled(self):
        palette = StylePalette.from_config(AppConfig(theme="dark", color=False))
        assert palette.render("x", Classification.INCORRECT) == "x"

    def test_renders_with_class_style(self):
        palette = StylePalette({Classification.INCORRECT: Style(fg="#FF0000")})
        assert palette.render("x", Classification.INCORRECT) == f"\x1b[38;2;255;0;0mx{RESET}"
        assert palette.render("x", Classification.CORRECT) == "x"
