from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from presence.core.dissolve import DissolveAnimator
from presence.core.session import Classification, TypingSession
from presence.core.wrap import MIN_WIDTH, clamp_width, indent_continuation, soft_wrap
from presence.ui.styles import StylePalette


@dataclass(frozen=True)
class Fragment:
    """A source character and how it should be drawn."""

    char: str
    classification: Classification


class FrameRenderer:
    """Turns session or animation state into a ready-to-paint frame string.

    Fragments stay structured until the last step, where each one is styled
    on its own. The wrapper then only has to swap whole segments for
    newlines and never needs to look inside the escape sequences.
    """

    def __init__(self, palette: StylePalette, padding: int = 4, min_width: int = MIN_WIDTH) -> None:
        self.palette = palette
        self.padding = padding
        self.min_width = min_width

    @property
    def pad(self) -> str:
        return " " * self.padding

    def segments(self, fragments: Sequence[Fragment]) -> List[str]:
        return [self.palette.render(f.char, f.classification) for f in fragments]

    def wrap(self, fragments: Sequence[Fragment], width: int, raw: Sequence[str] | None = None) -> str:
        # Break points come from the source text so that the layout holds
        # still while glyphs change underneath it.
        if raw is None:
            raw = [f.char for f in fragments]
        max_width = clamp_width(width, self.padding, self.min_width)
        wrapped = soft_wrap(self.segments(fragments), raw, max_width)
        return indent_continuation(wrapped, self.pad)

    def _frame(self, body: str, attribution: str) -> str:
        return f"\n{self.pad}{body}\n{self.pad}{attribution}\n\n"

    def render_typing(self, session: TypingSession, attribution: str, width: int) -> str:
        if width <= 0:
            return ""
        fragments = [
            Fragment(ch, cls) for ch, cls in zip(session.target, session.classifications())
        ]
        attr_cls = Classification.CORRECT if session.is_done() else Classification.PENDING
        return self._frame(
            self.wrap(fragments, width),
            self.palette.render(attribution, attr_cls),
        )

    def render_dissolve(
        self,
        animator: DissolveAnimator,
        text: Sequence[str],
        attribution: str,
        width: int,
    ) -> str:
        if width <= 0:
            return ""
        fragments = [Fragment(*animator.glyph(i, ch)) for i, ch in enumerate(text)]
        offset = len(text)
        attr_segments = self.segments(
            [Fragment(*animator.glyph(offset + i, ch)) for i, ch in enumerate(attribution)]
        )
        return self._frame(self.wrap(fragments, width, raw=text), "".join(attr_segments))
