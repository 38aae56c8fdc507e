"""Word wrapping for text that already carries inline style markers.

A styled string cannot be wrapped by counting its characters, because the
SGR escape sequences around each character take up room in the string but
not on screen. Wrapping therefore works on *segments*: one segment per
source character, holding that character together with the markers that
surround it. Break points are chosen from the raw characters and the
segment at each break point is swapped for a newline.
"""

from __future__ import annotations

from typing import List, Sequence, Set

MARKER_INTRODUCER = "\x1b"
MARKER_TERMINATOR = "m"
MIN_WIDTH = 20
RESET_MARKERS = ("\x1b[0m", "\x1b[m")


def _marker_end(styled: str, i: int) -> int:
    while i < len(styled) and styled[i] != MARKER_TERMINATOR:
        i += 1
    return min(i + 1, len(styled))


def _skip_markers(styled: str, i: int) -> int:
    while i < len(styled) and styled[i] == MARKER_INTRODUCER:
        i = _marker_end(styled, i)
    return i


def _skip_resets(styled: str, i: int) -> int:
    # Only resets close a character; any other marker opens the next one.
    while i < len(styled) and styled[i] == MARKER_INTRODUCER:
        end = _marker_end(styled, i)
        if styled[i:end] not in RESET_MARKERS:
            break
        i = end
    return i


def split_styled_segments(styled: str, count: int) -> List[str]:
    """Split ``styled`` into at most ``count`` per-character segments.

    Each segment is the run of markers before a character, the character
    itself and the resets that close it. Joining the segments gives back
    ``styled`` when it was built by styling ``count`` characters one by one.
    """
    segments: List[str] = []
    i = 0
    while len(segments) < count and i < len(styled):
        start = i
        i = _skip_markers(styled, i)
        if i < len(styled):
            i += 1
        i = _skip_resets(styled, i)
        segments.append(styled[start:i])
    return segments


def find_break_points(raw: Sequence[str], max_width: int) -> Set[int]:
    """Indices of the spaces in ``raw`` that should become line breaks.

    Greedy: a line is broken at the last space seen once it runs past
    ``max_width``. A word longer than the width with no space before it on
    the line is left to overflow.
    """
    breaks: Set[int] = set()
    col = 0
    last_space = -1
    for i, ch in enumerate(raw):
        if ch == " ":
            last_space = i
        col += 1
        if col > max_width and last_space >= 0:
            breaks.add(last_space)
            col = i - last_space
            last_space = -1
    return breaks


def soft_wrap(segments: Sequence[str], raw: Sequence[str], max_width: int) -> str:
    """Join ``segments``, replacing the segment at each break point with a newline."""
    breaks = find_break_points(raw, max_width)
    parts: List[str] = []
    for i in range(min(len(raw), len(segments))):
        parts.append("\n" if i in breaks else segments[i])
    return "".join(parts)


def wrap_styled(styled: str, raw: Sequence[str], max_width: int) -> str:
    return soft_wrap(split_styled_segments(styled, len(raw)), raw, max_width)


def clamp_width(viewport_width: int, padding: int, minimum: int = MIN_WIDTH) -> int:
    """Usable text width for a terminal ``viewport_width`` columns wide."""
    return max(minimum, viewport_width - padding * 2)


def indent_continuation(wrapped: str, pad: str) -> str:
    # Wrapping is margin-agnostic; callers re-indent every following line.
    return wrapped.replace("\n", "\n" + pad)
