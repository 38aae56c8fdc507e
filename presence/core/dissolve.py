from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from presence.core.session import Classification

# Coarse to fine: each stage draws from a sparser pool than the last.
GLYPH_STAGES: Tuple[str, str, str] = (
    "⣿⣾⣽⣻⣷⣯⣟⡿⢿",
    "⠂⠃⠄⠅⠈⠐⠠⡀⢀",
    "⠁⠂⠄⡀⠀",
)

TIER_COUNT = 3
DEFAULT_MAX_FRAME = 7


def dissolution_rank(total_len: int, rng: Optional[random.Random] = None) -> List[int]:
    """Random reveal order: ``rank[i]`` is the position of index ``i`` in a shuffle."""
    rng = rng or random.Random()
    order = list(range(total_len))
    rng.shuffle(order)
    rank = [0] * total_len
    for position, index in enumerate(order):
        rank[index] = position
    return rank


def glyph_rng(index: int, frame: int) -> random.Random:
    """Fresh generator for one character on one frame."""
    return random.Random(index * 997 + frame * 31)


class DissolveAnimator:
    """Erodes a finished passage into braille dust over a handful of frames.

    Characters are split into three tiers by rank. Tier 0 starts on frame 1,
    tier 1 on frame 2 and tier 2 on frame 3; once started a character goes
    through the three glyph stages and then disappears.
    """

    def __init__(
        self,
        total_len: int,
        rank: Optional[Sequence[int]] = None,
        *,
        max_frame: int = DEFAULT_MAX_FRAME,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.total_len = total_len
        self.rank: List[int] = list(rank) if rank is not None else dissolution_rank(total_len, rng)
        self.tier_size = max(1, total_len // TIER_COUNT)
        self.max_frame = max_frame
        self.frame = 1

    def tier(self, index: int) -> int:
        return min(TIER_COUNT - 1, self.rank[index] // self.tier_size)

    def elapsed(self, index: int) -> int:
        start_frame = self.tier(index) + 1
        return self.frame - start_frame + 1

    def glyph(self, index: int, char: str) -> Tuple[str, Classification]:
        """Character and style to show at ``index`` on the current frame."""
        if char in (" ", "\n"):
            return char, Classification.PLAIN
        elapsed = self.elapsed(index)
        if elapsed <= 0:
            return char, Classification.CORRECT
        if elapsed > len(GLYPH_STAGES):
            return " ", Classification.PLAIN
        pool = GLYPH_STAGES[elapsed - 1]
        picked = pool[glyph_rng(index, self.frame).randrange(len(pool))]
        if elapsed == len(GLYPH_STAGES):
            return picked, Classification.FADED
        return picked, Classification.DECORATIVE

    def advance(self) -> bool:
        """Move to the next frame. Returns False once the animation is over."""
        self.frame += 1
        return not self.finished()

    def finished(self) -> bool:
        return self.frame > self.max_frame
