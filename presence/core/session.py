from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence


class Classification(Enum):
    """Visual state of a single character on screen."""

    PENDING = "pending"
    CURSOR = "cursor"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    DECORATIVE = "decorative"
    FADED = "faded"
    PLAIN = "plain"


@dataclass(frozen=True)
class Keystroke:
    """One accepted input event and whether it matched the passage."""

    char: str
    correct: bool


class TypingSession:
    """Matches keystrokes against a fixed passage, one character at a time.

    The session is *active* until the keystroke record is as long as the
    passage, after which it is *done* and further submissions are ignored.
    Nothing here raises: out-of-range input is a no-op.
    """

    def __init__(self, text: Sequence[str]) -> None:
        self._target: tuple[str, ...] = tuple(text)
        self._typed: List[Keystroke] = []

    @property
    def target(self) -> tuple[str, ...]:
        return self._target

    @property
    def typed(self) -> tuple[Keystroke, ...]:
        return tuple(self._typed)

    @property
    def position(self) -> int:
        """Index of the next character to type."""
        return len(self._typed)

    @property
    def cursor_index(self) -> int | None:
        """Cursor position, or None once the passage is complete."""
        if self.is_done():
            return None
        return len(self._typed)

    @property
    def errors(self) -> int:
        return sum(1 for k in self._typed if not k.correct)

    def is_done(self) -> bool:
        return len(self._typed) >= len(self._target)

    def submit_character(self, char: str) -> bool:
        """Record ``char`` at the cursor. Returns True if a record was added."""
        if self.is_done():
            return False
        expected = self._target[len(self._typed)]
        self._typed.append(Keystroke(char, char == expected))
        return True

    def submit_space(self) -> bool:
        return self.submit_character(" ")

    def submit_newline(self) -> bool:
        # Enter only counts where the passage actually breaks the line.
        pos = len(self._typed)
        if pos >= len(self._target) or self._target[pos] != "\n":
            return False
        self._typed.append(Keystroke("\n", True))
        return True

    def undo(self) -> bool:
        """Drop the most recent record.

        Whether undo is still allowed once the passage is complete is up to
        the owner of the session; the controller discards it.
        """
        if not self._typed:
            return False
        self._typed.pop()
        return True

    def classification(self, index: int) -> Classification:
        if index < len(self._typed):
            if self._typed[index].correct:
                return Classification.CORRECT
            return Classification.INCORRECT
        if index == len(self._typed):
            return Classification.CURSOR
        return Classification.PENDING

    def classifications(self) -> List[Classification]:
        return [self.classification(i) for i in range(len(self._target))]

    def accuracy(self) -> float:
        """Correct records as a percentage of all records."""
        if not self._typed:
            return 0.0
        correct = sum(1 for k in self._typed if k.correct)
        return (correct / len(self._typed)) * 100.0
