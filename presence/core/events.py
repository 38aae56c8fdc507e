from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KeyKind(Enum):
    CHARACTER = "character"
    SPACE = "space"
    ENTER = "enter"
    BACKSPACE = "backspace"
    QUIT = "quit"
    IGNORED = "ignored"


@dataclass(frozen=True)
class KeyEvent:
    kind: KeyKind
    char: str = ""


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int = 0
