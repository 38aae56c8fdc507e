"""Decode raw terminal input into key events."""

from __future__ import annotations

import codecs
from typing import List

from presence.core.events import KeyEvent, KeyKind

CTRL_C = "\x03"
TAB = "\t"
ESC = "\x1b"
BACKSPACE_KEYS = ("\x7f", "\x08")
ENTER_KEYS = ("\r", "\n")


class KeyDecoder:
    """Incremental decoder; bytes may arrive split anywhere, even mid-character."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, data: bytes) -> List[KeyEvent]:
        text = self._pending + self._decoder.decode(data)
        self._pending = ""
        events: List[KeyEvent] = []
        i = 0
        while i < len(text):
            ch = text[i]
            if ch == ESC:
                end = self._escape_end(text, i)
                if end is None:
                    # Incomplete sequence; wait for the rest.
                    self._pending = text[i:]
                    break
                if end == i + 1:
                    events.append(KeyEvent(KeyKind.QUIT))
                else:
                    events.append(KeyEvent(KeyKind.IGNORED, text[i:end]))
                i = end
                continue
            events.append(self._decode_char(ch))
            i += 1
        return events

    @staticmethod
    def _escape_end(text: str, i: int) -> int | None:
        """End index of the escape sequence starting at ``text[i]``."""
        if i + 1 >= len(text):
            return i + 1
        intro = text[i + 1]
        if intro == "[":
            j = i + 2
            while j < len(text):
                if "\x40" <= text[j] <= "\x7e":
                    return j + 1
                j += 1
            return None
        if intro == "O":
            return i + 3 if i + 2 < len(text) else None
        # Alt+key arrives as ESC followed by the key.
        return i + 2

    @staticmethod
    def _decode_char(ch: str) -> KeyEvent:
        if ch in (CTRL_C, TAB):
            return KeyEvent(KeyKind.QUIT)
        if ch in ENTER_KEYS:
            return KeyEvent(KeyKind.ENTER)
        if ch in BACKSPACE_KEYS:
            return KeyEvent(KeyKind.BACKSPACE)
        if ch == " ":
            return KeyEvent(KeyKind.SPACE, " ")
        if ch.isprintable():
            return KeyEvent(KeyKind.CHARACTER, ch)
        return KeyEvent(KeyKind.IGNORED, ch)
