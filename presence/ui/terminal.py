"""Raw-mode terminal I/O driven by the Qt event loop (POSIX only)."""

from __future__ import annotations

import logging
import math
import os
import re
import sys
import termios
import tty
from typing import Optional, TextIO

from PySide6.QtCore import QObject, QSocketNotifier, QTimer, Signal

from presence.core.events import ResizeEvent
from presence.ui.keys import KeyDecoder

logger = logging.getLogger(__name__)

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_DOWN = "\x1b[J"
SGR_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


class TerminalScreen(QObject):
    """Watches stdin for keys and the terminal for size changes, and paints frames.

    Frames are drawn inline: each paint moves back to the top of the
    previous frame and overwrites it.
    """

    key_pressed = Signal(object)
    resized = Signal(object)

    def __init__(
        self,
        stdin_fd: Optional[int] = None,
        stdout: Optional[TextIO] = None,
        poll_ms: int = 250,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._in_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
        self._out = stdout or sys.stdout
        self._decoder = KeyDecoder()
        self._saved_attrs: Optional[list] = None
        self._notifier: Optional[QSocketNotifier] = None
        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(poll_ms)
        self._poll_timer.timeout.connect(self._check_size)
        self._size: Optional[os.terminal_size] = None
        self._painted_rows = 0

    def start(self) -> None:
        self._saved_attrs = termios.tcgetattr(self._in_fd)
        tty.setraw(self._in_fd)
        self._out.write(HIDE_CURSOR)
        self._out.flush()
        self._notifier = QSocketNotifier(self._in_fd, QSocketNotifier.Type.Read, self)
        self._notifier.activated.connect(self._on_readable)
        self._poll_timer.start()
        self._check_size()

    def stop(self) -> None:
        self._poll_timer.stop()
        if self._notifier is not None:
            self._notifier.setEnabled(False)
            self._notifier = None
        if self._saved_attrs is not None:
            termios.tcsetattr(self._in_fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
        self._out.write(SHOW_CURSOR)
        self._out.flush()

    def paint(self, frame: str) -> None:
        if self._painted_rows:
            self._out.write(f"\x1b[{self._painted_rows}F")
        else:
            self._out.write("\r")
        # Raw mode turns off output post-processing, so carriage returns are explicit.
        self._out.write(CLEAR_DOWN + frame.replace("\n", "\r\n"))
        self._out.flush()
        self._painted_rows = self._rows_used(frame)

    def _rows_used(self, frame: str) -> int:
        """Terminal rows between the top of ``frame`` and the cursor after it."""
        lines = frame.split("\n")[:-1]
        if self._size is None or self._size.columns <= 0:
            return len(lines)
        columns = self._size.columns
        # A line wider than the terminal wraps onto extra rows.
        return sum(max(1, math.ceil(len(SGR_PATTERN.sub("", line)) / columns)) for line in lines)

    def _on_readable(self, *_args) -> None:
        try:
            data = os.read(self._in_fd, 1024)
        except OSError as e:
            logger.warning("Could not read from terminal: %s", e)
            return
        if not data:
            # EOF: stop watching or the notifier fires forever.
            if self._notifier is not None:
                self._notifier.setEnabled(False)
            return
        for event in self._decoder.feed(data):
            self.key_pressed.emit(event)

    def _check_size(self) -> None:
        try:
            size = os.get_terminal_size(self._out.fileno())
        except (OSError, ValueError):
            return
        if size != self._size:
            self._size = size
            logger.debug("Terminal resized to %dx%d", size.columns, size.lines)
            self.resized.emit(ResizeEvent(size.columns, size.lines))
