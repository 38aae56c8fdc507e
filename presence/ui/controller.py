from __future__ import annotations

import logging
import random
from typing import Callable, Optional, Union

from PySide6.QtCore import QObject, QTimer, Signal

from presence.config import AppConfig
from presence.core.dissolve import DissolveAnimator
from presence.core.events import KeyEvent, KeyKind, ResizeEvent
from presence.core.passages import Passage
from presence.core.session import TypingSession
from presence.ui.render import FrameRenderer

logger = logging.getLogger(__name__)

Scheduler = Callable[[int, Callable[[], None]], None]


def qt_scheduler(delay_ms: int, callback: Callable[[], None]) -> None:
    QTimer.singleShot(delay_ms, callback)


class PresenceController(QObject):
    """Feeds input and timer events through the session and dissolve animation.

    Events are handled one at a time on the Qt event loop. Once the passage
    is complete every key is discarded; the only way forward is the
    completion timer, which either quits or drives the dissolve animation
    until it runs out of frames.
    """

    frame_ready = Signal(str)
    quit_requested = Signal()

    def __init__(
        self,
        passage: Passage,
        renderer: FrameRenderer,
        config: Optional[AppConfig] = None,
        *,
        fleeting: bool = False,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._config = config or AppConfig()
        self._schedule = scheduler or qt_scheduler
        self._rng = rng
        self.passage = passage
        self.session = TypingSession(passage.text)
        self.renderer = renderer
        self.fleeting = fleeting
        self.width = self._config.default_width
        self.done = False
        self.animator: Optional[DissolveAnimator] = None

    def handle_event(self, event: Union[KeyEvent, ResizeEvent]) -> None:
        if isinstance(event, ResizeEvent):
            self.resize(event.width)
        else:
            self.handle_key(event)

    def handle_key(self, event: KeyEvent) -> None:
        if self.done:
            return
        kind = event.kind
        if kind is KeyKind.QUIT:
            logger.info("Quit requested before completion")
            self.quit_requested.emit()
            return
        if kind is KeyKind.ENTER:
            self.session.submit_newline()
        elif kind is KeyKind.SPACE:
            self.session.submit_space()
        elif kind is KeyKind.CHARACTER and event.char:
            self.session.submit_character(event.char)
        elif kind is KeyKind.BACKSPACE:
            self.session.undo()

        if self.session.is_done():
            self._complete()
        self.refresh()

    def resize(self, width: int) -> None:
        self.width = max(0, width)
        self.refresh()

    def view(self) -> str:
        if self.animator is not None:
            return self.renderer.render_dissolve(
                self.animator, self.passage.text, self.passage.attribution, self.width
            )
        return self.renderer.render_typing(self.session, self.passage.attribution, self.width)

    def refresh(self) -> None:
        self.frame_ready.emit(self.view())

    def _complete(self) -> None:
        self.done = True
        logger.info(
            "Passage complete: %d errors, %.1f%% accuracy",
            self.session.errors,
            self.session.accuracy(),
        )
        if self.fleeting:
            dissolve = self._config.dissolve
            self.animator = DissolveAnimator(
                self.passage.total_len, max_frame=dissolve.max_frame, rng=self._rng
            )
            logger.debug("Starting dissolve over %d characters", self.passage.total_len)
            self._schedule(dissolve.first_tick_ms, self._on_dissolve_tick)
        else:
            self._schedule(self._config.completion_delay_ms, self._on_done)

    def _on_dissolve_tick(self) -> None:
        if not self.animator.advance():
            logger.debug("Dissolve finished at frame %d", self.animator.frame)
            self.quit_requested.emit()
            return
        self.refresh()
        self._schedule(self._config.dissolve.tick_ms, self._on_dissolve_tick)

    def _on_done(self) -> None:
        self.quit_requested.emit()
