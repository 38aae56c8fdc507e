"""Application entry point and setup for presence."""

from __future__ import annotations

import logging
import os
import random
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional

from PySide6.QtCore import QCommandLineOption, QCommandLineParser, QCoreApplication

from presence.config import load_config
from presence.core.passages import (
    Passage,
    PassageError,
    PassageRepository,
    daily_passage,
    load_passages_from_file,
    random_passage,
)
from presence.core.remote import fetch_passage
from presence.ui.controller import PresenceController
from presence.ui.render import FrameRenderer
from presence.ui.styles import StylePalette
from presence.ui.terminal import TerminalScreen

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Options:
    daily: bool = False
    fleeting: bool = False
    quotes: str = ""
    api: str = ""
    log_level: str = ""
    log_file: str = ""


def configure_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=log_file or None,
    )


def parse_options(arguments: List[str]) -> Options:
    """Parse ``arguments`` (program name first). Exits on --help, --version or bad input."""
    parser = QCommandLineParser()
    parser.setApplicationDescription("Type a quote, one character at a time.")
    parser.addHelpOption()
    parser.addVersionOption()

    daily = QCommandLineOption(["daily"], "pick the same quote for the whole day")
    fleeting = QCommandLineOption(["fleeting"], "dissolve the quote into dust after completion")
    quotes = QCommandLineOption(["quotes"], "path to a custom quotes YAML or JSON file", "path")
    api = QCommandLineOption(["api"], "fetch a quote from an API endpoint", "url")
    log_level = QCommandLineOption(["log-level"], "logging level (DEBUG, INFO, WARNING, ...)", "level")
    log_file = QCommandLineOption(["log-file"], "write log messages to this file", "path")
    for option in (daily, fleeting, quotes, api, log_level, log_file):
        parser.addOption(option)

    parser.process(arguments)
    return Options(
        daily=parser.isSet(daily),
        fleeting=parser.isSet(fleeting),
        quotes=parser.value(quotes),
        api=parser.value(api),
        log_level=parser.value(log_level),
        log_file=parser.value(log_file),
    )


def select_passage(
    options: Options,
    *,
    repository: Optional[Callable[[], PassageRepository]] = None,
    fetch: Callable[[str], Optional[Passage]] = fetch_passage,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> Passage:
    """Pick a passage: --api first, then --quotes or the bundle, daily or random."""
    repository = repository or PassageRepository
    if options.api:
        fetched = fetch(options.api)
        if fetched is not None:
            logger.info("Using quote from %s", options.api)
            return fetched
        logger.warning("Falling back to bundled quotes")
        return random_passage(repository().all(), rng)

    if options.quotes:
        passages = load_passages_from_file(Path(options.quotes))
        logger.info("Loaded %d quotes from %s", len(passages), options.quotes)
    else:
        passages = repository().all()
    if options.daily:
        return daily_passage(passages, today)
    return random_passage(passages, rng)


def run() -> None:
    """Parse options, pick a passage and run the typing screen until done."""
    app = QCoreApplication(sys.argv)
    app.setApplicationName("presence")
    app.setApplicationVersion(__version__)

    options = parse_options(app.arguments())
    configure_logging(
        options.log_level or os.environ.get("PRESENCE_LOG_LEVEL", "WARNING"),
        options.log_file,
    )

    try:
        config = load_config()
        passage = select_passage(options)
    except (PassageError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not sys.stdin.isatty():
        print("Error: presence needs an interactive terminal", file=sys.stderr)
        sys.exit(1)

    renderer = FrameRenderer(StylePalette.from_config(config), config.padding, config.min_width)
    controller = PresenceController(passage, renderer, config, fleeting=options.fleeting)
    screen = TerminalScreen(poll_ms=config.resize_poll_ms)

    screen.key_pressed.connect(controller.handle_event)
    screen.resized.connect(controller.handle_event)
    controller.frame_ready.connect(screen.paint)
    controller.quit_requested.connect(app.quit)

    screen.start()
    try:
        controller.refresh()
        code = app.exec()
    finally:
        screen.stop()
    sys.exit(code)
