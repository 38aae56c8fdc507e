from __future__ import annotations

import hashlib
import logging
import random
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, List, Optional, Sequence

import yaml

logger = logging.getLogger(__name__)

ATTRIBUTION_PREFIX = "— "

_REPLACEMENTS = (
    ("‘", "'"),
    ("’", "'"),
    ("“", '"'),
    ("”", '"'),
    ("–", "-"),
    ("—", "--"),
    ("…", "..."),
)


class PassageError(Exception):
    """A user-supplied passage file could not be used."""


@dataclass(frozen=True)
class Passage:
    text: str
    author: str

    @property
    def attribution(self) -> str:
        return ATTRIBUTION_PREFIX + self.author

    @property
    def total_len(self) -> int:
        """Characters in the passage plus its attribution line."""
        return len(self.text) + len(self.attribution)


def normalize_text(text: str) -> str:
    """Swap smart punctuation for characters found on a standard keyboard."""
    for smart, plain in _REPLACEMENTS:
        text = text.replace(smart, plain)
    return text


def new_passage(text: str, author: str) -> Passage:
    return Passage(text=normalize_text(text), author=author)


def _passages_from_data(raw: Any, source: str) -> List[Passage]:
    if not isinstance(raw, list):
        raise ValueError(f"{source}: expected a list of quotes")
    passages: List[Passage] = []
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError(f"{source}: every quote must be a mapping with 'text' and 'author'")
        text = item.get("text")
        if not text or not isinstance(text, str):
            raise ValueError(f"{source}: missing or invalid 'text'")
        author = item.get("author") or ""
        passages.append(new_passage(text, str(author)))
    return passages


class PassageRepository:
    """Passages bundled with the package under ``data/quotes.yaml``."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or Path(__file__).resolve().parent.parent / "data" / "quotes.yaml"
        self._passages = self._load()

    def all(self) -> List[Passage]:
        return list(self._passages)

    def _load(self) -> List[Passage]:
        if not self._path.exists():
            raise FileNotFoundError(f"Quotes file not found: {self._path}")
        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        passages = _passages_from_data(raw, self._path.name)
        if not passages:
            raise ValueError(f"{self._path.name}: no quotes found")
        logger.debug("Loaded %d bundled quotes from %s", len(passages), self._path)
        return passages


def load_passages_from_file(path: Path) -> List[Passage]:
    """Load passages from a user file. JSON is read by the YAML loader too."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise PassageError(f"reading quotes file: {e}") from e
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise PassageError(f"parsing quotes file: {e}") from e
    if not raw:
        raise PassageError("quotes file is empty")
    try:
        return _passages_from_data(raw, Path(path).name)
    except ValueError as e:
        raise PassageError(f"parsing quotes file: {e}") from e


def daily_passage(passages: Sequence[Passage], day: Optional[date] = None) -> Passage:
    """Same passage for everyone on the same calendar day."""
    day = day or date.today()
    digest = hashlib.sha256(day.isoformat().encode("utf-8")).digest()
    index = int.from_bytes(digest[:8], "big") % len(passages)
    return passages[index]


def random_passage(passages: Sequence[Passage], rng: Optional[random.Random] = None) -> Passage:
    rng = rng or random.Random()
    return passages[rng.randrange(len(passages))]
