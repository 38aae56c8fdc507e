"""Tests for presence.core.passages – loading and picking quotes."""

from __future__ import annotations

import json
import random
import textwrap
from datetime import date
from pathlib import Path

import pytest

from presence.core.passages import (
    Passage,
    PassageError,
    PassageRepository,
    daily_passage,
    load_passages_from_file,
    normalize_text,
    random_passage,
)


# ---------------------------------------------------------------------------
# Passage dataclass
# ---------------------------------------------------------------------------

class TestPassage:
    def test_attribution(self):
        assert Passage("text", "Seneca").attribution == "— Seneca"

    def test_total_len(self):
        assert Passage("go do", "Me").total_len == 9

    def test_frozen(self):
        p = Passage("a", "b")
        with pytest.raises(AttributeError):
            p.text = "c"


# ---------------------------------------------------------------------------
# normalize_text
# ---------------------------------------------------------------------------

class TestNormalizeText:
    @pytest.mark.parametrize(
        "smart, plain",
        [
            ("it’s", "it's"),
            ("‘a’", "'a'"),
            ("“hi”", '"hi"'),
            ("1–2", "1-2"),
            ("wait—what", "wait--what"),
            ("so…", "so..."),
        ],
    )
    def test_replacements(self, smart, plain):
        assert normalize_text(smart) == plain

    def test_plain_text_unchanged(self):
        assert normalize_text("plain ascii text.") == "plain ascii text."


# ---------------------------------------------------------------------------
# PassageRepository – bundled quotes
# ---------------------------------------------------------------------------

class TestPassageRepository:
    def test_bundled_quotes_load(self):
        passages = PassageRepository().all()
        assert passages
        assert all(p.text and p.author for p in passages)

    def test_custom_path(self, tmp_path: Path):
        path = tmp_path / "quotes.yaml"
        path.write_text(
            textwrap.dedent(
                """\
                - text: "It’s here"
                  author: Someone
                """
            ),
            encoding="utf-8",
        )
        assert PassageRepository(path).all() == [Passage("It's here", "Someone")]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            PassageRepository(tmp_path / "nope.yaml")

    def test_not_a_list(self, tmp_path: Path):
        path = tmp_path / "quotes.yaml"
        path.write_text("text: hello\n", encoding="utf-8")
        with pytest.raises(ValueError, match="quotes.yaml"):
            PassageRepository(path)

    def test_empty_list(self, tmp_path: Path):
        path = tmp_path / "quotes.yaml"
        path.write_text("[]\n", encoding="utf-8")
        with pytest.raises(ValueError, match="no quotes"):
            PassageRepository(path)


# ---------------------------------------------------------------------------
# load_passages_from_file
# ---------------------------------------------------------------------------

class TestLoadPassagesFromFile:
    def test_json(self, tmp_path: Path):
        path = tmp_path / "quotes.json"
        path.write_text(
            json.dumps([{"text": "one", "author": "A"}, {"text": "two", "author": "B"}]),
            encoding="utf-8",
        )
        assert load_passages_from_file(path) == [Passage("one", "A"), Passage("two", "B")]

    def test_missing_author_becomes_empty(self, tmp_path: Path):
        path = tmp_path / "quotes.yaml"
        path.write_text("- text: lonely\n", encoding="utf-8")
        assert load_passages_from_file(path) == [Passage("lonely", "")]

    def test_unreadable(self, tmp_path: Path):
        with pytest.raises(PassageError, match="reading quotes file"):
            load_passages_from_file(tmp_path / "missing.json")

    def test_unparsable(self, tmp_path: Path):
        path = tmp_path / "quotes.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(PassageError, match="parsing quotes file"):
            load_passages_from_file(path)

    def test_wrong_shape(self, tmp_path: Path):
        path = tmp_path / "quotes.json"
        path.write_text(json.dumps([{"author": "A"}]), encoding="utf-8")
        with pytest.raises(PassageError, match="parsing quotes file"):
            load_passages_from_file(path)

    def test_empty(self, tmp_path: Path):
        path = tmp_path / "quotes.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(PassageError, match="quotes file is empty"):
            load_passages_from_file(path)


# ---------------------------------------------------------------------------
# Picking a passage
# ---------------------------------------------------------------------------

PASSAGES = [Passage(f"quote {i}", f"author {i}") for i in range(10)]


class TestPicking:
    def test_daily_is_stable_for_a_day(self):
        day = date(2026, 10, 19)
        assert daily_passage(PASSAGES, day) == daily_passage(PASSAGES, day)

    def test_daily_varies_across_days(self):
        picks = {daily_passage(PASSAGES, date(2026, 1, d)) for d in range(1, 29)}
        assert len(picks) > 1

    def test_random_uses_rng(self):
        assert random_passage(PASSAGES, random.Random(4)) == random_passage(PASSAGES, random.Random(4))

    def test_random_single(self):
        assert random_passage(PASSAGES[:1]) == PASSAGES[0]
