"""Tests for presence.core.remote – quote API payload handling."""

from __future__ import annotations

import json

import pytest

from presence.core.passages import Passage
from presence.core.remote import parse_api_payload


class TestParseApiPayload:
    def test_valid(self):
        body = json.dumps({"data": {"author": "Seneca", "quote": "Begin at once to live."}})
        assert parse_api_payload(body.encode()) == Passage("Begin at once to live.", "Seneca")

    def test_normalizes_punctuation(self):
        body = json.dumps({"data": {"author": "X", "quote": "don’t"}})
        assert parse_api_payload(body.encode()).text == "don't"

    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"\xff\xfe",
            b"[]",
            json.dumps({"data": "nope"}).encode(),
            json.dumps({"data": {"author": "X", "quote": ""}}).encode(),
            json.dumps({"other": {}}).encode(),
        ],
    )
    def test_invalid_returns_none(self, body):
        assert parse_api_payload(body) is None
