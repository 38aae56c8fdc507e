"""Fetch a single passage from a quote API.

Expects the Stoic Quote API response shape, e.g.
``presence --api https://stoic.tekloon.net/stoic-quote``::

    {"data": {"author": "...", "quote": "..."}}
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from PySide6.QtCore import QEventLoop, QUrl
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

from presence.core.passages import Passage, new_passage

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 3000


def parse_api_payload(body: bytes) -> Optional[Passage]:
    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Quote API returned invalid JSON: %s", e)
        return None
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        logger.warning("Quote API response has no 'data' object")
        return None
    text = data.get("quote")
    if not text or not isinstance(text, str):
        logger.warning("Quote API response has no quote text")
        return None
    return new_passage(text, str(data.get("author") or ""))


def fetch_passage(url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> Optional[Passage]:
    """Blocking GET of ``url``. Returns None on any failure.

    Needs a ``QCoreApplication`` to exist; it runs a local event loop until
    the reply finishes or the transfer times out.
    """
    manager = QNetworkAccessManager()
    request = QNetworkRequest(QUrl(url))
    request.setTransferTimeout(timeout_ms)
    reply = manager.get(request)
    if not reply.isFinished():
        loop = QEventLoop()
        reply.finished.connect(loop.quit)
        loop.exec()
    try:
        if reply.error() != QNetworkReply.NetworkError.NoError:
            logger.warning("Quote API request to %s failed: %s", url, reply.errorString())
            return None
        status = reply.attribute(QNetworkRequest.Attribute.HttpStatusCodeAttribute)
        if status != 200:
            logger.warning("Quote API request to %s returned HTTP %s", url, status)
            return None
        return parse_api_payload(bytes(reply.readAll().data()))
    finally:
        reply.deleteLater()
