# pagewatch/notifiers/telegram.py
# Delivers the run digest through the Telegram Bot API (one sendMessage call).

from __future__ import annotations
import enum
import logging
from typing import Dict, Mapping, Optional, Sequence

import requests

from ..config import TELEGRAM_API
from ..utils.http import PoliteSession
from .templates import render_digest

LOG = logging.getLogger("pagewatch.telegram")


class NotifyResult(enum.Enum):
    SENT = "sent"
    SKIPPED = "skipped"  # missing configuration; nothing was attempted
    FAILED = "failed"


class TelegramNotifier:
    """Send a grouped digest to one Telegram chat."""

    def __init__(
        self,
        bot_token: Optional[str],
        chat_id: Optional[str],
        labels: Optional[Dict[str, str]] = None,
        parse_mode: str = "Markdown",
        link_preview: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.labels = labels or {}
        self.parse_mode = parse_mode
        self.link_preview = link_preview
        self.session = session or PoliteSession()

    def _endpoint(self) -> str:
        return f"{TELEGRAM_API}/bot{self.bot_token}/sendMessage"

    def send(self, grouped: Mapping[str, Sequence[str]]) -> NotifyResult:
        message = render_digest(grouped, self.labels)
        return self.send_text(message)

    def send_text(self, message: str) -> NotifyResult:
        if not message or not self.bot_token or not self.chat_id:
            LOG.error("Missing message content or Telegram credentials. Skipping Telegram message.")
            return NotifyResult.SKIPPED

        payload = {
            "chat_id": self.chat_id,
            "text": message,
            "parse_mode": self.parse_mode,
            "disable_web_page_preview": not self.link_preview,
        }
        try:
            r = self.session.post(self._endpoint(), json=payload)
        except requests.RequestException as e:
            # the token is part of the URL, so keep the exception text out of the log
            LOG.error("Telegram error: %s", type(e).__name__)
            LOG.error("Message that caused the error:\n%s", message)
            return NotifyResult.FAILED

        if not r.ok:
            LOG.error("Telegram error: HTTP %s", r.status_code)
            LOG.error("Telegram response: %s", r.text)
            LOG.error("Message that caused the error:\n%s", message)
            return NotifyResult.FAILED

        LOG.info("Telegram message sent")
        return NotifyResult.SENT
