"""
Telegram Bot API delivery over httpx.

Entries with an image are sent with sendPhoto when the caption fits
Telegram's caption limit; everything else goes through sendMessage with
link previews enabled. A rejected photo (Telegram often cannot fetch
third-party image URLs) falls back to a text message.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import TelegramConfig
from ..errors import DeliveryError
from ..output.renderer import fits_caption

logger = logging.getLogger(__name__)


class TelegramSender:
    """Send rendered messages to a Telegram chat or channel."""

    def __init__(self, cfg: TelegramConfig, transport: httpx.BaseTransport | None = None):
        if not cfg.bot_token or not cfg.channel_id:
            raise DeliveryError("Missing Telegram bot token or channel id")
        self.cfg = cfg
        self._transport = transport

    def send(self, text: str, image_url: str | None = None) -> dict[str, Any]:
        """Deliver one message, as a photo with caption when possible.

        Raises:
            DeliveryError: If the text message could not be delivered
        """
        if image_url and fits_caption(text, self.cfg.caption_limit):
            try:
                return self.send_photo(image_url, text)
            except DeliveryError as exc:
                logger.warning(f"sendPhoto failed, falling back to sendMessage: {exc}")
        return self.send_message(text)

    def send_message(self, text: str) -> dict[str, Any]:
        return self._call(
            "sendMessage",
            {
                "chat_id": self.cfg.channel_id,
                "text": text,
                "parse_mode": "HTML",
                "disable_web_page_preview": self.cfg.disable_preview,
            },
        )

    def send_photo(self, photo_url: str, caption: str) -> dict[str, Any]:
        return self._call(
            "sendPhoto",
            {
                "chat_id": self.cfg.channel_id,
                "photo": photo_url,
                "caption": caption,
                "parse_mode": "HTML",
            },
        )

    def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.cfg.api_base.rstrip('/')}/bot{self.cfg.bot_token}/{method}"
        try:
            with httpx.Client(timeout=self.cfg.timeout_seconds, transport=self._transport) as client:
                resp = client.post(url, json=payload)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"Telegram {method} failed: {type(exc).__name__}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if not resp.is_success or not data.get("ok"):
            description = data.get("description") or resp.reason_phrase
            raise DeliveryError(f"Telegram {method} failed: {resp.status_code} {description}")
        return data.get("result") or {}
