"""Chat channel delivery."""

from .telegram import TelegramSender

__all__ = ["TelegramSender"]
