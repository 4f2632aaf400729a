"""Message rendering for delivery."""

from .renderer import fits_caption, hashtags_for, render_message, shorten

__all__ = ["fits_caption", "hashtags_for", "render_message", "shorten"]
