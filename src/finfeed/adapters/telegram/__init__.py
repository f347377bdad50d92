"""
Telegram Adapters - Bot Interface

This package contains Telegram bot adapters:
- Bot application builder
- Command handlers
"""

from finfeed.adapters.telegram.bot import build_application
from finfeed.adapters.telegram.handlers import build_handlers

__all__ = [
    "build_application",
    "build_handlers",
]
