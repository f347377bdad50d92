# src/finfeed/adapters/telegram/bot.py
"""
Telegram Bot - Application Builder

This module builds the python-telegram-bot Application with all command
handlers registered.
"""

from __future__ import annotations

from telegram.ext import Application

from finfeed.adapters.telegram.handlers import build_handlers


def build_application(bot_token: str) -> Application:
    """
    Build Telegram bot application with the command handlers.

    Args:
        bot_token: Telegram bot token

    Returns:
        Configured Application instance
    """
    app = Application.builder().token(bot_token).build()
    for handler in build_handlers():
        app.add_handler(handler)
    return app
