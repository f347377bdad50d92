# src/finfeed/app.py
"""
Application Entry Point - Bot Initialization and Startup

This module serves as the composition root for the finfeed Telegram bot.
It configures logging, builds the bot and starts polling.

Files that USE this module:
- finfeed console script (pyproject entry point)

Files that this module USES:
- finfeed.shared.logging_conf (setup_logging for logging configuration)
- finfeed.config (settings for configuration management)
- finfeed.adapters.telegram.bot (build_application)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import logging  # Standard library for logging messages and errors

from telegram.error import Conflict, NetworkError, TimedOut  # Telegram API error exceptions

from finfeed.adapters.telegram.bot import build_application  # Bot with command handlers
from finfeed.config import settings  # Environment-driven settings
from finfeed.shared.logging_conf import setup_logging  # Configure logging with file rotation


def main() -> None:
    """
    Initialize and start the Telegram bot application.

    This function:
    1. Sets up logging
    2. Checks the bot token and reports which optional sources are configured
    3. Builds the application with its handlers
    4. Starts the polling loop
    """
    setup_logging(
        level=logging.INFO,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger = logging.getLogger(__name__)

    if not settings.bot_token:
        raise RuntimeError("BOT_TOKEN missing")

    if not settings.has_mexc_credentials:
        logger.warning("MEXC_API_KEY/MEXC_API_SECRET not set: /order and /orders will report a configuration error")
    if not settings.hashvault_wallet_address:
        logger.warning("HASHVAULT_WALLET_ADDRESS not set: /stats will skip mining stats")

    app = build_application(settings.bot_token)

    logger.info("Starting bot polling… symbol=%s", settings.mexc_symbol)
    try:
        app.run_polling(allowed_updates=None, drop_pending_updates=False)
    except Conflict as e:
        logger.error("Telegram Conflict error: %s (another instance is polling with this token)", e)
        raise
    except (TimedOut, NetworkError) as e:
        logger.error(
            "Network error during bot operation: %s (type: %s)",
            e,
            type(e).__name__,
            exc_info=True,
        )
        raise
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (KeyboardInterrupt)")
        raise


if __name__ == "__main__":
    main()
