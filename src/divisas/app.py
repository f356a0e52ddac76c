"""
Application Entry Point - Bot Initialization and Startup

This module serves as the composition root for the Divisas Telegram bot.
It configures logging, wires the rate fetcher and handlers, and starts
polling.

Files that USE this module:
- divisas.__main__ (python -m divisas)
- divisas-bot console script

Files that this module USES:
- divisas.shared.logging_conf (setup_logging for logging configuration)
- divisas.config (settings for configuration management)
- divisas.adapters.ai.rate_fetcher (RateFetcher shared by all chats)
- divisas.adapters.telegram.bot (build_application)
"""

from __future__ import annotations

import logging

from telegram.error import Conflict, NetworkError, TimedOut

from divisas.adapters.ai.rate_fetcher import RateFetcher
from divisas.adapters.telegram.bot import build_application
from divisas.config import settings
from divisas.shared.logging_conf import setup_logging


def main() -> None:
    """
    Initialize and start the Telegram bot application.

    This function:
    1. Sets up logging and validates configuration
    2. Builds the shared rate fetcher (disabled without API_KEY)
    3. Creates the Telegram application with the form handlers
    4. Starts the bot polling loop
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

    fetcher = RateFetcher()
    if not fetcher.enabled:
        logger.warning("API_KEY not set: /tasas will ask users to enter rates manually")

    app = build_application(settings.bot_token, fetcher=fetcher)

    logger.info(
        "Starting bot polling… language=%s, ai_model=%s, ai_enabled=%s",
        settings.default_language,
        settings.ai_model,
        fetcher.enabled,
    )

    try:
        app.run_polling(drop_pending_updates=True)
    except Conflict as e:
        logger.error(
            "Telegram Conflict error: %s. Another instance is already polling with this token; "
            "stop it before starting a new one.",
            e,
            exc_info=True,
        )
        raise
    except (TimedOut, NetworkError) as e:
        logger.error(
            "Network error during bot operation (timeout connecting to Telegram API): %s (type: %s)",
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
