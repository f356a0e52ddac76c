"""
Telegram Bot - Application Builder

This module builds the Telegram application and registers the form
handlers on it.

Files that USE this module:
- divisas.app (build_application at startup)

Files that this module USES:
- divisas.adapters.telegram.handlers (build_handlers, error_handler)
"""

from __future__ import annotations

from typing import Optional

from telegram.ext import Application

from divisas.adapters.ai.rate_fetcher import RateFetcher
from divisas.adapters.telegram.handlers import FETCHER_KEY, build_handlers, error_handler


def build_application(bot_token: str, fetcher: Optional[RateFetcher] = None) -> Application:
    """
    Build Telegram bot application with all form handlers registered.

    Updates are processed concurrently so field edits are answered while
    a rate lookup is still running.

    Args:
        bot_token: Telegram bot token
        fetcher: Shared rate fetcher (defaults to one built from settings)

    Returns:
        Configured Application instance
    """
    app = Application.builder().token(bot_token).concurrent_updates(True).build()
    app.bot_data[FETCHER_KEY] = fetcher or RateFetcher()
    for handler in build_handlers():
        app.add_handler(handler)
    app.add_error_handler(error_handler)
    return app
