"""
Telegram Adapters - Bot Interface

This package contains Telegram bot adapters:
- Bot application builder
- Form command and button handlers
"""

from divisas.adapters.telegram.bot import build_application
from divisas.adapters.telegram.handlers import build_handlers, error_handler

__all__ = [
    "build_application",
    "build_handlers",
    "error_handler",
]
