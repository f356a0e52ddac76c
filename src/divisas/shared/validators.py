"""
Input Validation Utilities - Security and Data Validation

This module provides input validation functions for the bot.
It validates bot tokens, API keys and numeric field input to catch invalid
configuration early and to warn users about text that will be read as 0.

Files that USE this module:
- divisas.config.settings (uses validation functions in Settings field validators)
- divisas.adapters.telegram.handlers (numeric input warning, input sanitizing)

Files that this module USES:
- None (pure utility functions)
"""
import math
import re
from typing import Optional


def validate_bot_token(token: str) -> bool:
    """
    Validate Telegram bot token format.

    Args:
        token: Bot token to validate

    Returns:
        True if valid, False otherwise
    """
    if not token:
        return False

    # Bot tokens should be in format: 123456789:ABCDEFghijklmnopQRSTUVwxyz
    pattern = r'^\d{8,10}:[A-Za-z0-9_-]{35}$'
    return bool(re.match(pattern, token))


def validate_api_key(api_key: str, min_length: int = 10) -> bool:
    """
    Validate API key format.

    Args:
        api_key: API key to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False

    return len(api_key) >= min_length and not api_key.isspace()


def validate_numeric_input(value: str, min_val: Optional[float] = None,
                          max_val: Optional[float] = None) -> bool:
    """
    Validate that a field holds a complete finite number.

    Accepts a comma as decimal separator ("60,5"). Digit group
    underscores ("1_000") are rejected even though float() allows them.

    Args:
        value: String value to validate
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        True if valid, False otherwise
    """
    if not value:
        return False

    text = value.strip()
    if "_" in text:
        return False
    if "." not in text:
        text = text.replace(",", ".")
    try:
        num_val = float(text)
    except ValueError:
        return False
    if not math.isfinite(num_val):
        return False
    if min_val is not None and num_val < min_val:
        return False
    if max_val is not None and num_val > max_val:
        return False
    return True


def sanitize_user_input(text: str, max_length: int = 64) -> str:
    """
    Sanitize user input text.

    Args:
        text: Input text to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    # Remove potentially dangerous characters
    sanitized = re.sub(r'[<>"\']', '', text)

    # Limit length
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized.strip()
