"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Rate limiting
- Language management
- Logging configuration
"""

from divisas.shared.validators import (
    sanitize_user_input,
    validate_api_key,
    validate_bot_token,
    validate_numeric_input,
)
from divisas.shared.rate_limiter import rate_limiter, RATE_LIMITS

__all__ = [
    "validate_bot_token",
    "validate_api_key",
    "validate_numeric_input",
    "sanitize_user_input",
    "rate_limiter",
    "RATE_LIMITS",
]
