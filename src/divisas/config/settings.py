"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and a local .env file, with validation.

Files that USE this module:
- divisas.app (loads settings for bot and logging configuration)
- divisas.adapters.ai.rate_fetcher (API key, base URL, model and timeout)
- divisas.shared.language (default language)

Files that this module USES:
- divisas.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from divisas.shared.validators import (
    validate_api_key,  # Validate API key format
    validate_bot_token,  # Validate Telegram bot token format
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Telegram ---
    bot_token: str = Field(default="", alias="BOT_TOKEN")  # Required only to run the bot

    # --- AI rate lookup (OpenAI-compatible API with web search) ---
    ai_api_key: str = Field(default="", alias="API_KEY")
    ai_base_url: str = Field(default="https://api.openai.com/v1", alias="AI_BASE_URL")
    ai_model: str = Field(default="gpt-4o-search-preview", alias="AI_MODEL")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=30, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=120)

    # --- Language Settings ---
    default_language: str = Field(default="es", alias="DEFAULT_LANGUAGE")  # es = Spanish (Venezuela)

    # --- Logging (for server deployment) ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="DIVISAS_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def ai_enabled(self) -> bool:
        """Whether the AI rate lookup can be used."""
        return bool(self.ai_api_key)

    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate bot token format."""
        if v and not validate_bot_token(v):
            raise ValueError("Invalid BOT_TOKEN format")
        return v

    @field_validator("ai_api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate API key format."""
        if v and not validate_api_key(v):
            raise ValueError("Invalid API_KEY format")
        return v

    @field_validator("default_language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate language code."""
        if v not in ["es", "en"]:
            raise ValueError("DEFAULT_LANGUAGE must be 'es' or 'en'")
        return v


# Global settings instance
settings = Settings()


# ============================================================================
# Deployment Instructions
# ============================================================================
#
# 1. Create a .env file with at least:
#    BOT_TOKEN=123456789:ABC...
#    API_KEY=sk-...            (optional, enables the "Buscar tasas" button)
#
# 2. Run the bot in the background:
#    nohup divisas-bot > bot.log 2>&1 &
#
# 3. Monitor logs in real-time:
#    tail -f bot.log
#
# 4. Stop the bot:
#    pkill -f divisas-bot
#
# ============================================================================
