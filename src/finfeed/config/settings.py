# src/finfeed/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables or a local .env file. Every field
has a default so the package imports cleanly without a .env; components
that need a credential check for it themselves.

Files that USE this module:
- finfeed.app (loads settings for bot and logging configuration)
- finfeed.adapters.providers.* (base URLs, timeouts, credentials)
- finfeed.adapters.telegram.handlers (wallet address, symbol)

Files that this module USES:
- finfeed.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from typing import Optional  # Type hints for optional values

from pydantic import Field, SecretStr, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from finfeed.shared.validators import (
    DEFAULT_RECV_WINDOW,
    RECV_WINDOW_MAX,
    RECV_WINDOW_MIN,
    validate_api_key,  # Validate API key format
    validate_bot_token,  # Validate Telegram bot token format
    validate_symbol,  # Validate trading pair format
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Telegram ---
    bot_token: str = Field(default="", alias="BOT_TOKEN")

    # --- MEXC exchange ---
    mexc_base_url: str = Field(default="https://api.mexc.com", alias="MEXC_BASE_URL")
    mexc_api_key: str = Field(default="", alias="MEXC_API_KEY")
    mexc_api_secret: SecretStr = Field(default=SecretStr(""), alias="MEXC_API_SECRET")
    mexc_symbol: str = Field(default="XMRUSDT", alias="MEXC_SYMBOL")
    mexc_recv_window: int = Field(
        default=DEFAULT_RECV_WINDOW, alias="MEXC_RECV_WINDOW", ge=RECV_WINDOW_MIN, le=RECV_WINDOW_MAX
    )

    # --- Bank of Russia ---
    cbr_base_url: str = Field(default="https://www.cbr.ru/scripts", alias="CBR_BASE_URL")
    # XML_dynamic.asp is served over plain HTTP
    cbr_dynamic_url: str = Field(
        default="http://www.cbr.ru/scripts/XML_dynamic.asp", alias="CBR_DYNAMIC_URL"
    )
    cbr_key_rate_url: str = Field(default="https://www.cbr.ru/hd_base/KeyRate/", alias="CBR_KEY_RATE_URL")

    # --- HashVault mining pool ---
    hashvault_base_url: str = Field(
        default="https://api.hashvault.pro/v3/monero", alias="HASHVAULT_BASE_URL"
    )
    hashvault_wallet_address: str = Field(default="", alias="HASHVAULT_WALLET_ADDRESS")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Logging (for server deployment) ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="FINFEED_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def has_mexc_credentials(self) -> bool:
        return bool(self.mexc_api_key) and bool(self.mexc_api_secret.get_secret_value())

    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate bot token format (empty means the bot is not configured)."""
        if v and not validate_bot_token(v):
            raise ValueError("Invalid BOT_TOKEN format")
        return v

    @field_validator("mexc_api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate API key format."""
        v = v.strip()
        if v and not validate_api_key(v):
            raise ValueError("Invalid MEXC_API_KEY format")
        return v

    @field_validator("mexc_symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        v = v.strip().upper()
        if not validate_symbol(v):
            raise ValueError("MEXC_SYMBOL must look like XMRUSDT")
        return v

    @field_validator("cbr_base_url", "mexc_base_url", "hashvault_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


# Global settings instance
settings = Settings()
