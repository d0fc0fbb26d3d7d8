from functools import lru_cache
from typing import Optional
import os

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "SMM Gateway"
    DEBUG: bool = False

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    # Outbound call bound for payment rails and the rate vendor (seconds)
    DEFAULT_TIMEOUT: float = 30.0

    # Card/bank rail
    KORAPAY_BASE_URL: str = "https://api.korapay.com/merchant/api/v1"
    KORAPAY_PUBLIC_KEY: str = ""
    KORAPAY_SECRET_KEY: str = ""
    KORAPAY_WEBHOOK_SECRET: str = ""

    # Crypto rail
    CRYPTOMUS_BASE_URL: str = "https://api.cryptomus.com/v1"
    CRYPTOMUS_API_KEY: str = ""
    CRYPTOMUS_MERCHANT_ID: str = ""
    CRYPTOMUS_WEBHOOK_SECRET: str = ""
    CRYPTOMUS_SESSION_LIFETIME: int = 3600

    # Exchange rates
    BASE_CURRENCY: str = "USD"
    EXCHANGE_RATE_API_URL: Optional[str] = None
    EXCHANGE_RATE_API_KEY: Optional[str] = None
    EXCHANGE_RATE_CACHE_TTL: int = 3600  # seconds
    DEFAULT_CURRENCY_MARKUP: float = 0.0  # percent

    @field_validator("BASE_CURRENCY")
    @classmethod
    def normalize_base_currency(cls, v: str) -> str:
        """Currency codes are stored upper-case."""
        return v.strip().upper()

    @field_validator("DEFAULT_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("DEFAULT_TIMEOUT must be positive")
        return v

    @field_validator("EXCHANGE_RATE_CACHE_TTL")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("EXCHANGE_RATE_CACHE_TTL must not be negative")
        return v

    @property
    def exchange_rates_configured(self) -> bool:
        """True when both the rate vendor URL and key are present."""
        return bool(self.EXCHANGE_RATE_API_URL and self.EXCHANGE_RATE_API_KEY)


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
