"""
Shared configuration management for the PathWise Access Layer.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Provider credentials. Empty means "not configured"; fetches fail with key_missing.
    news_api_key: str = Field(default="")
    polygon_api_key: str = Field(default="")
    gemini_api_key: str = Field(default="")
    openai_api_key: str = Field(default="")
    alpha_vantage_api_key: str = Field(default="")

    # Provider endpoints
    news_api_base_url: str = Field(default="https://newsapi.org/v2")
    polygon_base_url: str = Field(default="https://api.polygon.io")
    gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    openai_base_url: str = Field(default="https://api.openai.com/v1")
    alpha_vantage_base_url: str = Field(default="https://www.alphavantage.co")

    # Models
    gemini_model: str = Field(default="gemini-1.5-flash")
    openai_model: str = Field(default="gpt-4o")

    # Cache windows (seconds)
    news_cache_seconds: int = Field(default=30 * 60)
    market_cache_seconds: int = Field(default=15 * 60)
    symbol_search_cache_seconds: int = Field(default=15 * 60)

    # Outbound calls
    provider_timeout_seconds: float = Field(default=10.0)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port)
