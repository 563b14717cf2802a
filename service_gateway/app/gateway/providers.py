"""
Provider configuration records for the External API Gateway.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional

from shared.config import BaseConfig
from shared.errors import ErrorKind
from shared.logging import get_logger


NEWS_API = "news_api"
POLYGON = "polygon"
ALPHA_VANTAGE = "alpha_vantage"
GEMINI = "gemini"
OPENAI = "openai"


class AuthStyle(str, Enum):
    """How a provider expects its API key."""

    HEADER_BEARER = "header_bearer"
    QUERY_PARAM = "query_param"
    HEADER_CUSTOM_KEY = "header_custom_key"


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable description of one upstream provider.

    Built once at startup from the environment and shared read-only for the
    life of the process.
    """

    provider_name: str
    base_url: str
    api_key_env_var: str
    auth_style: AuthStyle
    auth_param: Optional[str] = None
    api_key: str = field(default="", repr=False)
    cache_duration_seconds: float = 0
    status_overrides: Mapping[int, ErrorKind] = field(default_factory=dict)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def build_provider_configs(config: BaseConfig) -> Dict[str, ProviderConfig]:
    """Create the provider records used by the gateway service."""
    providers = {
        NEWS_API: ProviderConfig(
            provider_name=NEWS_API,
            base_url=config.news_api_base_url,
            api_key_env_var="NEWS_API_KEY",
            auth_style=AuthStyle.HEADER_CUSTOM_KEY,
            auth_param="X-Api-Key",
            api_key=config.news_api_key,
            cache_duration_seconds=config.news_cache_seconds,
        ),
        POLYGON: ProviderConfig(
            provider_name=POLYGON,
            base_url=config.polygon_base_url,
            api_key_env_var="POLYGON_API_KEY",
            auth_style=AuthStyle.QUERY_PARAM,
            auth_param="apiKey",
            api_key=config.polygon_api_key,
            cache_duration_seconds=config.market_cache_seconds,
            # Unknown tickers come back as 404
            status_overrides={404: ErrorKind.BAD_PARAMETERS},
        ),
        ALPHA_VANTAGE: ProviderConfig(
            provider_name=ALPHA_VANTAGE,
            base_url=config.alpha_vantage_base_url,
            api_key_env_var="ALPHA_VANTAGE_API_KEY",
            auth_style=AuthStyle.QUERY_PARAM,
            auth_param="apikey",
            api_key=config.alpha_vantage_api_key,
            cache_duration_seconds=config.symbol_search_cache_seconds,
        ),
        GEMINI: ProviderConfig(
            provider_name=GEMINI,
            base_url=config.gemini_base_url,
            api_key_env_var="GEMINI_API_KEY",
            auth_style=AuthStyle.HEADER_CUSTOM_KEY,
            auth_param="x-goog-api-key",
            api_key=config.gemini_api_key,
            status_overrides={404: ErrorKind.BAD_PARAMETERS},
        ),
        OPENAI: ProviderConfig(
            provider_name=OPENAI,
            base_url=config.openai_base_url,
            api_key_env_var="OPENAI_API_KEY",
            auth_style=AuthStyle.HEADER_BEARER,
            api_key=config.openai_api_key,
        ),
    }

    logger = get_logger("gateway.providers")
    for provider in providers.values():
        if not provider.has_api_key:
            logger.warning(
                "Provider API key is not set; requests will fail until it is configured",
                provider=provider.provider_name,
                env_var=provider.api_key_env_var,
            )

    return providers
