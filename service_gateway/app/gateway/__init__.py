"""
External API Gateway.

One ``ProviderGateway`` per upstream provider validates configuration,
serves cached payloads, performs the HTTP call and classifies failures
into ``shared.errors.ErrorKind``.
"""

from .aggregate import SubQuery, gather_tolerant
from .classification import classify_status
from .client import DEFAULT_TIMEOUT_SECONDS, ProviderGateway, ProviderRequest
from .providers import AuthStyle, ProviderConfig, build_provider_configs

__all__ = [
    "AuthStyle",
    "DEFAULT_TIMEOUT_SECONDS",
    "ProviderConfig",
    "ProviderGateway",
    "ProviderRequest",
    "SubQuery",
    "build_provider_configs",
    "classify_status",
    "gather_tolerant",
]
