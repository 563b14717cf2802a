"""
Gateway caching package.

Holds the provider response cache used by the External API Gateway. The
cache stores raw provider payloads, so each caller shapes (sorts,
truncates, projects) on every read.
"""

from .response_cache import CacheEntry, ResponseCache

__all__ = ["CacheEntry", "ResponseCache"]
