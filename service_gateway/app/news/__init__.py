"""
News service layer for the Access Gateway.
"""

from .service import NewsService

__all__ = ["NewsService"]
