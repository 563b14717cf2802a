"""
Chat service layer for the Access Gateway.
"""

from .service import ChatService

__all__ = ["ChatService"]
