# api/__init__.py
"""
API Endpoints Package

Contains all FastAPI routers for the concierge service:
- chat: Conversational interface
- search: Direct search, intent extraction and tool calls
"""

from typing import TYPE_CHECKING

# Lazy imports to avoid circular dependencies
if TYPE_CHECKING:
    from .chat import router as chat_router
    from .search import router as search_router

__all__ = [
    "chat_router",
    "search_router"
]
