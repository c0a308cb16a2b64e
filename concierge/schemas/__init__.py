"""
Pydantic Schemas Package

Contains all Pydantic v2 models for:
- Service records and aggregated search results
- Chat API requests/responses
"""

from .concierge_schemas import (
    # Enums
    ServiceCategory, ResponseType, SEARCHABLE_CATEGORIES,
    # Search
    ServiceRecord, SearchResultSet, SearchQuery,
    # API
    ChatMessage, ChatRequest, ChatResponse, SessionView, ExtractRequest, HealthResponse
)

__all__ = [
    # Enums
    "ServiceCategory", "ResponseType", "SEARCHABLE_CATEGORIES",
    # Search
    "ServiceRecord", "SearchResultSet", "SearchQuery",
    # API
    "ChatMessage", "ChatRequest", "ChatResponse", "SessionView", "ExtractRequest", "HealthResponse"
]
