# schemas/concierge_schemas.py
"""
Pydantic v2 schemas for the Concierge Search Service
Covers service records, aggregated search results and the chat API
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import date, datetime
from enum import Enum


# ============================================
# Enums
# ============================================

class ServiceCategory(str, Enum):
    JET = "jet"
    HELICOPTER = "helicopter"
    YACHT = "yacht"
    CAR = "car"
    EMPTY_LEG = "empty_leg"
    ADVENTURE = "adventure"
    UNKNOWN = "unknown"


# Categories that map to a hosted table
SEARCHABLE_CATEGORIES: List[ServiceCategory] = [
    ServiceCategory.JET,
    ServiceCategory.EMPTY_LEG,
    ServiceCategory.HELICOPTER,
    ServiceCategory.YACHT,
    ServiceCategory.CAR,
    ServiceCategory.ADVENTURE,
]


class ResponseType(str, Enum):
    CLARIFICATION = "clarification"
    RESULTS = "results"
    NO_RESULTS = "no_results"
    RESPONSE = "response"
    ERROR = "error"


# ============================================
# Search Results
# ============================================

class ServiceRecord(BaseModel):
    """A hosted row of any category, normalized for display"""
    id: str
    title: str
    subtitle: Optional[str] = None
    price: Optional[float] = None
    currency: str = "EUR"
    images: List[str] = Field(default_factory=list)
    type_tag: ServiceCategory
    details: Dict[str, Any] = Field(default_factory=dict)


class SearchResultSet(BaseModel):
    """Results of one aggregated search, grouped by category"""
    total_count: int = 0
    by_category: Dict[ServiceCategory, List[ServiceRecord]] = Field(default_factory=dict)
    failures: Dict[ServiceCategory, str] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0

    def for_category(self, category: ServiceCategory) -> List[ServiceRecord]:
        return self.by_category.get(category, [])


class SearchQuery(BaseModel):
    """Parameters accepted by the search aggregator"""
    passengers: Optional[int] = Field(None, ge=1)
    location: Optional[str] = Field(None, description="Primary / destination location")
    from_location: Optional[str] = Field(None, description="Departure location")
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    q: Optional[str] = Field(None, description="Free-text fallback location query")
    categories: Optional[List[ServiceCategory]] = Field(
        None, description="Restrict to these categories; all searchable categories when omitted"
    )


# ============================================
# Chat API
# ============================================

class ChatMessage(BaseModel):
    """Single chat message"""
    role: str = Field(..., description="'user' or 'assistant'")
    content: str
    timestamp: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class ChatRequest(BaseModel):
    """Chat request model"""
    message: str = Field(..., min_length=1, max_length=2000, description="User's message")
    session_id: Optional[str] = Field(None, description="Session ID for context continuity")


class ChatResponse(BaseModel):
    """Chat response model"""
    response: str = Field(..., description="Assistant's reply")
    session_id: str
    type: ResponseType = ResponseType.RESPONSE

    # Slot-filling progress
    awaiting_slot: Optional[str] = None

    # Extracted filters (for transparency)
    filters: Optional[Dict[str, Any]] = None

    # Search results (if a search ran)
    results: Optional[SearchResultSet] = None

    suggestions: List[str] = Field(default_factory=list)
    timestamp: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class SessionView(BaseModel):
    """Conversation state and history for a session"""
    session_id: str
    state: Dict[str, Any]
    messages: List[ChatMessage] = Field(default_factory=list)


class ExtractRequest(BaseModel):
    """Request for intent extraction only"""
    message: str = Field(..., min_length=1, max_length=2000)
    history: List[ChatMessage] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    version: str
    components: Dict[str, str]
    timestamp: str
