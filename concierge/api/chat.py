# api/chat.py
"""
Chat API Endpoint
Main conversational interface for the concierge.

Example conversation:
- "I need a helicopter"          -> "Where will you be departing from?"
- "Zurich"                       -> "Where would you like to go?"
- "Milan"                        -> "How many passengers will be travelling?"
- "4"                            -> results (or a custom-request reply)
"""

from datetime import datetime
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from ..agents.concierge_agent import ConciergeAgent, get_concierge_agent
from ..schemas.concierge_schemas import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ResponseType,
    SessionView,
)


router = APIRouter(prefix="/api/concierge", tags=["chat"])


# ============================================
# Helper Functions
# ============================================

def generate_suggestions(response_type: ResponseType, awaiting_slot: Optional[str] = None) -> List[str]:
    """Generate contextual follow-up suggestions"""

    if response_type == ResponseType.CLARIFICATION:
        if awaiting_slot == "passengers":
            return ["2", "4", "6", "8"]
        return ["London", "Zurich", "Dubai", "Nice", "Geneva"]

    if response_type == ResponseType.RESULTS:
        return [
            "Show me cheaper options",
            "Add a chauffeur at arrival",
            "Any empty legs on this route?",
            "Book the first option"
        ]

    if response_type == ResponseType.NO_RESULTS:
        return [
            "Try different dates",
            "Show me empty legs instead",
            "Search nearby airports"
        ]

    if response_type == ResponseType.ERROR:
        return ["Try again", "Start a new search"]

    # Default suggestions
    return [
        "Private jet from London to Nice for 4 passengers",
        "Show me empty legs this week",
        "Helicopter from Monaco to Nice",
        "Yacht charter in the Mediterranean"
    ]


# ============================================
# API Endpoints
# ============================================

@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, agent: ConciergeAgent = Depends(get_concierge_agent)):
    """
    Chat with the concierge.

    Example queries:
    - "Helicopter from Zurich to Milan for 4 passengers"
    - "Empty legs to Dubai next week"
    - "Chauffeur in Paris"
    """
    logger.info(f"Chat request: session={request.session_id}, message={request.message[:50]}...")

    try:
        response = await agent.process_message(request.message, request.session_id)
    except Exception as e:
        logger.exception(f"Chat error: {e}")
        return ChatResponse(
            response="I apologize, but I encountered an error processing your request. Please try again.",
            session_id=request.session_id or "",
            type=ResponseType.ERROR,
            suggestions=generate_suggestions(ResponseType.ERROR),
            timestamp=datetime.utcnow().isoformat()
        )

    response.suggestions = generate_suggestions(response.type, response.awaiting_slot)
    return response


@router.get("/chat/{session_id}", response_model=SessionView)
async def get_chat_session(session_id: str, agent: ConciergeAgent = Depends(get_concierge_agent)):
    """
    Get conversation state and history for a session.
    """
    session = agent.get_session(session_id)

    if not session:
        raise HTTPException(
            status_code=404,
            detail=f"Session {session_id} not found"
        )

    messages = [
        ChatMessage(
            role=msg.get("role", "user"),
            content=msg.get("content", ""),
            timestamp=msg.get("timestamp", datetime.utcnow().isoformat())
        )
        for msg in session["messages"]
    ]

    return SessionView(session_id=session_id, state=session["state"], messages=messages)


@router.delete("/chat/{session_id}")
async def clear_session(session_id: str, agent: ConciergeAgent = Depends(get_concierge_agent)):
    """
    Clear a chat session.

    Removes all context and starts fresh.
    """
    if not agent.clear_session(session_id):
        raise HTTPException(
            status_code=404,
            detail=f"Session {session_id} not found"
        )

    return {
        "status": "cleared",
        "session_id": session_id,
        "message": "Session cleared. Start a new conversation!"
    }
