# agents/__init__.py
"""
Agents Package

Contains the chat flow:
- ConciergeAgent: Chat-facing agent for user interactions
- ConversationSlots: Slot-filling state
- SearchAggregator: Concurrent search across service tables
- SearchToolExecutor: Tool calls for LLM tool use
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .concierge_agent import ConciergeAgent, TurnPlan, get_concierge_agent
    from .conversation_state import ConversationSlots, ConversationPhase
    from .search_aggregator import SearchAggregator, get_search_aggregator
    from .search_tools import SearchToolExecutor, TOOL_DEFINITIONS, get_tool_executor

__all__ = [
    "ConciergeAgent",
    "TurnPlan",
    "get_concierge_agent",
    "ConversationSlots",
    "ConversationPhase",
    "SearchAggregator",
    "get_search_aggregator",
    "SearchToolExecutor",
    "TOOL_DEFINITIONS",
    "get_tool_executor"
]
