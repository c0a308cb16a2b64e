# interfaces/__init__.py
"""
Interfaces Package

Contains data stores:
- row_store: Hosted service tables (Supabase REST or in-memory)
- session_store: Conversation state and history
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .row_store import RowStore, RowQuery, RowStoreError, PostgrestRowStore, MemoryRowStore, build_row_store
    from .session_store import ConversationSessionStore, get_session_store

__all__ = [
    "RowStore",
    "RowQuery",
    "RowStoreError",
    "PostgrestRowStore",
    "MemoryRowStore",
    "build_row_store",
    "ConversationSessionStore",
    "get_session_store"
]
