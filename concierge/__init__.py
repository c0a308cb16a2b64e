# concierge/__init__.py
"""
Luxury Travel Concierge Search Service

Chat-driven search over private aviation, yachting and ground transport:
- Intent extraction from free text (service, route, passengers, dates)
- Slot-filling dialogue for missing route details
- Concurrent multi-table search with per-category failure isolation
- LLM narrative summaries with template fallback
"""

__version__ = "1.0.0"

# Package structure:
# concierge/
# ├── __init__.py           <- This file
# ├── main.py               <- FastAPI application entry
# ├── config.py             <- Configuration settings
# │
# ├── agents/               <- Chat flow
# │   ├── concierge_agent.py    <- Message -> plan -> reply
# │   ├── conversation_state.py <- Slot-filling state machine
# │   ├── search_aggregator.py  <- Concurrent multi-table search
# │   └── search_tools.py       <- LLM tool definitions + executor
# │
# ├── api/                  <- FastAPI Routers
# │   ├── chat.py           <- /api/concierge/chat
# │   └── search.py         <- /api/concierge/search, /extract, /tools
# │
# ├── interfaces/           <- Data Stores
# │   ├── row_store.py      <- Supabase (PostgREST) / in-memory tables
# │   └── session_store.py  <- Conversation sessions (redis / memory)
# │
# ├── llm/                  <- Language components
# │   ├── intent_parser.py  <- Free text to SearchFilter
# │   ├── narrator.py       <- LLM replies with template fallback
# │   └── prompts.py        <- Prompt templates
# │
# ├── algorithms/           <- Location aliases, row normalization
# ├── schemas/              <- Pydantic Models
# └── utils/                <- Async helpers
