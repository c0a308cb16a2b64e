# api/search.py
"""
Search API Endpoints
Direct access to the aggregator, the intent extractor and the LLM tools.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from loguru import logger

from ..agents.search_aggregator import SearchAggregator, get_search_aggregator
from ..agents.search_tools import TOOL_DEFINITIONS, SearchToolExecutor, get_tool_executor
from ..llm.intent_parser import extract_filters
from ..schemas.concierge_schemas import ExtractRequest, SearchQuery, SearchResultSet


router = APIRouter(prefix="/api/concierge", tags=["search"])


@router.post("/search", response_model=SearchResultSet)
async def search(query: SearchQuery, aggregator: SearchAggregator = Depends(get_search_aggregator)):
    """
    Search all (or the requested) service categories at once.

    A category whose table fails is returned empty and listed in `failures`.
    """
    logger.info(f"Search request: {query.model_dump(exclude_none=True)}")
    return await aggregator.search_all(query)


@router.post("/extract")
async def extract(request: ExtractRequest) -> Dict[str, Any]:
    """
    Extract search filters from a message (no search, no session).
    """
    history = [msg.model_dump() for msg in request.history]
    return extract_filters(request.message, history)


@router.get("/tools")
async def list_tools():
    """Tool definitions for LLM tool use"""
    return {"tools": TOOL_DEFINITIONS, "count": len(TOOL_DEFINITIONS)}


@router.post("/tools/{tool_name}")
async def run_tool(
    tool_name: str,
    params: Optional[Dict[str, Any]] = Body(None),
    executor: SearchToolExecutor = Depends(get_tool_executor),
):
    """
    Execute a search tool by name.
    """
    if not executor.has_tool(tool_name):
        raise HTTPException(status_code=404, detail=f"Unknown tool: {tool_name}")

    return await executor.execute(tool_name, params or {})
