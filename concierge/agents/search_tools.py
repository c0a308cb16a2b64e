# agents/search_tools.py
"""
Search Tools for LLM tool use
Tool definitions (Anthropic `input_schema` format) plus an executor that
maps a tool call onto a SearchAggregator query.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from ..schemas.concierge_schemas import SearchQuery, SearchResultSet, ServiceCategory
from .search_aggregator import SearchAggregator, get_search_aggregator


def _string(description: str) -> Dict[str, str]:
    return {"type": "string", "description": description}


def _number(description: str) -> Dict[str, str]:
    return {"type": "number", "description": description}


TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": "search_empty_legs",
        "description": "Search for empty leg flights (discounted repositioning flights). Use this when users "
                       "ask about empty legs, cheap flights, or mention specific departure/arrival cities.",
        "input_schema": {
            "type": "object",
            "properties": {
                "from": _string("Departure city or airport code (e.g., 'Zurich', 'ZRH', 'Dubai')"),
                "to": _string("Arrival city or airport code (e.g., 'London', 'LHR', 'Paris')"),
                "location": _string("Generic location when 'from' or 'to' is ambiguous ('empty legs zurich')"),
                "date": _string("Preferred departure date in YYYY-MM-DD format"),
                "passengers": _number("Number of passengers"),
            },
            "required": [],
        },
    },
    {
        "name": "search_private_jets",
        "description": "Search for private jet charters. Use when users ask about private jets, jet charter, or aircraft.",
        "input_schema": {
            "type": "object",
            "properties": {
                "from": _string("Departure city or airport"),
                "to": _string("Destination city or airport"),
                "location": _string("Generic location for jets available in that area"),
                "passengers": _number("Number of passengers"),
            },
            "required": [],
        },
    },
    {
        "name": "search_helicopters",
        "description": "Search for helicopter charters. Use when users ask about helicopters, heli transfers, or rotorcraft.",
        "input_schema": {
            "type": "object",
            "properties": {
                "from": _string("Departure location"),
                "to": _string("Destination location"),
                "location": _string("Generic location for helicopters available in that area"),
                "passengers": _number("Number of passengers"),
            },
            "required": [],
        },
    },
    {
        "name": "search_yachts_and_adventures",
        "description": "Search for yacht charters and adventure packages. Use when users ask about yachts, "
                       "boats, sailing, or adventure experiences.",
        "input_schema": {
            "type": "object",
            "properties": {
                "location": _string("Location or region (e.g., 'Mediterranean', 'Greek Islands', 'Caribbean')"),
                "type": {"type": "string", "enum": ["yacht", "adventure", "both"],
                         "description": "Type: 'yacht', 'adventure', or 'both'"},
                "guests": _number("Number of guests"),
            },
            "required": [],
        },
    },
    {
        "name": "search_luxury_cars",
        "description": "Search for luxury car and chauffeur services. Use when users ask about cars, taxi, "
                       "chauffeur, or ground transportation.",
        "input_schema": {
            "type": "object",
            "properties": {
                "from": _string("Pickup location"),
                "to": _string("Drop-off location"),
                "location": _string("Generic location for cars available in that area"),
                "passengers": _number("Number of passengers"),
            },
            "required": [],
        },
    },
]

TOOL_NAMES = [tool["name"] for tool in TOOL_DEFINITIONS]


def _passengers(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    return int(value)


class SearchToolExecutor:
    """
    Executes tool calls against the aggregator.

    Usage:
        executor = SearchToolExecutor(aggregator)
        result = await executor.execute("search_private_jets", {"from": "London", "passengers": 4})
    """

    def __init__(self, aggregator: SearchAggregator):
        self.aggregator = aggregator
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]] = {
            "search_empty_legs": self.search_empty_legs,
            "search_private_jets": self.search_private_jets,
            "search_helicopters": self.search_helicopters,
            "search_yachts_and_adventures": self.search_yachts_and_adventures,
            "search_luxury_cars": self.search_luxury_cars,
        }

    def has_tool(self, name: str) -> bool:
        return name in self._handlers

    async def execute(self, name: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a tool call.

        Returns:
            {"success": True, "results", "total", "params"} or
            {"success": False, "error"} for unknown tools and invalid parameters
        """
        params = params or {}
        logger.info(f"Executing tool: {name} {params}")

        handler = self._handlers.get(name)
        if handler is None:
            return {"success": False, "error": f"Unknown tool: {name}"}

        try:
            return await handler(params)
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning(f"Tool {name} rejected parameters {params}: {e}")
            return {"success": False, "error": str(e)}

    async def _search_one(
        self,
        category: ServiceCategory,
        params: Dict[str, Any],
        from_location: Optional[str] = None,
        **extra,
    ) -> Dict[str, Any]:
        query = SearchQuery(
            q=params.get("location"),
            from_location=from_location or params.get("from"),
            location=params.get("to"),
            passengers=_passengers(params.get("passengers")),
            categories=[category],
            **extra,
        )
        result_set = await self.aggregator.search_all(query)
        records = result_set.for_category(category)
        return {
            "success": True,
            "results": [r.model_dump(mode="json") for r in records],
            "total": len(records),
            "params": params,
            **self._failure(result_set),
        }

    @staticmethod
    def _failure(result_set: SearchResultSet) -> Dict[str, Any]:
        if not result_set.failures:
            return {}
        return {"failures": {c.value: msg for c, msg in result_set.failures.items()}}

    async def search_empty_legs(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self._search_one(ServiceCategory.EMPTY_LEG, params, date_from=params.get("date") or None)

    async def search_private_jets(self, params: Dict[str, Any]) -> Dict[str, Any]:
        # Jets are matched on their base, so a generic location stands in for a missing origin
        origin = params.get("from") or params.get("location")
        return await self._search_one(ServiceCategory.JET, params, from_location=origin)

    async def search_helicopters(self, params: Dict[str, Any]) -> Dict[str, Any]:
        origin = params.get("from") or params.get("location")
        return await self._search_one(ServiceCategory.HELICOPTER, params, from_location=origin)

    async def search_luxury_cars(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self._search_one(ServiceCategory.CAR, params)

    async def search_yachts_and_adventures(self, params: Dict[str, Any]) -> Dict[str, Any]:
        kind = (params.get("type") or "both").lower()
        if kind not in ("yacht", "adventure", "both"):
            raise ValueError(f"type must be 'yacht', 'adventure' or 'both', got {kind!r}")

        categories = []
        if kind in ("yacht", "both"):
            categories.append(ServiceCategory.YACHT)
        if kind in ("adventure", "both"):
            categories.append(ServiceCategory.ADVENTURE)

        query = SearchQuery(
            q=params.get("location"),
            location=params.get("location"),
            passengers=_passengers(params.get("guests")),
            categories=categories,
        )
        result_set = await self.aggregator.search_all(query)
        yachts = result_set.for_category(ServiceCategory.YACHT)
        adventures = result_set.for_category(ServiceCategory.ADVENTURE)
        return {
            "success": True,
            "results": {
                "yachts": [r.model_dump(mode="json") for r in yachts],
                "adventures": [r.model_dump(mode="json") for r in adventures],
            },
            "total": len(yachts) + len(adventures),
            "params": params,
            **self._failure(result_set),
        }


# Singleton instance
_tool_executor_instance: Optional[SearchToolExecutor] = None


def get_tool_executor() -> SearchToolExecutor:
    """Get singleton SearchToolExecutor over the shared aggregator"""
    global _tool_executor_instance
    if _tool_executor_instance is None:
        _tool_executor_instance = SearchToolExecutor(get_search_aggregator())
    return _tool_executor_instance
