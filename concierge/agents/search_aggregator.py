# agents/search_aggregator.py
"""
Unified Search Aggregator
Queries every requested service category concurrently and merges the
heterogeneous rows into one SearchResultSet.

A failing category is logged and degraded to an empty list; it never
aborts or cancels the other categories.
"""

from datetime import date, timedelta
from typing import Dict, List, Optional

from loguru import logger

from ..algorithms.location_aliases import expand_location
from ..algorithms.normalizers import normalize_rows
from ..config import settings
from ..interfaces.row_store import RowQuery, RowStore, build_row_store
from ..schemas.concierge_schemas import (
    SEARCHABLE_CATEGORIES,
    SearchQuery,
    SearchResultSet,
    ServiceCategory,
)
from ..utils.async_helpers import gather_settled


CATEGORY_TABLES: Dict[ServiceCategory, str] = {
    ServiceCategory.JET: "jets",
    ServiceCategory.EMPTY_LEG: "EmptyLegs_",
    ServiceCategory.HELICOPTER: "helicopter_charters",
    ServiceCategory.YACHT: "fixed_offers",
    ServiceCategory.CAR: "taxi_cars",
    ServiceCategory.ADVENTURE: "fixed_offers",
}

EMPTY_LEG_DEPARTURE_COLUMNS = ["from_city", "departure_city"]
EMPTY_LEG_ARRIVAL_COLUMNS = ["to_city", "arrival_city"]

# Without an end date, empty legs are shown for this many days after the start date
EMPTY_LEG_WINDOW_DAYS = 30


class SearchAggregator:
    """
    Fan-out search over the hosted service tables.

    Usage:
        aggregator = SearchAggregator(store)
        results = await aggregator.search_all(SearchQuery(location="Dubai"))
    """

    def __init__(
        self,
        store: RowStore,
        result_limit: int = 10,
        tables: Optional[Dict[ServiceCategory, str]] = None,
    ):
        self.store = store
        self.result_limit = result_limit
        self.tables = dict(CATEGORY_TABLES)
        if tables:
            self.tables.update(tables)

    def resolve_categories(self, query: SearchQuery) -> List[ServiceCategory]:
        requested = query.categories or SEARCHABLE_CATEGORIES
        categories: List[ServiceCategory] = []
        for category in requested:
            if category in self.tables and category not in categories:
                categories.append(category)
        return categories

    def build_queries(self, query: SearchQuery, today: Optional[date] = None) -> Dict[ServiceCategory, RowQuery]:
        """One filtered RowQuery per requested category"""
        today = today or date.today()
        location_variants = expand_location(query.location)
        from_variants = expand_location(query.from_location)
        q_variants = expand_location(query.q)

        queries: Dict[ServiceCategory, RowQuery] = {}
        for category in self.resolve_categories(query):
            row_query = RowQuery(table=self.tables[category], limit=self.result_limit)

            if category == ServiceCategory.JET:
                row_query.where_any(["base_location"], from_variants)
                if query.passengers:
                    row_query.min_values["passenger_capacity"] = query.passengers

            elif category == ServiceCategory.EMPTY_LEG:
                row_query.where_any(EMPTY_LEG_DEPARTURE_COLUMNS, from_variants)
                row_query.where_any(EMPTY_LEG_ARRIVAL_COLUMNS, location_variants)
                if not from_variants and not location_variants:
                    row_query.where_any(EMPTY_LEG_DEPARTURE_COLUMNS + EMPTY_LEG_ARRIVAL_COLUMNS, q_variants)

                if query.date_from:
                    row_query.min_values["departure_date"] = query.date_from
                if query.date_to:
                    row_query.max_values["departure_date"] = query.date_to
                elif query.date_from:
                    row_query.max_values["departure_date"] = query.date_from + timedelta(days=EMPTY_LEG_WINDOW_DAYS)
                else:
                    row_query.min_values["departure_date"] = today

            elif category == ServiceCategory.HELICOPTER:
                row_query.where_any(["base_location", "location"], from_variants + location_variants)
                if query.passengers:
                    row_query.min_values["passenger_capacity"] = query.passengers

            elif category == ServiceCategory.ADVENTURE:
                row_query.equals["is_empty_leg"] = False

            queries[category] = row_query
        return queries

    async def search_all(self, query: SearchQuery, today: Optional[date] = None) -> SearchResultSet:
        """
        Search all requested categories concurrently.

        Args:
            query: Search parameters (categories=None searches every category)
            today: Reference date for the default empty-leg window

        Returns:
            SearchResultSet; failed categories are empty and listed in failures
        """
        queries = self.build_queries(query, today)
        settled = await gather_settled(
            {category: self.store.fetch(row_query) for category, row_query in queries.items()}
        )

        result = SearchResultSet()
        for category in queries:
            if category in settled.failures:
                error = settled.failures[category]
                logger.error(f"Search {category.value} ({self.tables[category]}) failed: {error}")
                result.by_category[category] = []
                result.failures[category] = str(error)
            else:
                result.by_category[category] = normalize_rows(settled.successes[category], category)

        result.total_count = sum(len(records) for records in result.by_category.values())

        logger.info(
            f"Search complete: total={result.total_count}, "
            + ", ".join(f"{c.value}={len(r)}" for c, r in result.by_category.items())
            + (f", failed={[c.value for c in result.failures]}" if result.failures else "")
        )
        return result


# Singleton instance
_search_aggregator_instance: Optional[SearchAggregator] = None


def get_search_aggregator() -> SearchAggregator:
    """Get singleton SearchAggregator over the configured row store"""
    global _search_aggregator_instance
    if _search_aggregator_instance is None:
        _search_aggregator_instance = SearchAggregator(build_row_store(), settings.SEARCH_RESULT_LIMIT)
    return _search_aggregator_instance
