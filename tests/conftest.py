# tests/conftest.py
"""Shared pytest fixtures: seeded in-memory tables, store doubles, wired agent."""

import os, sys
import asyncio
import copy
from datetime import date

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from concierge.agents.concierge_agent import ConciergeAgent
from concierge.agents.search_aggregator import SearchAggregator
from concierge.interfaces.row_store import MemoryRowStore, RowStoreError
from concierge.interfaces.session_store import ConversationSessionStore
from concierge.llm.narrator import Narrator


# A Monday
TODAY = date(2026, 10, 19)


SEED_TABLES = {
    "jets": [
        {"id": 1, "name": "Citation XLS", "category": "Midsize Jet", "base_location": "London, United Kingdom",
         "passenger_capacity": 8, "hourly_rate": 4200},
        {"id": 2, "name": "Phenom 300", "category": "Light Jet", "base_location": "Geneva, Switzerland",
         "passenger_capacity": 6, "hourly_rate": "", "price_per_hour": 3100},
        {"id": 3, "name": "Global 6000", "category": "Heavy Jet", "base_location": "Dubai, United Arab Emirates",
         "passenger_capacity": 13, "hourly_rate_eur": 9800, "images": ["https://img.example/g6000.jpg"]},
    ],
    "EmptyLegs_": [
        {"id": "e1", "from_city": "Nice", "to_city": "Dubai", "departure_date": "2026-10-27",
         "price_eur": 12000, "aircraft_type": "Challenger 350"},
        {"id": "e2", "departure_city": "London", "arrival_city": "Geneva", "departure_date": "2026-11-30",
         "price_usd": 8000},
        {"id": "e3", "from_city": "Paris", "to_city": "Dubai", "departure_date": "2026-10-10",
         "price_eur": 9000},
    ],
    "helicopter_charters": [
        {"id": "h1", "name": "Airbus H130", "base_location": "Zurich", "location": "Switzerland",
         "passenger_capacity": 6, "hourly_rate": 2500},
        {"id": "h2", "name": "Bell 407", "base_location": "Monaco", "passenger_capacity": 5, "price": 1900},
    ],
    "fixed_offers": [
        {"id": "y1", "name": "Azimut 80", "location": "Mediterranean", "daily_rate": 15000,
         "max_guests": 10, "is_empty_leg": False},
        {"id": "a1", "title": "Glacier Heli-Ski", "location": "Zermatt", "price_eur": 5400,
         "is_empty_leg": False},
        {"id": "x1", "title": "Repositioning Offer", "price_eur": 3000, "is_empty_leg": True},
    ],
    "taxi_cars": [
        {"id": "c1", "brand": "Rolls-Royce", "model": "Ghost", "location": "London", "hourly_rate": 250,
         "seats": 4, "currency": "GBP"},
    ],
}


class FailingRowStore(MemoryRowStore):
    """Memory store whose listed tables always fail"""

    name = "failing"

    def __init__(self, tables, failing_tables):
        super().__init__(tables)
        self.failing_tables = set(failing_tables)

    async def fetch(self, query):
        if query.table in self.failing_tables:
            raise RowStoreError(query.table, "HTTP 503: upstream unavailable", status_code=503)
        return await super().fetch(query)


class RecordingRowStore(MemoryRowStore):
    """Memory store that records every query and calls on_fetch before answering"""

    name = "recording"

    def __init__(self, tables, on_fetch=None):
        super().__init__(tables)
        self.queries = []
        self.on_fetch = on_fetch

    async def fetch(self, query):
        self.queries.append(query)
        if self.on_fetch:
            self.on_fetch(query)
        return await super().fetch(query)


@pytest.fixture
def asyncio_event_loop():
    loop = asyncio.new_event_loop()
    try:
        yield loop
    finally:
        loop.close()


@pytest.fixture
def seed_tables():
    return copy.deepcopy(SEED_TABLES)


@pytest.fixture
def memory_store(seed_tables):
    return MemoryRowStore(seed_tables)


@pytest.fixture
def aggregator(memory_store):
    return SearchAggregator(memory_store, result_limit=10)


@pytest.fixture
def session_store():
    return ConversationSessionStore(use_redis=False)


@pytest.fixture
def template_narrator():
    return Narrator(provider="template")


@pytest.fixture
def agent(aggregator, session_store, template_narrator):
    return ConciergeAgent(aggregator, session_store, template_narrator)
