# interfaces/row_store.py
"""
Row Store - Hosted table access for the search aggregator

Defines the contract the aggregator needs ("given a filter and a limit,
return matching rows or an error") and two implementations:
- PostgrestRowStore: Supabase REST API over httpx
- MemoryRowStore: in-process tables, seeded from JSON (development / tests)
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from loguru import logger

from ..config import settings


class RowStoreError(Exception):
    """A table query failed"""

    def __init__(self, table: str, message: str, status_code: Optional[int] = None):
        self.table = table
        self.status_code = status_code
        super().__init__(f"{table}: {message}")


@dataclass
class RowQuery:
    """
    Filtered query against one table.

    any_of holds OR-groups of (column, substring) case-insensitive matches;
    a row must satisfy every group. min_values / max_values are inclusive
    bounds, equals are exact matches.
    """
    table: str
    any_of: List[List[Tuple[str, str]]] = field(default_factory=list)
    min_values: Dict[str, Any] = field(default_factory=dict)
    max_values: Dict[str, Any] = field(default_factory=dict)
    equals: Dict[str, Any] = field(default_factory=dict)
    limit: int = 10

    def where_any(self, columns: Sequence[str], variants: Sequence[str]) -> "RowQuery":
        """Add a group matching any variant in any of the columns"""
        group = [(column, variant) for variant in variants for column in columns]
        if group:
            self.any_of.append(group)
        return self


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class RowStore(ABC):
    """Abstract interface for hosted table queries"""

    name: str = "row_store"

    @abstractmethod
    async def fetch(self, query: RowQuery) -> List[Dict[str, Any]]:
        """
        Run a query.

        Returns:
            Matching rows (at most query.limit)

        Raises:
            RowStoreError: when the table cannot be queried
        """


class PostgrestRowStore(RowStore):
    """
    Supabase REST (PostgREST) implementation.

    Usage:
        store = PostgrestRowStore(settings.supabase_rest_url, settings.SUPABASE_KEY)
        rows = await store.fetch(RowQuery(table="jets", limit=10))
    """

    name = "supabase"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def build_params(self, query: RowQuery) -> List[Tuple[str, str]]:
        """Translate a RowQuery into PostgREST query parameters"""
        params: List[Tuple[str, str]] = [("select", "*")]

        for group in query.any_of:
            conditions = ",".join(
                f'{column}.ilike."*{self._escape(needle)}*"' for column, needle in group
            )
            params.append(("or", f"({conditions})"))

        for column, value in query.equals.items():
            params.append((column, f"eq.{_format_value(value)}"))
        for column, value in query.min_values.items():
            params.append((column, f"gte.{_format_value(value)}"))
        for column, value in query.max_values.items():
            params.append((column, f"lte.{_format_value(value)}"))

        params.append(("limit", str(query.limit)))
        return params

    async def fetch(self, query: RowQuery) -> List[Dict[str, Any]]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        url = f"{self.base_url}/{query.table}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=self.build_params(query), headers=headers)
                response.raise_for_status()
                rows = response.json()
        except httpx.HTTPStatusError as e:
            raise RowStoreError(
                query.table, f"HTTP {e.response.status_code}: {e.response.text[:200]}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise RowStoreError(query.table, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise RowStoreError(query.table, f"invalid JSON response: {e}") from e

        if not isinstance(rows, list):
            raise RowStoreError(query.table, "expected a list of rows")

        logger.debug(f"PostgREST {query.table}: {len(rows)} rows")
        return rows

    @staticmethod
    def _escape(needle: str) -> str:
        return needle.replace("\\", "\\\\").replace('"', '\\"')


class MemoryRowStore(RowStore):
    """
    In-memory tables evaluated with the same RowQuery semantics.

    Usage:
        store = MemoryRowStore.from_json_file("data/seed.json")
        rows = await store.fetch(RowQuery(table="jets"))
    """

    name = "memory"

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = tables or {}

    @classmethod
    def from_json_file(cls, path: str) -> "MemoryRowStore":
        """Load tables from a JSON object of table name -> rows"""
        with Path(path).open(encoding="utf-8") as f:
            tables = json.load(f)
        logger.info(f"MemoryRowStore loaded {len(tables)} tables from {path}")
        return cls(tables)

    async def fetch(self, query: RowQuery) -> List[Dict[str, Any]]:
        if query.table not in self.tables:
            raise RowStoreError(query.table, "relation does not exist", status_code=404)

        matches = [dict(row) for row in self.tables[query.table] if self._matches(row, query)]
        return matches[:query.limit]

    def _matches(self, row: Dict[str, Any], query: RowQuery) -> bool:
        for column, value in query.equals.items():
            if _format_value(row.get(column)).lower() != _format_value(value).lower():
                return False

        for column, bound in query.min_values.items():
            cmp = self._compare(row.get(column), bound)
            if cmp is None or cmp < 0:
                return False

        for column, bound in query.max_values.items():
            cmp = self._compare(row.get(column), bound)
            if cmp is None or cmp > 0:
                return False

        for group in query.any_of:
            if not any(
                row.get(column) is not None and needle.lower() in str(row[column]).lower()
                for column, needle in group
            ):
                return False

        return True

    @staticmethod
    def _compare(value: Any, bound: Any) -> Optional[int]:
        """-1/0/1 comparing value to bound; None when value is missing"""
        if value is None:
            return None
        if isinstance(bound, (int, float)) and not isinstance(bound, bool):
            try:
                left, right = float(value), float(bound)
            except (TypeError, ValueError):
                return None
        else:
            left, right = _format_value(value), _format_value(bound)
        return (left > right) - (left < right)


def build_row_store() -> RowStore:
    """Row store for the configured environment: Supabase when a URL is set, memory otherwise"""
    if settings.SUPABASE_URL:
        logger.info(f"Row store: Supabase at {settings.SUPABASE_URL}")
        return PostgrestRowStore(settings.supabase_rest_url, settings.SUPABASE_KEY, settings.SUPABASE_TIMEOUT)

    if settings.MEMORY_STORE_PATH:
        return MemoryRowStore.from_json_file(settings.MEMORY_STORE_PATH)

    logger.warning("SUPABASE_URL not set, using an empty in-memory row store")
    return MemoryRowStore()
