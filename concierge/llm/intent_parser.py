# llm/intent_parser.py
"""
Intent Parser for the Concierge Agent
Extracts structured search filters from free-text chat messages:
- Service category (empty leg, helicopter, jet, yacht, car, adventure)
- Origin/destination
- Passenger count
- "next week" date window
Rule-based and best effort: nothing here raises on unparseable input.
"""

import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Dict, Any, List, Pattern, Sequence, Tuple
from loguru import logger

from ..schemas.concierge_schemas import SearchQuery, ServiceCategory


# Ranked service rules, first match wins.
# A message naming several services resolves to the highest ranked one
# ("jet ... helicopter transfer" -> helicopter).
SERVICE_RULES: List[Tuple[Pattern[str], ServiceCategory]] = [
    (re.compile(r"empty\s*legs?|emptyleg"), ServiceCategory.EMPTY_LEG),
    (re.compile(r"\bheli(?:copter)?s?\b"), ServiceCategory.HELICOPTER),
    (re.compile(r"private\s*jets?|\bjets?\b|\baircraft\b|\bplanes?\b"), ServiceCategory.JET),
    (re.compile(r"\byachts?\b|\bboats?\b|\bvessels?\b"), ServiceCategory.YACHT),
    (re.compile(r"\bcars?\b|chauffeur|\bdrivers?\b|\btaxi\b|\btransfers?\b"), ServiceCategory.CAR),
    (re.compile(r"\badventures?\b|\bexperiences?\b"), ServiceCategory.ADVENTURE),
]

# A location ends before a connector word, a number, punctuation or end of text
_PLACE = r"([a-z][a-z\s'\-]*?)"
_END = (
    r"(?=\s+(?:to|for|next|this|on|with|from|in|at|and|tomorrow|today|please)\b"
    r"|\s+\d|\s*[,.!?;:]|$)"
)

FROM_PATTERN = re.compile(r"\bfrom\s+" + _PLACE + _END, re.IGNORECASE)
TO_PATTERN = re.compile(r"\bto\s+" + _PLACE + _END, re.IGNORECASE)
IN_PATTERN = re.compile(r"\bin\s+" + _PLACE + _END, re.IGNORECASE)
ROUTE_PATTERN = re.compile(r"\b" + _PLACE + r"\s+to\s+" + _PLACE + _END, re.IGNORECASE)

PASSENGER_PATTERN = re.compile(r"\b(\d+)\s*(?:passengers?|persons?|people|pax|guests?)\b", re.IGNORECASE)
BARE_NUMBER_PATTERN = re.compile(r"\b(\d+)\b")

# Words that can precede or follow a place name without being part of it
FILLER_WORDS = {
    "i", "we", "me", "us", "my", "our", "you", "can", "could", "would", "please",
    "need", "needs", "want", "wants", "like", "looking", "look", "hi", "hello",
    "a", "an", "the", "some", "any", "also", "and", "one", "way", "return",
    "book", "booking", "find", "show", "get", "search", "list", "available", "charter",
    "fly", "flying", "go", "going", "travel", "trip", "flight", "flights",
    "private", "jet", "jets", "plane", "planes", "aircraft",
    "heli", "helicopter", "helicopters", "empty", "leg", "legs", "emptyleg",
    "yacht", "yachts", "boat", "boats", "car", "cars", "taxi", "transfer", "chauffeur",
}

# Empty-leg "direct intent" markers that skip slot filling
DIRECT_INTENT_PATTERN = re.compile(
    r"show|find|get|list|available|any|have|this\s+week|today|tomorrow|this\s+month|flying"
)
LOCATION_MARKER_PATTERN = re.compile(r"\b(?:in|to|from)\s+\w+")

HAS_ROUTE_PATTERN = re.compile(r"\b\w+\s+to\s+\w+")
HAS_PASSENGERS_PATTERNS = [
    re.compile(r"\b\d+\s*(?:passenger|person|people|pax)?\b"),
    re.compile(r"\bfor\s+\d+"),
]


@dataclass
class SearchFilter:
    """Structured filters extracted from one chat message"""
    service_type: ServiceCategory = ServiceCategory.UNKNOWN
    from_location: Optional[str] = None
    to_location: Optional[str] = None
    passengers: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    raw_query: str = ""

    @property
    def categories(self) -> Optional[List[ServiceCategory]]:
        """Categories to search for this filter (None = all)"""
        if self.service_type == ServiceCategory.UNKNOWN:
            return None
        if self.service_type == ServiceCategory.YACHT:
            return [ServiceCategory.YACHT, ServiceCategory.ADVENTURE]
        return [self.service_type]

    def to_search_query(self) -> SearchQuery:
        return SearchQuery(
            passengers=self.passengers,
            location=self.to_location,
            from_location=self.from_location,
            date_from=self.date_from,
            date_to=self.date_to,
            q=None,
            categories=self.categories,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service_type": self.service_type.value,
            "from": self.from_location,
            "to": self.to_location,
            "passengers": self.passengers,
            "date_from": self.date_from.isoformat() if self.date_from else None,
            "date_to": self.date_to.isoformat() if self.date_to else None,
            "raw_query": self.raw_query,
        }


def clean_place(text: Optional[str]) -> Optional[str]:
    """Strip filler words around a captured place name; None when nothing is left"""
    if not text:
        return None
    words = text.split()
    while words and words[0].lower() in FILLER_WORDS:
        words.pop(0)
    while words and words[-1].lower() in FILLER_WORDS:
        words.pop()
    return " ".join(words) or None


def next_week_window(today: date) -> Tuple[date, date]:
    """Following Monday through following Sunday"""
    start = today + timedelta(days=7 - today.weekday())
    return start, start + timedelta(days=6)


class IntentParser:
    """
    Parses free-text concierge messages into a SearchFilter.
    Rule-based: ranked service keywords plus location/passenger regexes.
    """

    def __init__(self, service_rules: Sequence[Tuple[Pattern[str], ServiceCategory]] = SERVICE_RULES):
        self.service_rules = list(service_rules)

    def extract(
        self,
        message: str,
        recent_history: Optional[List[Dict[str, Any]]] = None,
        today: Optional[date] = None,
    ) -> SearchFilter:
        """
        Extract a SearchFilter from a message.

        Args:
            message: User's chat message
            recent_history: Recent messages ({"role", "content"}) used to fill
                from/to/passengers the current message does not mention
            today: Reference date for relative date phrases

        Returns:
            SearchFilter with every unmatched field left as None / UNKNOWN
        """
        text = (message or "").strip()
        lowered = text.lower()
        today = today or date.today()

        search_filter = SearchFilter(raw_query=text)
        search_filter.service_type = self.classify_service(lowered)
        search_filter.from_location, search_filter.to_location = self.extract_route(text)
        search_filter.passengers = self.extract_passengers(text)

        if "next week" in lowered:
            search_filter.date_from, search_filter.date_to = next_week_window(today)

        if recent_history:
            self._fill_from_history(search_filter, recent_history)

        logger.info(
            f"Parsed intent: service={search_filter.service_type.value}, "
            f"from={search_filter.from_location}, to={search_filter.to_location}, "
            f"passengers={search_filter.passengers}, dates={search_filter.date_from}-{search_filter.date_to}"
        )
        return search_filter

    def classify_service(self, lowered: str) -> ServiceCategory:
        for pattern, category in self.service_rules:
            if pattern.search(lowered):
                return category
        return ServiceCategory.UNKNOWN

    def extract_route(self, text: str) -> Tuple[Optional[str], Optional[str]]:
        """Return (from, to); the 'X to Y' form fills whichever explicit marker is missing"""
        origin = self._first_place(FROM_PATTERN, text)
        destination = self._first_place(TO_PATTERN, text)

        if origin is None or destination is None:
            route = ROUTE_PATTERN.search(text)
            if route:
                if origin is None:
                    origin = clean_place(route.group(1))
                if destination is None:
                    destination = clean_place(route.group(2))

        if destination is None:
            destination = self._first_place(IN_PATTERN, text)

        return origin, destination

    def extract_passengers(self, text: str) -> Optional[int]:
        """Count followed by a passenger unit; counts below 1 are ignored"""
        match = PASSENGER_PATTERN.search(text or "")
        if match and int(match.group(1)) >= 1:
            return int(match.group(1))
        return None

    def parse_passengers(self, text: str) -> Optional[int]:
        """Passenger count from a slot answer; accepts a bare number"""
        count = self.extract_passengers(text)
        if count is None:
            match = BARE_NUMBER_PATTERN.search(text or "")
            count = int(match.group(1)) if match else None
        if count is not None and count < 1:
            return None
        return count

    def has_direct_intent(self, message: str) -> bool:
        """Empty-leg requests that should be searched without follow-up questions"""
        lowered = (message or "").lower()
        return bool(DIRECT_INTENT_PATTERN.search(lowered) or LOCATION_MARKER_PATTERN.search(lowered))

    def is_direct_booking_request(self, message: str) -> bool:
        """
        Check whether a message carries enough detail to search immediately.
        Criteria differ per service: jets and helicopters need a route and a
        passenger count, yachts always go through conversation.
        """
        m = (message or "").lower()
        has_route = bool(HAS_ROUTE_PATTERN.search(m))
        has_passengers = any(p.search(m) for p in HAS_PASSENGERS_PATTERNS)

        if re.search(r"private\s*jet|\bjet\b", m) and "empty" not in m:
            return has_route and has_passengers

        if re.search(r"empty\s*leg", m):
            return has_route or bool(re.search(r"show|find|get|list|available|any", m))

        if re.search(r"\b(?:heli|helicopter)\b", m):
            return has_route and has_passengers

        if re.search(r"yacht|boat", m):
            return False

        if re.search(r"luxury\s*car|chauffeur|driver|\bcars?\b", m):
            return bool(re.search(r"\bin\s+\w+", m) or re.search(r"airport|transfer|service", m))

        return bool(re.search(r"book|charter|flight", m)) and (has_route or has_passengers)

    def _first_place(self, pattern: Pattern[str], text: str) -> Optional[str]:
        for match in pattern.finditer(text):
            place = clean_place(match.group(1))
            if place:
                return place
        return None

    def _fill_from_history(self, search_filter: SearchFilter, history: List[Dict[str, Any]]):
        """Fill missing route/passenger fields from recent user messages, newest first"""
        for msg in reversed(history):
            if msg.get("role", "user") != "user":
                continue
            content = msg.get("content") or ""
            if search_filter.from_location is None or search_filter.to_location is None:
                origin, destination = self.extract_route(content)
                search_filter.from_location = search_filter.from_location or origin
                search_filter.to_location = search_filter.to_location or destination
            if search_filter.passengers is None:
                search_filter.passengers = self.extract_passengers(content)
            if search_filter.from_location and search_filter.to_location and search_filter.passengers:
                break


# ============================================
# Global Instance
# ============================================

intent_parser = IntentParser()


# ============================================
# Convenience Function
# ============================================

def extract_filters(message: str, history: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Extract filters and return dict"""
    return intent_parser.extract(message, history).to_dict()
