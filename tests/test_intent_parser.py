"""Tests for the rule-based intent parser."""

from datetime import date

import pytest

from concierge.llm.intent_parser import (
    SERVICE_RULES,
    IntentParser,
    SearchFilter,
    clean_place,
    extract_filters,
    next_week_window,
)
from concierge.schemas.concierge_schemas import ServiceCategory

from conftest import TODAY


@pytest.fixture
def parser():
    return IntentParser()


class TestClassifyService:
    """Ranked service rules, first match wins."""

    @pytest.mark.parametrize("message, expected", [
        ("Any empty legs this week?", ServiceCategory.EMPTY_LEG),
        ("emptyleg to Nice", ServiceCategory.EMPTY_LEG),
        ("I need a heli", ServiceCategory.HELICOPTER),
        ("Private jet for the weekend", ServiceCategory.JET),
        ("Is there an aircraft available", ServiceCategory.JET),
        ("Book a yacht", ServiceCategory.YACHT),
        ("A boat in Ibiza", ServiceCategory.YACHT),
        ("Chauffeur in Paris", ServiceCategory.CAR),
        ("airport transfer please", ServiceCategory.CAR),
        ("Any adventure experiences?", ServiceCategory.ADVENTURE),
        ("Hello, who are you?", ServiceCategory.UNKNOWN),
    ])
    def test_single_service(self, parser, message, expected):
        assert parser.classify_service(message.lower()) == expected

    def test_empty_leg_outranks_jet(self, parser):
        assert parser.classify_service("empty leg private jet to dubai") == ServiceCategory.EMPTY_LEG

    def test_jet_with_helicopter_transfer_resolves_to_helicopter(self, parser):
        # Ranked precedence: helicopter sits above jet and car
        assert parser.classify_service("i need a jet and a helicopter transfer") == ServiceCategory.HELICOPTER

    def test_rule_table_order(self):
        assert [category for _, category in SERVICE_RULES] == [
            ServiceCategory.EMPTY_LEG,
            ServiceCategory.HELICOPTER,
            ServiceCategory.JET,
            ServiceCategory.YACHT,
            ServiceCategory.CAR,
            ServiceCategory.ADVENTURE,
        ]


class TestExtract:
    """Full extraction from a message."""

    def test_helicopter_route_and_passengers(self, parser):
        f = parser.extract("helicopter from Zurich to Milan for 4 passengers", today=TODAY)
        assert f.service_type == ServiceCategory.HELICOPTER
        assert f.from_location == "Zurich"
        assert f.to_location == "Milan"
        assert f.passengers == 4
        assert f.date_from is None and f.date_to is None

    def test_empty_legs_to_destination_has_no_origin(self, parser):
        f = parser.extract("empty legs to Dubai", today=TODAY)
        assert f.service_type == ServiceCategory.EMPTY_LEG
        assert f.from_location is None
        assert f.to_location == "Dubai"

    def test_route_without_markers(self, parser):
        f = parser.extract("London to Nice for 2 pax", today=TODAY)
        assert f.from_location == "London"
        assert f.to_location == "Nice"
        assert f.passengers == 2

    def test_in_location_fills_destination(self, parser):
        f = parser.extract("Chauffeur in Paris tomorrow", today=TODAY)
        assert f.service_type == ServiceCategory.CAR
        assert f.to_location == "Paris"

    def test_multi_word_places(self, parser):
        f = parser.extract("jet from New York to Palm Beach next week", today=TODAY)
        assert f.from_location == "New York"
        assert f.to_location == "Palm Beach"

    def test_next_week_window(self, parser):
        f = parser.extract("empty legs to Dubai next week", today=TODAY)
        assert f.date_from == date(2026, 10, 26)
        assert f.date_to == date(2026, 11, 1)

    def test_other_date_phrases_ignored(self, parser):
        f = parser.extract("jet to Paris on 12 December", today=TODAY)
        assert f.date_from is None and f.date_to is None

    def test_empty_message_never_raises(self, parser):
        f = parser.extract("", today=TODAY)
        assert f == SearchFilter(raw_query="")

    def test_history_fills_missing_fields(self, parser):
        history = [
            {"role": "user", "content": "jet from London to Paris"},
            {"role": "assistant", "content": "Flights from Geneva to Rome are popular"},
        ]
        f = parser.extract("make it 3 passengers", history, today=TODAY)
        assert f.from_location == "London"
        assert f.to_location == "Paris"
        assert f.passengers == 3

    def test_current_message_wins_over_history(self, parser):
        history = [{"role": "user", "content": "jet from London to Paris for 2 people"}]
        f = parser.extract("jet from Milan to Rome", history, today=TODAY)
        assert f.from_location == "Milan"
        assert f.to_location == "Rome"
        assert f.passengers == 2

    def test_to_dict_and_search_query(self, parser):
        f = parser.extract("yacht from Nice to Monaco for 6 guests next week", today=TODAY)
        data = f.to_dict()
        assert data["service_type"] == "yacht"
        assert data["date_from"] == "2026-10-26"

        query = f.to_search_query()
        assert query.from_location == "Nice"
        assert query.location == "Monaco"
        assert query.passengers == 6
        assert query.q is None
        assert query.categories == [ServiceCategory.YACHT, ServiceCategory.ADVENTURE]

    def test_unknown_service_searches_all_categories(self, parser):
        assert parser.extract("trip to Paris", today=TODAY).categories is None

    def test_extract_filters_convenience(self):
        assert extract_filters("helicopter to Monaco")["to"] == "Monaco"


class TestDirectRequests:
    """Rules for skipping the slot-filling dialogue."""

    @pytest.mark.parametrize("message, expected", [
        ("private jet from London to Paris for 4 passengers", True),
        ("I need a private jet", False),
        ("private jet from London to Paris", False),
        ("helicopter from Zurich to Milan for 4 passengers", True),
        ("helicopter please", False),
        ("show me empty legs", True),
        ("empty legs to Dubai", True),
        ("empty leg please", False),
        ("yacht from Nice to Monaco for 6", False),
        ("chauffeur in Paris", True),
        ("luxury car please", False),
        ("book a flight London to Rome", True),
        ("hello", False),
    ])
    def test_is_direct_booking_request(self, parser, message, expected):
        assert parser.is_direct_booking_request(message) is expected

    @pytest.mark.parametrize("message, expected", [
        ("empty legs this week", True),
        ("empty legs from Nice", True),
        ("do you have empty legs", True),
        ("empty leg please", False),
    ])
    def test_has_direct_intent(self, parser, message, expected):
        assert parser.has_direct_intent(message) is expected


class TestPassengers:

    @pytest.mark.parametrize("text, expected", [
        ("4", 4),
        ("we are 3 people", 3),
        ("12 pax", 12),
        ("2 guests", 2),
        ("not sure yet", None),
        ("0", None),
        ("", None),
    ])
    def test_parse_passengers(self, parser, text, expected):
        assert parser.parse_passengers(text) == expected

    def test_extract_passengers_needs_a_unit(self, parser):
        assert parser.extract_passengers("jet for 4") is None
        assert parser.extract_passengers("jet for 4 persons") == 4

    def test_zero_passengers_is_no_count(self, parser):
        f = parser.extract("private jet from London to Paris for 0 passengers", today=TODAY)
        assert f.passengers is None
        assert f.to_search_query().passengers is None
        assert parser.parse_passengers("0 passengers") is None


class TestHelpers:

    def test_clean_place_strips_filler(self):
        assert clean_place("I need a private jet") is None
        assert clean_place("the Amalfi Coast") == "Amalfi Coast"
        assert clean_place(None) is None

    @pytest.mark.parametrize("today, start", [
        (date(2026, 10, 19), date(2026, 10, 26)),  # Monday
        (date(2026, 10, 21), date(2026, 10, 26)),  # Wednesday
        (date(2026, 10, 25), date(2026, 10, 26)),  # Sunday
    ])
    def test_next_week_window(self, today, start):
        assert next_week_window(today) == (start, date(2026, 11, 1))
