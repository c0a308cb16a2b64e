"""Tests for location alias expansion."""

import pytest

from concierge.algorithms.location_aliases import expand_location


class TestExpandLocation:

    def test_plain_location_passes_through(self):
        assert expand_location("Paris") == ["Paris"]

    def test_uk_expands_to_country_variants(self):
        variants = expand_location("UK")
        assert variants[0] == "UK"
        assert "United Kingdom" in variants
        assert "Great Britain" in variants
        assert "Scotland" in variants

    @pytest.mark.parametrize("text", ["usa", "US", "U.S."])
    def test_us_spellings(self, text):
        assert "United States" in expand_location(text)

    def test_uae(self):
        assert expand_location("uae") == ["uae", "United Arab Emirates"]

    @pytest.mark.parametrize("text", [None, "", "   ", "any", "Anywhere"])
    def test_no_filter(self, text):
        assert expand_location(text) == []

    def test_whitespace_is_trimmed(self):
        assert expand_location("  Nice ") == ["Nice"]
