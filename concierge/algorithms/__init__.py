"""
Algorithms Module
Location alias expansion and row normalization
"""

from .location_aliases import expand_location, LOCATION_ALIASES
from .normalizers import normalize_row, normalize_rows, extract_price, PRICE_FIELDS

__all__ = [
    "expand_location",
    "LOCATION_ALIASES",
    "normalize_row",
    "normalize_rows",
    "extract_price",
    "PRICE_FIELDS"
]
