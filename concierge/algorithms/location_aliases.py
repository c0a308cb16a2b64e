"""
Location alias expansion.

Hosted rows store locations as free text ("London, United Kingdom",
"Great Britain"), so an abbreviation typed by a user is widened to the
spellings the store is likely to contain before building ILIKE filters.
This is a lookup table, not a geocoder.
"""

from typing import Dict, List, Optional, Tuple


LOCATION_ALIASES: Dict[Tuple[str, ...], List[str]] = {
    ("uk", "u.k.", "u.k"): [
        "United Kingdom", "Great Britain", "England", "Scotland", "Wales", "Northern Ireland",
    ],
    ("usa", "us", "u.s.", "u.s", "u.s.a", "u.s.a."): [
        "United States", "United States of America", "America",
    ],
    ("uae", "u.a.e.", "u.a.e"): [
        "United Arab Emirates",
    ],
}

# Terms that mean "no location filter"
WILDCARD_LOCATIONS = {"any", "anywhere", "everywhere", "somewhere"}


def expand_location(location: Optional[str]) -> List[str]:
    """
    Expand a location into the variants to match against stored text.

    Returns:
        [] when there is nothing to filter on, otherwise the original text
        followed by any aliases
    """
    if not location:
        return []
    text = str(location).strip()
    if not text or text.lower() in WILDCARD_LOCATIONS:
        return []

    variants = [text]
    lowered = text.lower()
    for keys, aliases in LOCATION_ALIASES.items():
        if lowered in keys:
            variants.extend(aliases)
    return variants
