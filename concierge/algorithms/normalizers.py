"""
Row Normalizers
Maps heterogeneous hosted rows (jets, empty legs, helicopters, yachts,
cars, adventures) onto the common ServiceRecord shape.

Each category has a fixed price-field precedence; the first populated
field wins. Column names vary between tables and between rows of the same
table, so every lookup goes through a list of candidate keys.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..schemas.concierge_schemas import ServiceCategory, ServiceRecord


PRICE_FIELDS: Dict[ServiceCategory, List[str]] = {
    ServiceCategory.JET: ["hourly_rate", "price_per_hour", "hourly_rate_eur", "price"],
    ServiceCategory.EMPTY_LEG: ["price_eur", "price_usd", "price"],
    ServiceCategory.HELICOPTER: ["hourly_rate", "price_per_hour", "hourly_rate_eur", "price"],
    ServiceCategory.YACHT: ["daily_rate", "price_per_day", "daily_rate_eur", "price"],
    ServiceCategory.CAR: ["hourly_rate", "price_per_hour", "daily_rate", "hourly_rate_eur", "price"],
    ServiceCategory.ADVENTURE: ["price_eur", "price_usd", "price"],
}

IMAGE_FIELDS = ["images", "image_url", "photo_url"]


def first_present(row: Dict[str, Any], keys: Sequence[str], default: Any = None) -> Any:
    """Value of the first key that is set and not an empty string"""
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return default


def get_all_image_urls(images: Any) -> List[str]:
    """Images may be stored as a list, a JSON object or a single string"""
    if not images:
        return []
    if isinstance(images, (list, tuple)):
        return [str(img) for img in images if img]
    if isinstance(images, str):
        return [images]
    if isinstance(images, dict):
        return [str(img) for img in images.values() if img]
    return []


def extract_price(row: Dict[str, Any], category: ServiceCategory) -> Tuple[Optional[float], str]:
    """
    Pick the price for a row using the category's field precedence.

    Returns:
        (price, currency) - currency is USD when the price came from a *_usd
        column, EUR otherwise, unless the row has its own currency column
    """
    currency = "EUR"
    price = None
    for key in PRICE_FIELDS[category]:
        value = row.get(key)
        if value is None or value == "":
            continue
        try:
            price = float(value)
        except (TypeError, ValueError):
            continue
        if key.endswith("_usd"):
            currency = "USD"
        break

    if row.get("currency"):
        currency = str(row["currency"]).upper()
    return price, currency


def _compact(details: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in details.items() if v is not None}


def _jet(row: Dict[str, Any]) -> Tuple[str, Optional[str], Dict[str, Any]]:
    title = first_present(row, ["name", "model", "title"], "Private Jet")
    subtitle = first_present(row, ["category", "type", "aircraft_type"])
    details = {
        "model": first_present(row, ["model", "name", "aircraft_type"]),
        "aircraft_type": first_present(row, ["aircraft_type", "type", "category"]),
        "max_passengers": first_present(row, ["passenger_capacity", "capacity", "max_passengers", "pax_capacity"]),
        "range_km": first_present(row, ["range_km", "range"]),
        "speed_kmh": first_present(row, ["speed_kmh", "speed"]),
        "base_location": first_present(row, ["base_location", "base", "location"]),
        "operator": row.get("operator"),
        "registration": first_present(row, ["registration", "tail_number"]),
        "rate_basis": "hour",
    }
    return title, subtitle, details


def _empty_leg(row: Dict[str, Any]) -> Tuple[str, Optional[str], Dict[str, Any]]:
    departure = first_present(row, ["from_city", "from", "departure_city"])
    arrival = first_present(row, ["to_city", "to", "arrival_city"])
    title = f"{departure or 'Unknown'} to {arrival or 'Unknown'}"
    departure_date = row.get("departure_date")
    departure_time = row.get("departure_time")
    subtitle = " ".join(str(part) for part in (departure_date, departure_time) if part) or None
    details = {
        "departure_city": departure,
        "arrival_city": arrival,
        "departure_date": departure_date,
        "departure_time": departure_time,
        "discount_percentage": first_present(row, ["discount_percentage", "discount"]),
        "available_seats": first_present(
            row, ["available_seats", "passengers", "max_passengers", "passenger_capacity"], 8
        ),
        "aircraft": first_present(row, ["aircraft_model", "aircraft_type", "aircraft"]),
        "rate_basis": "flight",
    }
    return title, subtitle, details


def _helicopter(row: Dict[str, Any]) -> Tuple[str, Optional[str], Dict[str, Any]]:
    title = first_present(row, ["name", "model", "title"], "Helicopter")
    subtitle = first_present(row, ["base_location", "location"])
    details = {
        "model": row.get("model"),
        "max_passengers": first_present(row, ["passenger_capacity", "max_passengers"]),
        "base_location": first_present(row, ["base_location", "location"]),
        "range_km": first_present(row, ["range_km", "range"]),
        "rate_basis": "hour",
    }
    return title, subtitle, details


def _yacht(row: Dict[str, Any]) -> Tuple[str, Optional[str], Dict[str, Any]]:
    title = first_present(row, ["name", "title"], "Yacht")
    subtitle = first_present(row, ["location", "destination", "region"])
    details = {
        "length_ft": first_present(row, ["length_ft", "length"]),
        "max_passengers": first_present(row, ["max_guests", "guests", "max_passengers"]),
        "location": subtitle,
        "rate_basis": "day",
    }
    return title, subtitle, details


def _car(row: Dict[str, Any]) -> Tuple[str, Optional[str], Dict[str, Any]]:
    brand = first_present(row, ["brand", "make"])
    model = first_present(row, ["model", "variant"])
    title = " ".join(str(part) for part in (brand, model) if part) or first_present(row, ["name", "title"], "Luxury Car")
    subtitle = first_present(row, ["location", "city"])
    details = {
        "brand": brand,
        "model": model,
        "max_passengers": first_present(row, ["seats", "passenger_capacity", "max_passengers"]),
        "location": subtitle,
        "rate_basis": "hour",
    }
    return title, subtitle, details


def _adventure(row: Dict[str, Any]) -> Tuple[str, Optional[str], Dict[str, Any]]:
    title = first_present(row, ["title", "name"], "Adventure")
    subtitle = first_present(row, ["location", "destination", "region"])
    details = {
        "description": row.get("description"),
        "duration": first_present(row, ["duration", "duration_days"]),
        "location": subtitle,
        "rate_basis": "package",
    }
    return title, subtitle, details


_MAPPERS: Dict[ServiceCategory, Callable[[Dict[str, Any]], Tuple[str, Optional[str], Dict[str, Any]]]] = {
    ServiceCategory.JET: _jet,
    ServiceCategory.EMPTY_LEG: _empty_leg,
    ServiceCategory.HELICOPTER: _helicopter,
    ServiceCategory.YACHT: _yacht,
    ServiceCategory.CAR: _car,
    ServiceCategory.ADVENTURE: _adventure,
}


def normalize_row(row: Dict[str, Any], category: ServiceCategory) -> ServiceRecord:
    """Convert one hosted row into a ServiceRecord"""
    title, subtitle, details = _MAPPERS[category](row)
    price, currency = extract_price(row, category)
    return ServiceRecord(
        id=str(row.get("id", "")),
        title=str(title),
        subtitle=str(subtitle) if subtitle is not None else None,
        price=price,
        currency=currency,
        images=get_all_image_urls(first_present(row, IMAGE_FIELDS)),
        type_tag=category,
        details=_compact(details),
    )


def normalize_rows(rows: List[Dict[str, Any]], category: ServiceCategory) -> List[ServiceRecord]:
    return [normalize_row(row, category) for row in rows]
