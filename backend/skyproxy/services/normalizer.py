"""Response normalizer — flattens provider itinerary JSON into Itinerary models.

Upstream payloads are trusted for shape only loosely: any nested field may be
absent or carry the wrong type. Missing values fall back to defaults (0 stops,
"Unknown" carrier, price 0), scalar fields of the wrong type are dropped, and
an entry that still cannot be built is logged and skipped, so a single bad
itinerary never fails the whole search.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError as ModelValidationError

from skyproxy.data.airlines import airline_name
from skyproxy.schemas.flight import Itinerary, Leg

logger = logging.getLogger(__name__)

# Per-item failures that mean "skip this itinerary", not "fail the search"
ITEM_FAILURES = (ModelValidationError, TypeError, ValueError)


def _to_decimal(value: Any) -> Decimal:
    """Parse a numeric or numeric-string price; anything else is 0."""
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return Decimal("0")
    try:
        parsed = Decimal(str(value).replace(",", ""))
    except InvalidOperation:
        return Decimal("0")
    return parsed if parsed.is_finite() else Decimal("0")


def _to_int(value: Any, default: int | None = 0) -> int | None:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError, OverflowError):
        return default


def _as_str(value: Any) -> str | None:
    """Scalar leaf as a string; containers, booleans and blanks become None."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _item_id(item: dict) -> str | None:
    return _as_str(item.get("id"))


# --- Skyscanner-style payloads (Sky-Scrapper, Flights Scraper Real-Time) ---

def skyscanner_itineraries(payload: Any) -> list:
    """Raw itinerary list from a Skyscanner-style payload, or [] when absent."""
    return _as_list(_as_dict(_as_dict(payload).get("data")).get("itineraries"))


def _skyscanner_place(place: Any) -> str | None:
    place = _as_dict(place)
    return _as_str(place.get("displayCode")) or _as_str(place.get("id"))


def _skyscanner_leg(leg: Any) -> Leg:
    leg = _as_dict(leg)
    marketing = _as_list(_as_dict(leg.get("carriers")).get("marketing"))
    first_carrier = _as_dict(marketing[0]) if marketing else {}
    return Leg(
        origin=_skyscanner_place(leg.get("origin")),
        destination=_skyscanner_place(leg.get("destination")),
        departure=_as_str(leg.get("departure")),
        arrival=_as_str(leg.get("arrival")),
        stops=_to_int(leg.get("stopCount")),
        carrier=_as_str(first_carrier.get("name")) or "Unknown",
        duration_minutes=_to_int(leg.get("durationInMinutes"), None),
    )


def _skyscanner_itinerary(item: dict, currency: str | None) -> Itinerary:
    legs = _as_list(item.get("legs"))
    price = _as_dict(item.get("price"))
    return Itinerary(
        id=_item_id(item),
        price=_to_decimal(price.get("raw")),
        currency=currency,
        outbound=_skyscanner_leg(legs[0] if legs else None),
        inbound=_skyscanner_leg(legs[1]) if len(legs) > 1 else None,
    )


def normalize_skyscanner(payload: Any, currency: str | None) -> list[Itinerary]:
    return _build_all(skyscanner_itineraries(payload), _skyscanner_itinerary, currency)


# --- Kiwi Tequila payloads ---

def _kiwi_leg(segments: list[dict], duration_seconds: Any) -> Leg:
    first, last = segments[0], segments[-1]
    seconds = _to_int(duration_seconds, None)
    return Leg(
        origin=_as_str(first.get("flyFrom")),
        destination=_as_str(last.get("flyTo")),
        departure=_as_str(first.get("local_departure")),
        arrival=_as_str(last.get("local_arrival")),
        stops=len(segments) - 1,
        carrier=airline_name(first.get("airline")),
        duration_minutes=seconds // 60 if seconds is not None else None,
    )


def _kiwi_itinerary(item: dict, currency: str | None) -> Itinerary:
    route = [s for s in _as_list(item.get("route")) if isinstance(s, dict)]
    outbound = [s for s in route if not s.get("return")]
    inbound = [s for s in route if s.get("return")]
    durations = _as_dict(item.get("duration"))
    return Itinerary(
        id=_item_id(item),
        price=_to_decimal(item.get("price")),
        currency=currency,
        outbound=_kiwi_leg(outbound, durations.get("departure")) if outbound else Leg(),
        inbound=_kiwi_leg(inbound, durations.get("return")) if inbound else None,
        booking_url=_as_str(item.get("deep_link")),
    )


def normalize_kiwi(payload: Any, currency: str | None) -> list[Itinerary]:
    payload = _as_dict(payload)
    currency = _as_str(payload.get("currency")) or currency
    return _build_all(_as_list(payload.get("data")), _kiwi_itinerary, currency)


def _build_all(items: list, build, currency: str | None) -> list[Itinerary]:
    results = []
    for item in items:
        if not isinstance(item, dict):
            logger.debug(f"Skipping malformed itinerary: {item!r}")
            continue
        try:
            results.append(build(item, currency))
        except ITEM_FAILURES as e:
            logger.warning(f"Skipping itinerary {item.get('id')!r}: {e}")
    return results


NORMALIZERS = {
    "skyscanner": normalize_skyscanner,
    "kiwi": normalize_kiwi,
}


def normalize(shape: str, payload: Any, currency: str | None = None) -> list[Itinerary]:
    """Normalize an upstream payload of the given response shape."""
    return NORMALIZERS[shape](payload, currency)


def count_results(shape: str, payload: Any) -> int:
    if shape == "kiwi":
        return len(_as_list(_as_dict(payload).get("data")))
    return len(skyscanner_itineraries(payload))
