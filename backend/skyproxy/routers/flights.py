"""Flight search router — raw passthrough, normalized search, flexible search, price table."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from skyproxy.dependencies import get_flight_search
from skyproxy.errors import InvalidParameterError
from skyproxy.schemas.flight import SearchResponse
from skyproxy.schemas.search import CabinClass, FlexSearchRequest, SearchRequest, SortKey
from skyproxy.services.flight_search import FlightSearchAdapter

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_choice(enum_cls, value: str | None, param: str):
    if value is None:
        return None
    try:
        return enum_cls(value.lower())
    except ValueError:
        choices = ", ".join(e.value for e in enum_cls)
        raise InvalidParameterError([{"field": param, "message": f"Use one of: {choices}"}])


@router.get("/search-flights")
async def search_flights_raw(
    origin: str | None = Query(None, alias="from"),
    destination: str | None = Query(None, alias="to"),
    departure_date: date | None = Query(None, alias="departureDate"),
    date_: date | None = Query(None, alias="date"),
    return_date: date | None = Query(None, alias="returnDate"),
    trip_type: str = Query("return", alias="tripType"),
    adults: int = Query(1, ge=1),
    children: int = Query(0, ge=0),
    infants: int = Query(0, ge=0),
    stops: int | None = Query(None, ge=0),
    cabin_class: str | None = Query(None, alias="cabinClass"),
    currency: str | None = None,
    market: str | None = None,
    locale: str | None = None,
    sort: str | None = None,
    flight_search: FlightSearchAdapter = Depends(get_flight_search),
):
    """Search flights and relay the upstream payload with budget counters."""
    request = SearchRequest(
        origin=origin,
        destination=destination,
        departure_date=departure_date or date_,
        return_date=None if trip_type == "oneway" else return_date,
        adults=adults,
        children=children,
        infants=infants,
        max_stops=stops,
        cabin_class=_parse_choice(CabinClass, cabin_class, "cabinClass") or CabinClass.economy,
        currency=currency,
        market=market,
        locale=locale,
        sort=_parse_choice(SortKey, sort, "sort") or SortKey.price,
    )
    data = await flight_search.search_raw(request)
    return {"success": True, "data": data, "meta": flight_search.budget.meta()}


@router.post("/search", response_model=SearchResponse)
async def search_flights(
    req: SearchRequest,
    flight_search: FlightSearchAdapter = Depends(get_flight_search),
):
    """Search one route and return normalized itineraries."""
    outcome = await flight_search.search_flights(req)
    return SearchResponse(results=outcome.itineraries, meta=outcome.meta)


@router.post("/search-flex", response_model=SearchResponse)
async def search_flex(
    req: FlexSearchRequest,
    flight_search: FlightSearchAdapter = Depends(get_flight_search),
):
    """Search every departure/arrival pair; results sorted by price."""
    results = await flight_search.search_flexible(req.departures, req.arrivals, req.base_request())
    return SearchResponse(results=results, meta=flight_search.budget.meta())


@router.get("/price-table")
async def price_table(
    origin: str | None = Query(None, alias="from"),
    destination: str | None = Query(None, alias="to"),
    from_date: date | None = Query(None, alias="fromDate"),
    currency: str | None = None,
    flight_search: FlightSearchAdapter = Depends(get_flight_search),
):
    """Flexible-date price grid, as the upstream returns it."""
    data = await flight_search.price_table(origin, destination, from_date, currency)
    return {"success": True, "data": data}
