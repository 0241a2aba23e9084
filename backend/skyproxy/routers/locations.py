"""Airport autocomplete — passthrough of the upstream location search."""

from fastapi import APIRouter, Depends, Query

from skyproxy.dependencies import get_flight_search
from skyproxy.services.flight_search import FlightSearchAdapter

router = APIRouter()


@router.get("/autocomplete")
@router.get("/search-location")
async def search_location(
    query: str | None = Query(None),
    flight_search: FlightSearchAdapter = Depends(get_flight_search),
):
    """Search airports and cities by free text."""
    data = await flight_search.search_locations(query)
    return {"success": True, "data": data}
