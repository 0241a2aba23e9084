"""Health and request-budget endpoints."""

from fastapi import APIRouter, Depends

from skyproxy.dependencies import get_budget, get_flight_search
from skyproxy.services.flight_search import FlightSearchAdapter
from skyproxy.services.request_budget import RequestBudget

router = APIRouter()


@router.get("/health")
async def health_check(
    budget: RequestBudget = Depends(get_budget),
    flight_search: FlightSearchAdapter = Depends(get_flight_search),
):
    return {
        "status": "OK",
        "message": "Flight search backend is running!",
        "provider": flight_search.provider.name,
        "apiRequestCount": budget.count,
        "apiLimit": budget.limit,
    }


@router.get("/api/request-count")
async def request_count(budget: RequestBudget = Depends(get_budget)):
    return budget.snapshot()
