"""
Shared fixtures for skyproxy tests.

Upstream HTTP is mocked with respx; the FastAPI app is exercised through
TestClient with the adapter dependency swapped for a test instance.
"""

import pytest
from fastapi.testclient import TestClient

from skyproxy.dependencies import get_budget, get_flight_search
from skyproxy.main import app
from skyproxy.schemas.search import SearchRequest
from skyproxy.services.flight_search import FlightSearchAdapter
from skyproxy.services.providers import get_provider
from skyproxy.services.request_budget import RequestBudget
from skyproxy.services.upstream_client import UpstreamClient

FLIGHTS_SCRAPER_URL = "https://flights-scraper-real-time.p.rapidapi.com"
SKY_SCRAPPER_URL = "https://sky-scrapper.p.rapidapi.com"
KIWI_URL = "https://api.tequila.kiwi.com"


@pytest.fixture
def anyio_backend():
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def budget() -> RequestBudget:
    return RequestBudget(limit=150)


@pytest.fixture
def make_adapter(budget):
    """Factory for an adapter bound to a provider and the shared test budget."""

    def _make(provider: str = "flights_scraper", api_key: str = "test-key") -> FlightSearchAdapter:
        client = UpstreamClient(get_provider(provider), api_key=api_key, budget=budget)
        return FlightSearchAdapter(client, currency="GBP", market="GB", locale="en-GB")

    return _make


@pytest.fixture
def adapter(make_adapter) -> FlightSearchAdapter:
    return make_adapter("flights_scraper")


@pytest.fixture
def test_client(adapter, budget):
    """TestClient with the flights_scraper adapter and a fresh budget."""
    app.dependency_overrides[get_flight_search] = lambda: adapter
    app.dependency_overrides[get_budget] = lambda: budget
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def search_request() -> SearchRequest:
    return SearchRequest.model_validate(
        {"from": "LHR", "to": "JFK", "departureDate": "2025-06-01"}
    )


def skyscanner_itinerary(
    price: float | None = 450.0,
    carrier: str | None = "British Airways",
    legs: int = 1,
    itinerary_id: str = "it-1",
) -> dict:
    """Build one Skyscanner-style itinerary object."""
    leg = {
        "origin": {"id": "LHR", "displayCode": "LHR"},
        "destination": {"id": "JFK", "displayCode": "JFK"},
        "departure": "2025-06-01T10:30:00",
        "arrival": "2025-06-01T13:45:00",
        "durationInMinutes": 495,
        "stopCount": 0,
        "carriers": {"marketing": [{"name": carrier}] if carrier else []},
    }
    inbound = {
        **leg,
        "origin": {"id": "JFK", "displayCode": "JFK"},
        "destination": {"id": "LHR", "displayCode": "LHR"},
        "stopCount": 1,
    }
    item = {"id": itinerary_id, "legs": [leg, inbound][:legs]}
    if price is not None:
        item["price"] = {"raw": price, "formatted": f"£{price:.0f}"}
    return item


def skyscanner_payload(*itineraries: dict) -> dict:
    return {"status": True, "data": {"itineraries": list(itineraries)}}


@pytest.fixture
def sky_airport_payloads() -> dict:
    """Sky-Scrapper airport search responses keyed by query."""
    return {
        "LHR": {
            "status": True,
            "data": [
                {
                    "skyId": "LHR",
                    "entityId": "95565050",
                    "presentation": {"title": "London Heathrow", "subtitle": "United Kingdom"},
                    "navigation": {"entityId": "95565050", "localizedName": "London Heathrow"},
                }
            ],
        },
        "JFK": {
            "status": True,
            "data": [
                {
                    "skyId": "JFK",
                    "entityId": "95565058",
                    "presentation": {"title": "New York John F. Kennedy"},
                    "navigation": {"entityId": "95565058"},
                }
            ],
        },
    }
