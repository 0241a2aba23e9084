"""Tests for the HTTP surface: status codes, body shapes, error mapping."""

from unittest.mock import patch

import httpx
import respx
from fastapi.testclient import TestClient

from skyproxy.main import app

from .conftest import FLIGHTS_SCRAPER_URL, skyscanner_itinerary, skyscanner_payload

ONEWAY_URL = f"{FLIGHTS_SCRAPER_URL}/flights/search-oneway"
RETURN_URL = f"{FLIGHTS_SCRAPER_URL}/flights/search-return"


class TestHealth:

    def test_health(self, test_client: TestClient):
        response = test_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["provider"] == "flights_scraper"
        assert data["apiRequestCount"] == 0
        assert data["apiLimit"] == 150

    def test_request_count(self, test_client: TestClient, budget):
        budget.count = 12
        response = test_client.get("/api/request-count")
        assert response.json() == {"count": 12, "limit": 150, "remaining": 138}


class TestAutocomplete:

    @respx.mock
    def test_autocomplete_passthrough(self, test_client: TestClient):
        payload = {"data": [{"id": "LOND"}]}
        respx.get(f"{FLIGHTS_SCRAPER_URL}/flights/auto-complete").mock(
            return_value=httpx.Response(200, json=payload)
        )

        for path in ("/api/autocomplete", "/api/search-location"):
            response = test_client.get(path, params={"query": "London"})
            assert response.status_code == 200
            assert response.json() == {"success": True, "data": payload}

    def test_missing_query(self, test_client: TestClient):
        response = test_client.get("/api/autocomplete")
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required parameters"


class TestSearchFlightsRaw:

    @respx.mock
    def test_success_includes_meta(self, test_client: TestClient):
        payload = skyscanner_payload(skyscanner_itinerary(450.0))
        respx.get(ONEWAY_URL).mock(return_value=httpx.Response(200, json=payload))

        response = test_client.get(
            "/api/search-flights",
            params={"from": "LHR", "to": "JFK", "date": "2025-06-01"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"] == payload
        assert data["meta"] == {"requestCount": 1, "requestLimit": 150, "requestsRemaining": 149}

    @respx.mock
    def test_return_date_selects_round_trip(self, test_client: TestClient):
        route = respx.get(RETURN_URL).mock(
            return_value=httpx.Response(200, json=skyscanner_payload())
        )

        response = test_client.get(
            "/api/search-flights",
            params={
                "from": "LHR",
                "to": "JFK",
                "departureDate": "2025-06-01",
                "returnDate": "2025-06-08",
                "cabinClass": "BUSINESS",
            },
        )

        assert response.status_code == 200
        params = route.calls.last.request.url.params
        assert params["returnDate"] == "2025-06-08"
        assert params["cabinClass"] == "BUSINESS"

    @respx.mock
    def test_oneway_trip_type_ignores_return_date(self, test_client: TestClient):
        route = respx.get(ONEWAY_URL).mock(
            return_value=httpx.Response(200, json=skyscanner_payload())
        )

        test_client.get(
            "/api/search-flights",
            params={
                "from": "LHR",
                "to": "JFK",
                "departureDate": "2025-06-01",
                "returnDate": "2025-06-08",
                "tripType": "oneway",
            },
        )

        assert "returnDate" not in route.calls.last.request.url.params

    def test_missing_required(self, test_client: TestClient, budget):
        response = test_client.get("/api/search-flights", params={"from": "LHR"})

        assert response.status_code == 400
        assert response.json()["required"] == ["from", "to", "departureDate"]
        assert budget.count == 0

    def test_invalid_cabin_class(self, test_client: TestClient):
        response = test_client.get(
            "/api/search-flights",
            params={"from": "LHR", "to": "JFK", "date": "2025-06-01", "cabinClass": "LUXURY"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request parameters"
        assert body["details"][0]["field"] == "cabinClass"

    def test_malformed_query_values_use_error_body(self, test_client: TestClient, budget):
        response = test_client.get(
            "/api/search-flights",
            params={"from": "LHR", "to": "JFK", "date": "June 1st", "adults": 0},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request parameters"
        assert "detail" not in body
        assert {d["field"] for d in body["details"]} == {"date", "adults"}
        assert budget.count == 0

    def test_malformed_body_uses_error_body(self, test_client: TestClient):
        response = test_client.post(
            "/api/search",
            json={"from": "LHR", "to": "JFK", "departureDate": "not-a-date"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request parameters"
        assert body["details"][0]["field"] == "departureDate"

    @respx.mock
    def test_upstream_error_passthrough(self, test_client: TestClient):
        respx.get(ONEWAY_URL).mock(
            return_value=httpx.Response(403, json={"message": "You are not subscribed to this API."})
        )

        response = test_client.get(
            "/api/search-flights",
            params={"from": "LHR", "to": "JFK", "date": "2025-06-01"},
        )

        assert response.status_code == 403
        assert response.json() == {
            "error": "API request failed",
            "details": {"message": "You are not subscribed to this API."},
            "status": 403,
        }

    def test_missing_api_key(self, make_adapter):
        from skyproxy.dependencies import get_flight_search

        app.dependency_overrides[get_flight_search] = lambda: make_adapter(api_key="")
        try:
            with TestClient(app) as client:
                response = client.get(
                    "/api/search-flights",
                    params={"from": "LHR", "to": "JFK", "date": "2025-06-01"},
                )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["error"] == "API key not configured"


class TestNormalizedSearch:

    @respx.mock
    def test_search(self, test_client: TestClient):
        respx.get(ONEWAY_URL).mock(
            return_value=httpx.Response(200, json=skyscanner_payload(skyscanner_itinerary(450.0)))
        )

        response = test_client.post(
            "/api/search",
            json={"from": "LHR", "to": "JFK", "departureDate": "2025-06-01", "currency": "GBP"},
        )

        assert response.status_code == 200
        results = response.json()["results"]
        assert len(results) == 1
        assert results[0]["price"] == 450.0
        assert results[0]["currency"] == "GBP"
        assert results[0]["outbound"]["carrier"] == "British Airways"

    def test_search_missing_fields(self, test_client: TestClient):
        response = test_client.post("/api/search", json={"from": "LHR"})
        assert response.status_code == 400

    @respx.mock
    def test_search_flex_sorted_with_partial_failure(self, test_client: TestClient):
        def by_origin(request: httpx.Request) -> httpx.Response:
            origin = request.url.params["originSkyId"]
            if origin == "STN":
                return httpx.Response(502, json={"message": "bad gateway"})
            price = {"LHR": 610.0, "LGW": 380.0}[origin]
            return httpx.Response(200, json=skyscanner_payload(skyscanner_itinerary(price)))

        respx.get(ONEWAY_URL).mock(side_effect=by_origin)

        response = test_client.post(
            "/api/search-flex",
            json={
                "departures": ["LHR", "STN", "LGW"],
                "arrivals": ["JFK"],
                "departureDate": "2025-06-01",
                "adults": 2,
            },
        )

        assert response.status_code == 200
        assert [r["price"] for r in response.json()["results"]] == [380.0, 610.0]

    def test_search_flex_empty_departures(self, test_client: TestClient):
        response = test_client.post(
            "/api/search-flex",
            json={"departures": [], "arrivals": ["JFK"], "departureDate": "2025-06-01"},
        )
        assert response.status_code == 400


class TestPriceTable:

    def test_unsupported_provider(self, test_client: TestClient):
        response = test_client.get("/api/price-table", params={"from": "LHR", "to": "JFK"})
        assert response.status_code == 501
        assert response.json()["provider"] == "flights_scraper"


class TestUnexpectedErrors:

    def test_unexpected_exception_becomes_500(self, adapter, budget):
        from skyproxy.dependencies import get_budget, get_flight_search

        app.dependency_overrides[get_flight_search] = lambda: adapter
        app.dependency_overrides[get_budget] = lambda: budget
        try:
            with TestClient(app, raise_server_exceptions=False) as client:
                with patch.object(adapter, "search_raw", side_effect=RuntimeError("kaboom")):
                    response = client.get(
                        "/api/search-flights",
                        params={"from": "LHR", "to": "JFK", "date": "2025-06-01"},
                    )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "message": "kaboom"}
