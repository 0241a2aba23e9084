from fastapi import Request

from skyproxy.config import Settings
from skyproxy.services.flight_search import FlightSearchAdapter
from skyproxy.services.providers import get_provider
from skyproxy.services.request_budget import RequestBudget
from skyproxy.services.upstream_client import UpstreamClient


def create_flight_search(settings: Settings, budget: RequestBudget) -> FlightSearchAdapter:
    """Build the adapter for the configured provider. Raises ConfigurationError on an unknown id."""
    provider = get_provider(settings.provider)
    client = UpstreamClient(
        provider,
        api_key=getattr(settings, provider.api_key_setting),
        budget=budget,
        timeout=settings.http_timeout,
    )
    return FlightSearchAdapter(
        client,
        currency=settings.default_currency,
        market=settings.default_market,
        locale=settings.default_locale,
        result_limit=settings.result_limit,
    )


def get_budget(request: Request) -> RequestBudget:
    return request.app.state.budget


def get_flight_search(request: Request) -> FlightSearchAdapter:
    return request.app.state.flight_search
