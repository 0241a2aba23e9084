"""Flight search adapter — resolves airports, queries the upstream, normalizes results."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from skyproxy.errors import (
    NetworkError,
    ResolutionError,
    UnsupportedOperationError,
    UpstreamError,
    ValidationError,
)
from skyproxy.schemas.flight import AirportIdentity, Itinerary
from skyproxy.schemas.search import SearchRequest
from skyproxy.services.normalizer import count_results, normalize
from skyproxy.services.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)

REQUIRED_SEARCH_FIELDS = ["from", "to", "departureDate"]

# Failures a single pair in a flexible search may absorb
PAIR_FAILURES = (UpstreamError, ResolutionError, NetworkError)


@dataclass
class SearchOutcome:
    itineraries: list[Itinerary]
    meta: dict = field(default_factory=dict)


class FlightSearchAdapter:
    """Provider-agnostic flight search over one configured upstream."""

    def __init__(
        self,
        client: UpstreamClient,
        currency: str = "GBP",
        market: str = "GB",
        locale: str = "en-GB",
        result_limit: int = 20,
    ):
        self.client = client
        self.provider = client.provider
        self.budget = client.budget
        self.currency = currency
        self.market = market
        self.locale = locale
        self.result_limit = result_limit

    # --- Airport lookup ---

    async def search_locations(self, query: str | None) -> Any:
        """Free-text airport/city lookup, returned as the upstream sent it."""
        if not query:
            raise ValidationError(["query"])
        params = {self.provider.airport_query_param: query, **self.provider.airport_params}
        return await self.client.get(
            self.provider.airport_search_path, params, label=f"Autocomplete: {query}"
        )

    async def resolve_airport(self, code: str) -> AirportIdentity:
        """Resolve a short code to the provider's sky id and entity id.

        Takes the first match. Never cached: every call hits the upstream.
        """
        try:
            payload = await self.search_locations(code)
        except UpstreamError as e:
            raise ResolutionError(code, upstream_status=e.status_code) from e

        matches = []
        if isinstance(payload, dict):
            matches = payload.get("data") or payload.get("locations") or []
        if not isinstance(matches, list) or not matches or not isinstance(matches[0], dict):
            raise ResolutionError(code)

        first = matches[0]
        navigation = first.get("navigation") or {}
        flight_params = navigation.get("relevantFlightParams") or {}
        presentation = first.get("presentation") or {}

        sky_id = first.get("skyId") or flight_params.get("skyId") or first.get("code")
        entity_id = (
            first.get("entityId")
            or flight_params.get("entityId")
            or navigation.get("entityId")
            or first.get("id")
        )
        if not sky_id or not entity_id:
            raise ResolutionError(code)

        return AirportIdentity(
            code=code,
            sky_id=str(sky_id),
            entity_id=str(entity_id),
            name=presentation.get("title") or navigation.get("localizedName") or first.get("name") or "",
        )

    # --- Query building ---

    def _format_date(self, value: date | None) -> str | None:
        return value.strftime(self.provider.date_format) if value else None

    def build_query(
        self,
        request: SearchRequest,
        origin: AirportIdentity | None = None,
        destination: AirportIdentity | None = None,
    ) -> tuple[str, dict[str, Any]]:
        """Map a SearchRequest onto the provider's endpoint and parameter names."""
        p = self.provider
        max_stops = request.max_stops if request.max_stops is not None else p.default_stops

        values: dict[str, Any] = {
            "origin": origin.sky_id if origin else request.origin,
            "destination": destination.sky_id if destination else request.destination,
            "origin_entity_id": origin.entity_id if origin else None,
            "destination_entity_id": destination.entity_id if destination else None,
            "departure_date": self._format_date(request.departure_date),
            "return_date": self._format_date(request.return_date),
            "adults": request.adults,
            "children": request.children,
            "infants": request.infants,
            "max_stops": max_stops,
            "cabin_class": p.cabin(request.cabin_class.value),
            "currency": request.currency or self.currency,
            "market": request.market or self.market,
            "locale": request.locale or self.locale,
            "sort": p.sort(request.sort.value),
            "limit": self.result_limit,
        }

        params: dict[str, Any] = {}
        for field_name, value in values.items():
            names = p.params.get(field_name)
            if names is None or value is None:
                continue
            for name in (names,) if isinstance(names, str) else names:
                params[name] = value
        params.update(p.fixed_params)

        path = p.return_path if request.is_round_trip else p.oneway_path
        return path, params

    # --- Search ---

    def validate(self, request: SearchRequest):
        missing = []
        if not request.origin:
            missing.append("from")
        if not request.destination:
            missing.append("to")
        if not request.departure_date:
            missing.append("departureDate")
        if missing:
            raise ValidationError(missing, required=REQUIRED_SEARCH_FIELDS)

    async def search_raw(self, request: SearchRequest) -> Any:
        """Run one search and return the upstream payload untouched."""
        self.validate(request)
        self.client.require_key()

        origin = destination = None
        if self.provider.needs_entity_ids:
            origin, destination = await asyncio.gather(
                self.resolve_airport(request.origin),
                self.resolve_airport(request.destination),
            )

        path, params = self.build_query(request, origin, destination)
        dates = request.departure_date.isoformat()
        if request.return_date:
            dates += f" - {request.return_date.isoformat()}"
        payload = await self.client.get(
            path, params, label=f"Search: {request.origin} -> {request.destination} ({dates})"
        )

        logger.info(
            f"Found {count_results(self.provider.response_shape, payload)} flights "
            f"(Request {self.budget.count}/{self.budget.limit})"
        )
        return payload

    async def search_flights(self, request: SearchRequest) -> SearchOutcome:
        payload = await self.search_raw(request)
        itineraries = normalize(
            self.provider.response_shape, payload, request.currency or self.currency
        )
        return SearchOutcome(itineraries=itineraries, meta=self.budget.meta())

    async def search_flexible(
        self,
        origins: list[str],
        destinations: list[str],
        request: SearchRequest,
    ) -> list[Itinerary]:
        """Search every origin/destination pair and merge the results by price.

        A pair that fails upstream contributes nothing; the rest still return.
        """
        missing = []
        if not origins:
            missing.append("departures")
        if not destinations:
            missing.append("arrivals")
        if not request.departure_date:
            missing.append("departureDate")
        if missing:
            raise ValidationError(missing, required=["departures", "arrivals", "departureDate"])
        self.client.require_key()

        pairs = [(o, d) for o in origins for d in destinations if o != d]
        results = await asyncio.gather(
            *(
                self.search_flights(request.model_copy(update={"origin": o, "destination": d}))
                for o, d in pairs
            ),
            return_exceptions=True,
        )

        itineraries: list[Itinerary] = []
        for (orig, dest), result in zip(pairs, results):
            if isinstance(result, PAIR_FAILURES):
                logger.warning(f"Flexible search failed for {orig}->{dest}: {result}")
            elif isinstance(result, BaseException):
                raise result
            else:
                itineraries.extend(result.itineraries)

        logger.info(f"Flexible search: {len(itineraries)} flights across {len(pairs)} routes")
        return sorted(itineraries, key=lambda i: i.price)

    async def price_table(
        self,
        origin: str | None,
        destination: str | None,
        from_date: date | None = None,
        currency: str | None = None,
    ) -> Any:
        """Upstream flexible-date price grid, returned as sent."""
        p = self.provider
        if not p.price_table_path:
            raise UnsupportedOperationError(p.name, "price tables")

        missing = [name for name, value in (("from", origin), ("to", destination)) if not value]
        if missing:
            raise ValidationError(missing, required=["from", "to"])

        values = {
            "origin": origin,
            "destination": destination,
            "from_date": (from_date or date.today()).isoformat(),
            "currency": currency or self.currency,
        }
        params = {p.price_table_params[k]: v for k, v in values.items() if k in p.price_table_params}
        return await self.client.get(
            p.price_table_path, params, label=f"Price table: {origin} -> {destination}"
        )

    async def close(self):
        await self.client.close()
