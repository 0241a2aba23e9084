"""Upstream provider table — parameter names, date formats and endpoint paths per API."""

from dataclasses import dataclass, field

from skyproxy.errors import ConfigurationError


@dataclass(frozen=True)
class ProviderConfig:
    """How one upstream API spells a flight search.

    ``params`` maps SearchRequest field names to upstream query parameter
    names. A tuple means the value is sent under every listed name (Kiwi
    takes a date window, so one date fills both ends). Fields with no entry
    are not sent.
    """
    name: str
    base_url: str
    key_header: str
    api_key_setting: str
    date_format: str
    oneway_path: str
    return_path: str
    airport_search_path: str
    airport_query_param: str
    params: dict[str, str | tuple[str, ...]]
    cabin_classes: dict[str, str]
    sort_keys: dict[str, str]
    host_header: str | None = None
    fixed_params: dict[str, str] = field(default_factory=dict)
    airport_params: dict[str, str] = field(default_factory=dict)
    default_stops: str | None = None
    price_table_path: str | None = None
    price_table_params: dict[str, str] = field(default_factory=dict)
    needs_entity_ids: bool = False
    response_shape: str = "skyscanner"

    @property
    def host(self) -> str:
        return self.base_url.split("://", 1)[-1].rstrip("/")

    def headers(self, api_key: str) -> dict[str, str]:
        headers = {self.key_header: api_key}
        if self.host_header:
            headers[self.host_header] = self.host
        return headers

    def cabin(self, cabin_class: str) -> str:
        return self.cabin_classes.get(cabin_class, self.cabin_classes["economy"])

    def sort(self, sort_key: str) -> str:
        return self.sort_keys.get(sort_key, self.sort_keys["price"])


SKY_SCRAPPER = ProviderConfig(
    name="sky_scrapper",
    base_url="https://sky-scrapper.p.rapidapi.com",
    host_header="x-rapidapi-host",
    key_header="x-rapidapi-key",
    api_key_setting="rapidapi_key",
    date_format="%Y-%m-%d",
    oneway_path="/api/v2/flights/searchFlights",
    return_path="/api/v2/flights/searchFlights",
    airport_search_path="/api/v1/flights/searchAirport",
    airport_query_param="query",
    airport_params={"locale": "en-US"},
    params={
        "origin": "originSkyId",
        "destination": "destinationSkyId",
        "origin_entity_id": "originEntityId",
        "destination_entity_id": "destinationEntityId",
        "departure_date": "date",
        "return_date": "returnDate",
        "adults": "adults",
        "children": "childrens",
        "infants": "infants",
        "cabin_class": "cabinClass",
        "currency": "currency",
        "market": "market",
        "sort": "sortBy",
    },
    cabin_classes={
        "economy": "economy",
        "premium_economy": "premium_economy",
        "business": "business",
        "first": "first",
    },
    sort_keys={"price": "cheapest", "best": "best", "duration": "fastest"},
    price_table_path="/api/v1/flights/getPriceCalendar",
    price_table_params={
        "origin": "originSkyId",
        "destination": "destinationSkyId",
        "from_date": "fromDate",
        "currency": "currency",
    },
    needs_entity_ids=True,
)

FLIGHTS_SCRAPER = ProviderConfig(
    name="flights_scraper",
    base_url="https://flights-scraper-real-time.p.rapidapi.com",
    host_header="x-rapidapi-host",
    key_header="x-rapidapi-key",
    api_key_setting="rapidapi_key",
    date_format="%Y-%m-%d",
    oneway_path="/flights/search-oneway",
    return_path="/flights/search-return",
    airport_search_path="/flights/auto-complete",
    airport_query_param="query",
    params={
        "origin": "originSkyId",
        "destination": "destinationSkyId",
        "departure_date": "departureDate",
        "return_date": "returnDate",
        "adults": "adults",
        "children": "children",
        "infants": "infants",
        "max_stops": "stops",
        "cabin_class": "cabinClass",
        "currency": "currency",
        "market": "market",
        "locale": "locale",
        "sort": "sort",
        "limit": "limit",
    },
    cabin_classes={
        "economy": "ECONOMY",
        "premium_economy": "PREMIUM_ECONOMY",
        "business": "BUSINESS",
        "first": "FIRST",
    },
    sort_keys={"price": "PRICE", "best": "BEST", "duration": "DURATION"},
    fixed_params={
        "allowReturnFromDifferentStationOrAirport": "true",
        "allowReturnToDifferentStationOrAirport": "true",
    },
    default_stops="2",
)

KIWI = ProviderConfig(
    name="kiwi",
    base_url="https://api.tequila.kiwi.com",
    key_header="apikey",
    api_key_setting="kiwi_api_key",
    date_format="%d/%m/%Y",
    oneway_path="/v2/search",
    return_path="/v2/search",
    airport_search_path="/locations/query",
    airport_query_param="term",
    airport_params={"location_types": "airport", "limit": "10"},
    params={
        "origin": "fly_from",
        "destination": "fly_to",
        "departure_date": ("date_from", "date_to"),
        "return_date": ("return_from", "return_to"),
        "adults": "adults",
        "children": "children",
        "infants": "infants",
        "max_stops": "max_stopovers",
        "cabin_class": "selected_cabins",
        "currency": "curr",
        "locale": "locale",
        "sort": "sort",
        "limit": "limit",
    },
    cabin_classes={
        "economy": "M",
        "premium_economy": "W",
        "business": "C",
        "first": "F",
    },
    sort_keys={"price": "price", "best": "quality", "duration": "duration"},
    response_shape="kiwi",
)

PROVIDERS: dict[str, ProviderConfig] = {
    p.name: p for p in (SKY_SCRAPPER, FLIGHTS_SCRAPER, KIWI)
}


def get_provider(name: str) -> ProviderConfig:
    try:
        return PROVIDERS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown provider '{name}'. Expected one of: {', '.join(sorted(PROVIDERS))}"
        ) from None
