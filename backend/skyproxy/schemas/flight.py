from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer


class AirportIdentity(BaseModel):
    code: str
    sky_id: str
    entity_id: str
    name: str = ""


class Leg(BaseModel):
    origin: str | None = None
    destination: str | None = None
    departure: str | None = None
    arrival: str | None = None
    stops: int = 0
    carrier: str = "Unknown"
    duration_minutes: int | None = None


class Itinerary(BaseModel):
    id: str | None = None
    price: Decimal = Decimal("0")
    currency: str | None = None
    outbound: Leg = Field(default_factory=Leg)
    inbound: Leg | None = None
    booking_url: str | None = None

    @field_serializer("price", when_used="json")
    def _price_as_number(self, price: Decimal) -> float:
        return float(price)


class SearchResponse(BaseModel):
    results: list[Itinerary]
    meta: dict | None = None
