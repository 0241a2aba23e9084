from datetime import date
from enum import Enum

from pydantic import BaseModel, Field


class CabinClass(str, Enum):
    economy = "economy"
    premium_economy = "premium_economy"
    business = "business"
    first = "first"


class SortKey(str, Enum):
    price = "price"
    best = "best"
    duration = "duration"


class SearchRequest(BaseModel):
    """Normalized flight search. Required fields are checked by the adapter, not here."""
    origin: str | None = Field(None, alias="from")
    destination: str | None = Field(None, alias="to")
    departure_date: date | None = Field(None, alias="departureDate")
    return_date: date | None = Field(None, alias="returnDate")
    adults: int = Field(1, ge=1)
    children: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)
    cabin_class: CabinClass = Field(CabinClass.economy, alias="cabinClass")
    currency: str | None = None
    market: str | None = None
    locale: str | None = None
    max_stops: int | None = Field(None, alias="maxStops", ge=0)
    sort: SortKey = SortKey.price

    model_config = {"populate_by_name": True}

    @property
    def is_round_trip(self) -> bool:
        return self.return_date is not None


class FlexSearchRequest(BaseModel):
    departures: list[str] = Field(default_factory=list)
    arrivals: list[str] = Field(default_factory=list)
    departure_date: date | None = Field(None, alias="departureDate")
    return_date: date | None = Field(None, alias="returnDate")
    adults: int = Field(1, ge=1)
    cabin_class: CabinClass = Field(CabinClass.economy, alias="cabinClass")
    currency: str | None = None

    model_config = {"populate_by_name": True}

    def base_request(self) -> SearchRequest:
        """Shared fields for every origin/destination pair."""
        return SearchRequest(
            departure_date=self.departure_date,
            return_date=self.return_date,
            adults=self.adults,
            cabin_class=self.cabin_class,
            currency=self.currency,
        )
