"""Trip models - the live trip document and its entities."""

from datetime import date

from pydantic import Field, field_validator

from travelpulse.models.common import Currency, DocumentModel, FlightDirection, ItineraryItemType

DEFAULT_DESTINATION = "新旅程"
DEFAULT_COVER_IMAGE = (
    "https://images.unsplash.com/photo-1540959733332-eab4deabeeaf"
    "?q=80&w=2094&auto=format&fit=crop"
)
DEFAULT_FOR_WHOM = "自己"


class ItineraryItem(DocumentModel):
    """Single scheduled activity on one day of the trip."""

    id: str
    date: date
    start_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    duration: str  # "30m", "1.5h", "全天", ...
    activity: str
    location: str = ""
    location_url: str | None = None
    type: ItineraryItemType = ItineraryItemType.attraction
    transportation: str | None = None
    note: str | None = None
    attachment: str | None = None


class DebtItem(DocumentModel):
    """Shared expense paid by one traveller."""

    id: str
    description: str
    amount: float = Field(..., ge=0)
    currency: Currency = Currency.TWD
    payer: str
    date: date


class ShoppingItem(DocumentModel):
    """Shopping list entry, optionally linked to an itinerary item.

    The link is a weak reference: the itinerary item may be deleted on its own,
    in which case the entry is treated as unlinked.
    """

    id: str
    name: str
    amount: float = 0
    currency: Currency = Currency.TWD
    is_checked: bool = False
    itinerary_item_id: str | None = None
    for_whom: str = DEFAULT_FOR_WHOM
    image: str | None = None

    @field_validator("for_whom", mode="before")
    @classmethod
    def _default_recipient(cls, value: str | None) -> str:
        if value is None or not str(value).strip():
            return DEFAULT_FOR_WHOM
        return str(value).strip()


class Flight(DocumentModel):
    """Flight leg."""

    id: str
    airline: str
    flight_number: str
    departure: str
    arrival: str
    departure_time: str
    arrival_time: str
    price: float | None = None
    date: date
    ticket_url: str | None = None
    type: FlightDirection = FlightDirection.departure


class Hotel(DocumentModel):
    """Candidate hotel; `is_selected` marks the booked one(s)."""

    id: str
    name: str
    rating: float = 0
    price_per_person: float = 0
    currency: str = Currency.TWD.value
    address: str = ""
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    is_selected: bool = False
    url: str | None = None


class TripState(DocumentModel):
    """The single live trip being planned."""

    destination: str = DEFAULT_DESTINATION
    start_date: date = Field(default_factory=date.today)
    end_date: date = Field(default_factory=date.today)
    cover_image: str = DEFAULT_COVER_IMAGE
    daily_maps: dict[date, str] = Field(default_factory=dict)
    debts: list[DebtItem] = Field(default_factory=list)
    flights: list[Flight] = Field(default_factory=list)
    hotels: list[Hotel] = Field(default_factory=list)
    itinerary_items: list[ItineraryItem] = Field(default_factory=list)
    shopping_items: list[ShoppingItem] = Field(default_factory=list)


class TripDocument(DocumentModel):
    """Persisted trip document as read back from storage.

    Every field is optional: documents written by older clients may be partial,
    and only the fields present are applied on load.
    """

    destination: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    cover_image: str | None = None
    daily_maps: dict[date, str] | None = None
    debts: list[DebtItem] | None = None
    flights: list[Flight] | None = None
    hotels: list[Hotel] | None = None
    itinerary_items: list[ItineraryItem] | None = None
    shopping_items: list[ShoppingItem] | None = None

    def present_fields(self) -> dict:
        """Fields that carry a usable value (empty strings count as absent)."""
        present = {}
        for name in TripState.model_fields:
            value = getattr(self, name)
            if value is None or value == "":
                continue
            present[name] = value
        return present
