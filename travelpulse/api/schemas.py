"""Request and response bodies for the HTTP surface."""

import datetime
from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from travelpulse.models.archive import ArchivedTrip
from travelpulse.models.common import Currency, DocumentModel, ItineraryItemType
from travelpulse.state.session import TripSession


class TripResponse(BaseModel):
    """Current trip plus the read-only flag."""

    is_read_only: bool
    trip: dict[str, Any]

    @classmethod
    def from_session(cls, session: TripSession) -> "TripResponse":
        return cls(is_read_only=session.is_read_only, trip=session.state.to_document())


class DailyMapRequest(BaseModel):
    """Body for PUT /trip/daily-maps/{day}."""

    url: str


class ItineraryItemRequest(DocumentModel):
    """Quick-add / edit body; blanks are filled with default slot values on add."""

    date: datetime.date | None = None
    start_time: str | None = Field(None, pattern=r"^\d{2}:\d{2}$")
    duration: str | None = None
    activity: str | None = None
    location: str | None = None
    location_url: str | None = None
    type: ItineraryItemType | None = None
    transportation: str | None = None
    note: str | None = None
    attachment: str | None = None


class ReorderRequest(BaseModel):
    """Move the item at `from_index` to `to_index` within one day."""

    date: date
    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


class MoveRequest(BaseModel):
    """Drag `item_id` onto the position of `over_id`."""

    item_id: str
    over_id: str


class DayItineraryResponse(BaseModel):
    """One day's items in display order, with the shopping entries linked to each."""

    date: date
    items: list[dict[str, Any]]
    shopping: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)


class CalendarResponse(BaseModel):
    """Trip dates, embeddable daily map links and the booked hotels."""

    dates: list[date]
    daily_maps: dict[date, str]
    selected_hotels: list[dict[str, Any]]


class DebtRequest(DocumentModel):
    """Add or replace one shared expense."""

    description: str
    amount: float = Field(..., ge=0)
    currency: Currency = Currency.TWD
    payer: str
    date: datetime.date


class ShoppingItemRequest(DocumentModel):
    """Add or replace one shopping entry; a blank recipient means the traveller."""

    name: str
    amount: float = Field(0, ge=0)
    currency: Currency = Currency.TWD
    is_checked: bool = False
    itinerary_item_id: str | None = None
    for_whom: str | None = None
    image: str | None = None


class LedgerResponse(BaseModel):
    """Expense totals in one display currency."""

    currency: str
    total: float
    by_payer: dict[str, float]


class ShoppingResponse(BaseModel):
    """Shopping list for one recipient filter, in display order."""

    buyers: list[str]
    items: list[dict[str, Any]]
    checked_totals: dict[str, float]


class ArchiveSummary(BaseModel):
    """Archive list entry (no embedded snapshot)."""

    id: str
    timestamp: int
    destination: str
    start_date: date
    end_date: date
    cover_image: str

    @classmethod
    def from_archive(cls, archive: ArchivedTrip) -> "ArchiveSummary":
        return cls(
            id=archive.id,
            timestamp=archive.timestamp,
            destination=archive.destination,
            start_date=archive.start_date,
            end_date=archive.end_date,
            cover_image=archive.cover_image,
        )
