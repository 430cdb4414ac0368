"""Models package - re-exports for convenience."""

from travelpulse.models.archive import ArchivedTrip
from travelpulse.models.common import (
    Currency,
    DocumentModel,
    FlightDirection,
    ItineraryItemType,
)
from travelpulse.models.trip import (
    DEFAULT_COVER_IMAGE,
    DEFAULT_DESTINATION,
    DEFAULT_FOR_WHOM,
    DebtItem,
    Flight,
    Hotel,
    ItineraryItem,
    ShoppingItem,
    TripDocument,
    TripState,
)

__all__ = [
    # Common
    "Currency",
    "DocumentModel",
    "FlightDirection",
    "ItineraryItemType",
    # Trip
    "DEFAULT_COVER_IMAGE",
    "DEFAULT_DESTINATION",
    "DEFAULT_FOR_WHOM",
    "DebtItem",
    "Flight",
    "Hotel",
    "ItineraryItem",
    "ShoppingItem",
    "TripDocument",
    "TripState",
    # Archive
    "ArchivedTrip",
]
