"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Base model for everything persisted as a document.

    Documents use camelCase keys on the wire and snake_case attributes in Python.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Serialize to a JSON-compatible document with wire aliases."""
        return self.model_dump(mode="json", by_alias=True)


class Currency(str, Enum):
    """Currencies supported by the ledger and shopping list."""

    TWD = "TWD"
    JPY = "JPY"
    USD = "USD"


class ItineraryItemType(str, Enum):
    """Kind of itinerary activity."""

    attraction = "attraction"
    food = "food"
    transport = "transport"
    rest = "rest"


class FlightDirection(str, Enum):
    """Outbound or return leg."""

    departure = "departure"
    return_ = "return"
