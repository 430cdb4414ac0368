"""Archive models - immutable snapshots of past trips."""

from datetime import date

from pydantic import ConfigDict

from travelpulse.models.common import DocumentModel
from travelpulse.models.trip import TripState


class ArchivedTrip(DocumentModel):
    """Timestamped snapshot of a TripState.

    Display fields are duplicated from `data` so list views can render without
    touching the full payload. Instances are frozen; `data` is a value copy that
    never aliases the live trip.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: int  # epoch milliseconds
    destination: str
    start_date: date
    end_date: date
    cover_image: str
    data: TripState

    @classmethod
    def from_state(cls, archive_id: str, timestamp: int, state: TripState) -> "ArchivedTrip":
        """Build an archive entry from a deep copy of `state`."""
        snapshot = state.model_copy(deep=True)
        return cls(
            id=archive_id,
            timestamp=timestamp,
            destination=snapshot.destination,
            start_date=snapshot.start_date,
            end_date=snapshot.end_date,
            cover_image=snapshot.cover_image,
            data=snapshot,
        )
