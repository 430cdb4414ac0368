"""Trip State Store - the in-memory live trip and its mutation entry points."""

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from typing import Any

from travelpulse.models.trip import (
    DEFAULT_COVER_IMAGE,
    DEFAULT_DESTINATION,
    DebtItem,
    Flight,
    Hotel,
    ItineraryItem,
    ShoppingItem,
    TripDocument,
    TripState,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[[TripState], None]


def fresh_trip_state(
    destination: str = DEFAULT_DESTINATION,
    cover_image: str = DEFAULT_COVER_IMAGE,
    today: date | None = None,
) -> TripState:
    """A blank trip starting and ending today."""
    today = today or date.today()
    return TripState(
        destination=destination,
        start_date=today,
        end_date=today,
        cover_image=cover_image,
    )


class TripStateStore:
    """Holds the live TripState.

    Every mutator replaces a whole field (list-valued fields included) and
    notifies subscribers. While `is_read_only` is set, e.g. when an archive is
    being viewed, mutators silently do nothing.
    """

    def __init__(
        self,
        state: TripState | None = None,
        *,
        default_destination: str = DEFAULT_DESTINATION,
        default_cover_image: str = DEFAULT_COVER_IMAGE,
    ) -> None:
        self._state = state.model_copy(deep=True) if state is not None else TripState()
        self._read_only = False
        self._listeners: list[ChangeListener] = []
        self._default_destination = default_destination
        self._default_cover_image = default_cover_image

    @property
    def state(self) -> TripState:
        """The live state. Treat as read-only; use the mutators to change it."""
        return self._state

    @property
    def is_read_only(self) -> bool:
        return self._read_only

    def snapshot(self) -> TripState:
        """Deep copy of the current state."""
        return self._state.model_copy(deep=True)

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)

    def _set(self, **fields: Any) -> None:
        if self._read_only:
            logger.debug("Ignoring mutation of %s while read-only", ", ".join(fields))
            return
        # Validate through the model so callers cannot smuggle in bad values
        updated = TripState.model_validate({**self._state.model_dump(), **fields})
        self._state = updated.model_copy(deep=True)
        self._notify()

    # Scalar fields

    def set_destination(self, destination: str) -> None:
        self._set(destination=destination)

    def set_start_date(self, start_date: date) -> None:
        self._set(start_date=start_date)

    def set_end_date(self, end_date: date) -> None:
        self._set(end_date=end_date)

    def set_cover_image(self, cover_image: str) -> None:
        self._set(cover_image=cover_image)

    # Daily map links

    def set_daily_maps(self, daily_maps: Mapping[date, str]) -> None:
        self._set(daily_maps=dict(daily_maps))

    def set_daily_map(self, day: date, url: str) -> None:
        """Set the map link for one day (replaces the whole mapping)."""
        self._set(daily_maps={**self._state.daily_maps, day: url})

    # Collections - each call replaces the whole list

    def set_debts(self, debts: Iterable[DebtItem]) -> None:
        self._set(debts=list(debts))

    def set_flights(self, flights: Iterable[Flight]) -> None:
        self._set(flights=list(flights))

    def set_hotels(self, hotels: Iterable[Hotel]) -> None:
        self._set(hotels=list(hotels))

    def set_itinerary_items(self, items: Iterable[ItineraryItem]) -> None:
        self._set(itinerary_items=list(items))

    def set_shopping_items(self, items: Iterable[ShoppingItem]) -> None:
        self._set(shopping_items=list(items))

    # Whole-state operations (not gated by read-only)

    def reset(self, today: date | None = None) -> None:
        """Replace everything with a fresh trip and leave read-only mode."""
        self._state = fresh_trip_state(self._default_destination, self._default_cover_image, today)
        self._read_only = False
        self._notify()

    def apply_document(self, document: TripDocument) -> None:
        """Overwrite only the fields present in a loaded document."""
        present = document.present_fields()
        if not present:
            return
        self._state = TripState.model_validate(
            {**self._state.model_dump(), **present}
        ).model_copy(deep=True)
        self._notify()

    def show_snapshot(self, snapshot: TripState) -> None:
        """Display a snapshot in read-only mode.

        Read-only is switched on before the state changes, so subscribers see
        the change already flagged as read-only.
        """
        self._read_only = True
        self._state = snapshot.model_copy(deep=True)
        self._notify()

    def leave_read_only(self) -> None:
        self._read_only = False
