"""Application session - the explicit state object behind every user operation."""

import logging
import uuid
from datetime import date
from typing import Any

from travelpulse.config import Settings
from travelpulse.features import ledger, shopping
from travelpulse.models.archive import ArchivedTrip
from travelpulse.models.common import Currency
from travelpulse.models.trip import DebtItem, ItineraryItem, ShoppingItem, TripState
from travelpulse.scheduling import engine
from travelpulse.state.archive import ArchiveManager, newest_first
from travelpulse.state.store import TripStateStore
from travelpulse.state.synchronizer import PersistenceSynchronizer
from travelpulse.storage.documents import DocumentKey, DocumentStore

logger = logging.getLogger(__name__)

# Field name -> store mutator for top-level updates
_MUTATORS = {
    "destination": "set_destination",
    "start_date": "set_start_date",
    "end_date": "set_end_date",
    "cover_image": "set_cover_image",
    "daily_maps": "set_daily_maps",
    "debts": "set_debts",
    "flights": "set_flights",
    "hotels": "set_hotels",
    "itinerary_items": "set_itinerary_items",
    "shopping_items": "set_shopping_items",
}


class TripSession:
    """Bundles the trip store, synchronizer and archive manager.

    One instance per process (or per test). Nothing here is global.
    """

    def __init__(
        self,
        store: TripStateStore,
        synchronizer: PersistenceSynchronizer,
        archives: ArchiveManager,
        *,
        flush_on_shutdown: bool = True,
    ) -> None:
        self.store = store
        self.synchronizer = synchronizer
        self.archives = archives
        self._flush_on_shutdown = flush_on_shutdown

    @classmethod
    def create(
        cls,
        documents: DocumentStore,
        settings: Settings,
        initial_state: TripState | None = None,
    ) -> "TripSession":
        """Wire a session over an already selected document store."""
        store = TripStateStore(
            initial_state,
            default_destination=settings.default_destination,
            default_cover_image=settings.default_cover_image,
        )
        synchronizer = PersistenceSynchronizer(
            store,
            documents,
            DocumentKey(settings.trip_collection, settings.trip_document_id),
            debounce_seconds=settings.save_debounce_ms / 1000,
        )
        archives = ArchiveManager(documents, collection=settings.archive_collection)
        return cls(store, synchronizer, archives, flush_on_shutdown=settings.flush_on_shutdown)

    @property
    def state(self) -> TripState:
        return self.store.state

    @property
    def is_read_only(self) -> bool:
        return self.store.is_read_only

    async def load_current_trip(self) -> bool:
        """Load the live trip (also used to return from viewing an archive)."""
        return await self.synchronizer.load_current_trip()

    def reset_trip(self, today: date | None = None) -> None:
        """Replace the live trip with a blank one. Confirmation happens at the caller."""
        self.store.reset(today)

    def update_trip(self, changes: dict[str, Any]) -> None:
        """Apply top-level field changes through the store's mutators."""
        for field, value in changes.items():
            mutator = _MUTATORS.get(field)
            if mutator is None:
                raise KeyError(f"Unknown trip field: {field}")
            getattr(self.store, mutator)(value)

    def set_daily_map(self, day: date, url: str) -> None:
        self.store.set_daily_map(day, url)

    # Itinerary

    def add_itinerary_item(self, **fields: Any) -> ItineraryItem | None:
        """Quick-add an item with default slot values. Returns None while read-only."""
        if self.store.is_read_only:
            return None
        item = engine.new_itinerary_item(self.state.start_date, **fields)
        self.store.set_itinerary_items([*self.state.itinerary_items, item])
        return item

    def update_itinerary_item(self, item_id: str, changes: dict[str, Any]) -> ItineraryItem | None:
        """Merge `changes` into one item. Returns the updated item, or None if absent."""
        current = next((i for i in self.state.itinerary_items if i.id == item_id), None)
        if current is None or self.store.is_read_only:
            return None
        updated = ItineraryItem.model_validate({**current.model_dump(), **changes, "id": item_id})
        self.store.set_itinerary_items(
            [updated if i.id == item_id else i for i in self.state.itinerary_items]
        )
        return updated

    def remove_itinerary_item(self, item_id: str) -> None:
        """Delete one item. Shopping links to it are left dangling on purpose."""
        self.store.set_itinerary_items(i for i in self.state.itinerary_items if i.id != item_id)

    def reorder_itinerary(self, day: date, from_index: int, to_index: int) -> list[ItineraryItem]:
        """Reorder one day and cascade start times. Returns that day's items.

        Raises:
            ScheduleError: If an index is out of range
        """
        reordered = engine.reorder_day(self.state.itinerary_items, day, from_index, to_index)
        self.store.set_itinerary_items(reordered)
        return engine.items_for_day(self.state.itinerary_items, day)

    def move_itinerary_item(self, item_id: str, over_id: str) -> list[ItineraryItem]:
        """Drag one item onto another's position on the same day.

        Raises:
            ScheduleError: If an id is unknown
            CrossDateReorderError: If the items are on different dates
        """
        reordered = engine.move_item(self.state.itinerary_items, item_id, over_id)
        self.store.set_itinerary_items(reordered)
        moved = next(i for i in self.state.itinerary_items if i.id == item_id)
        return engine.items_for_day(self.state.itinerary_items, moved.date)

    # Ledger

    def save_debt(
        self,
        description: str,
        amount: float,
        currency: Currency | str,
        payer: str,
        paid_on: date,
        debt_id: str | None = None,
    ) -> DebtItem | None:
        """Add a debt, or replace the one with `debt_id`. Returns None while read-only."""
        if self.store.is_read_only:
            return None
        debts = ledger.upsert_debt(
            self.state.debts, description, amount, currency, payer, paid_on, debt_id
        )
        self.store.set_debts(debts)
        if debt_id is None:
            return debts[-1]
        return next(d for d in debts if d.id == debt_id)

    def remove_debt(self, debt_id: str) -> None:
        self.store.set_debts(ledger.remove_debt(self.state.debts, debt_id))

    # Shopping

    def save_shopping_item(
        self, fields: dict[str, Any], item_id: str | None = None
    ) -> ShoppingItem | None:
        """Add an entry, or replace the one with `item_id`. Returns None while read-only."""
        if self.store.is_read_only:
            return None
        entry = ShoppingItem.model_validate({**fields, "id": item_id or uuid.uuid4().hex})
        self.store.set_shopping_items(
            shopping.upsert_shopping_item(self.state.shopping_items, entry)
        )
        return entry

    def toggle_shopping_item(self, item_id: str) -> None:
        self.store.set_shopping_items(shopping.toggle_checked(self.state.shopping_items, item_id))

    def remove_shopping_item(self, item_id: str) -> None:
        self.store.set_shopping_items(
            shopping.remove_shopping_item(self.state.shopping_items, item_id)
        )

    # Archives

    async def archive_current_trip(self) -> ArchivedTrip | None:
        """Archive the live trip. Returns None while an archive is being viewed."""
        if self.store.is_read_only:
            return None
        return await self.archives.archive(self.state)

    async def list_archives(self) -> list[ArchivedTrip]:
        """Archives, newest first."""
        return newest_first(await self.archives.list())

    async def view_archive(self, archive_id: str) -> ArchivedTrip | None:
        """Show an archive read-only. Returns None if it does not exist.

        A pending live write is flushed first so no live edit is lost.
        """
        archive = await self.archives.get(archive_id)
        if archive is None:
            return None
        if not self.store.is_read_only:
            await self.synchronizer.flush()
        self.archives.view(archive, self.store)
        return archive

    async def delete_archive(self, archive_id: str) -> bool:
        """Delete an archive. Confirmation happens at the caller."""
        return await self.archives.delete(archive_id)

    async def close(self) -> None:
        await self.synchronizer.close(flush=self._flush_on_shutdown)
