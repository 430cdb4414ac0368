"""Persistence Synchronizer - debounced write-through of the live trip.

Every mutation of the TripStateStore (outside initial load and read-only mode)
restarts a fixed delay. When the delay elapses with no further mutation, the
full current state is written as one document, replacing whatever was stored
before. Restarting the delay is the only cancellation: once a write has left
the delay it runs to completion, and a newer mutation simply schedules the
next one (last write wins).
"""

import asyncio
import logging

from pydantic import ValidationError

from travelpulse.models.trip import TripDocument, TripState
from travelpulse.state.store import TripStateStore
from travelpulse.storage.documents import DocumentKey, DocumentStore, StorageError
from travelpulse.utils.metrics import PrometheusStorageMetrics

logger = logging.getLogger(__name__)


class PersistenceSynchronizer:
    """Keeps the durable trip document eventually consistent with the store."""

    def __init__(
        self,
        store: TripStateStore,
        documents: DocumentStore,
        key: DocumentKey,
        *,
        debounce_seconds: float = 1.0,
        fallback: DocumentStore | None = None,
        metrics: PrometheusStorageMetrics | None = None,
    ) -> None:
        """Initialize synchronizer and subscribe to store changes.

        Args:
            store: Live trip state
            documents: Primary document store for the live trip
            key: Fixed key of the live trip document
            debounce_seconds: Quiet period before a write-through
            fallback: Store to write to when `documents` fails (local cache)
            metrics: Optional metrics sink
        """
        self._store = store
        self._documents = documents
        self._fallback = fallback
        self._key = key
        self._delay = debounce_seconds
        self._metrics = metrics or PrometheusStorageMetrics()
        self._loading = False
        self._pending: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        # Live-trip writes run one at a time so the newest state is always written last
        self._write_lock = asyncio.Lock()
        self._unsubscribe = store.subscribe(self._on_change)

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def has_pending_write(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def _on_change(self, state: TripState) -> None:
        if self._loading or self._store.is_read_only:
            return
        self.schedule()

    def schedule(self) -> None:
        """(Re)start the debounce delay."""
        pending = self._pending
        if pending is not None and not pending.done():
            pending.cancel()
            self._metrics.inc_coalesced()
        self._pending = asyncio.get_running_loop().create_task(self._delayed_write())

    def cancel_pending(self) -> None:
        """Drop a scheduled write that has not started yet."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _delayed_write(self) -> None:
        await asyncio.sleep(self._delay)
        task = asyncio.current_task()
        # Detach: from here on a new mutation schedules a fresh write instead of cancelling this one
        if self._pending is task:
            self._pending = None
        if task is not None:
            self._in_flight.add(task)
        try:
            await self.write_now()
        finally:
            if task is not None:
                self._in_flight.discard(task)

    async def write_now(self) -> bool:
        """Write the full current state immediately.

        Waits for any write already running; the state is captured once this
        write holds the lock, so it is never older than the one before it.

        Returns:
            True if at least one durable copy was stored
        """
        async with self._write_lock:
            return await self._write_locked()

    async def _write_locked(self) -> bool:
        if self._store.is_read_only:
            logger.debug("Skipping live trip write while read-only")
            return False

        payload = self._store.state.to_document()
        try:
            await self._documents.write(self._key, payload)
        except StorageError as e:
            logger.error(f"Live trip write failed: {type(e).__name__}")
            if self._fallback is None:
                self._metrics.inc_sync_write("failed")
                return False
            try:
                await self._fallback.write(self._key, payload)
            except StorageError as fallback_error:
                logger.error(f"Fallback write failed: {type(fallback_error).__name__}")
                self._metrics.inc_sync_write("failed")
                return False
            self._metrics.inc_sync_write("fallback")
            return True

        self._metrics.inc_sync_write("success")
        return True

    async def flush(self) -> None:
        """Wait for writes already in flight, then write a pending change now."""
        had_pending = self.has_pending_write
        self.cancel_pending()
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)
        if had_pending:
            await self.write_now()

    async def load_current_trip(self) -> bool:
        """Load the live trip through the store's fallback chain.

        Leaves read-only mode first. Absent, unreadable or invalid documents
        leave the in-memory state untouched.

        Returns:
            True if a document was found and applied
        """
        self._loading = True
        try:
            self.cancel_pending()
            self._store.leave_read_only()
            document = await self._read_document()
            if document is None:
                logger.info("No stored trip found; keeping in-memory defaults")
                return False
            self._store.apply_document(document)
            return True
        finally:
            self._loading = False

    async def _read_document(self) -> TripDocument | None:
        try:
            raw = await self._documents.read(self._key)
        except StorageError as e:
            logger.warning(f"Live trip read failed: {type(e).__name__}")
            raw = None

        if raw is None and self._fallback is not None:
            try:
                raw = await self._fallback.read(self._key)
            except StorageError as e:
                logger.warning(f"Fallback read failed: {type(e).__name__}")
                raw = None

        if raw is None:
            return None
        try:
            return TripDocument.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Stored trip is malformed; treating as absent ({e.error_count()} errors)")
            return None

    async def close(self, flush: bool = True) -> None:
        """Stop listening; optionally flush a pending write first."""
        if flush:
            await self.flush()
        else:
            self.cancel_pending()
            if self._in_flight:
                await asyncio.gather(*self._in_flight, return_exceptions=True)
        self._unsubscribe()
