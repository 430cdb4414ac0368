"""Archive Manager - immutable snapshots of the trip and read-only viewing."""

import logging
import time
from collections.abc import Callable, Iterable

from pydantic import ValidationError

from travelpulse.models.archive import ArchivedTrip
from travelpulse.models.trip import TripState
from travelpulse.state.store import TripStateStore
from travelpulse.storage.documents import DocumentKey, DocumentStore, StorageError

logger = logging.getLogger(__name__)


def newest_first(archives: Iterable[ArchivedTrip]) -> list[ArchivedTrip]:
    """Display order for archive lists."""
    return sorted(archives, key=lambda archive: archive.timestamp, reverse=True)


class ArchiveManager:
    """Creates, lists, deletes and views archived trips.

    Storage failures are logged and turned into no-ops; nothing here raises
    StorageError to the caller.
    """

    def __init__(
        self,
        documents: DocumentStore,
        collection: str = "archives",
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize archive manager.

        Args:
            documents: Document store holding the archive collection
            collection: Archive collection name
            clock: Epoch-milliseconds source (for tests)
        """
        self._documents = documents
        self._collection = collection
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._last_timestamp = 0

    def _key(self, archive_id: str) -> DocumentKey:
        return DocumentKey(self._collection, archive_id)

    def _next_timestamp(self) -> int:
        # Ids derive from the timestamp, so keep them strictly increasing
        timestamp = max(self._clock(), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        return timestamp

    async def archive(self, state: TripState) -> ArchivedTrip:
        """Snapshot `state` into a new archive entry and persist it.

        The returned entry holds a deep copy; later changes to `state` do not
        affect it.
        """
        timestamp = self._next_timestamp()
        archived = ArchivedTrip.from_state(f"archive_{timestamp}", timestamp, state)

        try:
            stored = await self._documents.write(self._key(archived.id), archived.to_document())
        except StorageError as e:
            logger.error(f"Archive write failed for {archived.id}: {type(e).__name__}")
        else:
            if stored:
                logger.info(f"Archived trip {archived.destination!r} as {archived.id}")
        return archived

    async def list(self) -> list[ArchivedTrip]:
        """All archives in storage order; malformed entries are skipped."""
        try:
            documents = await self._documents.list_collection(self._collection)
        except StorageError as e:
            logger.warning(f"Archive list failed: {type(e).__name__}")
            return []

        archives = []
        for document in documents:
            try:
                archives.append(ArchivedTrip.model_validate(document))
            except ValidationError:
                logger.warning(f"Skipping malformed archive {document.get('id', '?')!r}")
        return archives

    async def get(self, archive_id: str) -> ArchivedTrip | None:
        """Look up one archive by id."""
        try:
            document = await self._documents.read(self._key(archive_id))
        except StorageError as e:
            logger.warning(f"Archive read failed for {archive_id}: {type(e).__name__}")
            return None
        if document is None:
            return None
        try:
            return ArchivedTrip.model_validate(document)
        except ValidationError:
            logger.warning(f"Archive {archive_id} is malformed")
            return None

    async def delete(self, archive_id: str) -> bool:
        """Delete one archive. Deleting an absent id is not an error."""
        try:
            deleted = await self._documents.delete(self._key(archive_id))
        except StorageError as e:
            logger.error(f"Archive delete failed for {archive_id}: {type(e).__name__}")
            return False
        return deleted

    def view(self, archive: ArchivedTrip, store: TripStateStore) -> None:
        """Show an archive read-only in the trip store.

        Nothing is written: the store is flagged read-only before the snapshot
        is applied, so the live trip document is never touched.
        """
        store.show_snapshot(archive.data)
