"""Remote-primary store with a local mirror and offline fallback, plus startup selection."""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from travelpulse.config import Settings
from travelpulse.storage.documents import DocumentKey, DocumentStore, StorageError
from travelpulse.storage.local import SqlDocumentStore
from travelpulse.storage.remote import HttpDocumentStore
from travelpulse.utils.logging import StructuredStorageLogger
from travelpulse.utils.metrics import PrometheusStorageMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MirroredDocumentStore:
    """DocumentStore that writes to a primary store and mirrors to a local one.

    - write: primary first, then always the mirror (so an offline session has
      the latest state). Succeeds if at least one copy was stored.
    - read: primary; on error or absence, the mirror.
    - list_collection: primary; on error, the mirror.
    - delete: both; reports failure if the primary delete failed, since the
      document would reappear on the next remote read.
    """

    name = "mirrored"

    def __init__(
        self,
        primary: DocumentStore,
        mirror: DocumentStore,
        log: StructuredStorageLogger | None = None,
        metrics: PrometheusStorageMetrics | None = None,
    ) -> None:
        self.primary = primary
        self.mirror = mirror
        self._log = log or StructuredStorageLogger()
        self._metrics = metrics or PrometheusStorageMetrics()

    async def _timed(
        self, store: DocumentStore, op: str, key: str, call: Callable[[], Awaitable[T]]
    ) -> T:
        started = time.perf_counter()
        try:
            result = await call()
        except StorageError as e:
            latency_ms = (time.perf_counter() - started) * 1000
            self._metrics.record_op(store.name, op, "error", latency_ms)
            self._log.log_operation(store.name, op, key, "error", latency_ms, type(e).__name__)
            raise
        latency_ms = (time.perf_counter() - started) * 1000
        outcome = "absent" if result is None else "success"
        self._metrics.record_op(store.name, op, outcome, latency_ms)
        self._log.log_operation(store.name, op, key, outcome, latency_ms)
        return result

    async def read(self, key: DocumentKey) -> dict[str, Any] | None:
        """Read from the primary, falling back to the mirror."""
        try:
            document = await self._timed(
                self.primary, "read", str(key), lambda: self.primary.read(key)
            )
        except StorageError as e:
            self._log.log_fallback("read", str(key), type(e).__name__)
            self._metrics.inc_fallback("read")
            return await self.mirror.read(key)

        if document is not None:
            return document
        return await self.mirror.read(key)

    async def write(self, key: DocumentKey, document: dict[str, Any]) -> bool:
        """Write to the primary and mirror locally."""
        primary_ok = False
        try:
            primary_ok = await self._timed(
                self.primary, "write", str(key), lambda: self.primary.write(key, document)
            )
        except StorageError as e:
            self._log.log_fallback("write", str(key), type(e).__name__)
            self._metrics.inc_fallback("write")

        try:
            mirror_ok = await self._timed(
                self.mirror, "write", str(key), lambda: self.mirror.write(key, document)
            )
        except StorageError:
            if not primary_ok:
                raise
            mirror_ok = False
        return primary_ok or mirror_ok

    async def list_collection(self, collection: str) -> list[dict[str, Any]]:
        """List from the primary, falling back to the mirror."""
        try:
            return await self._timed(
                self.primary, "list", collection, lambda: self.primary.list_collection(collection)
            )
        except StorageError as e:
            self._log.log_fallback("list", collection, type(e).__name__)
            self._metrics.inc_fallback("list")
            return await self.mirror.list_collection(collection)

    async def delete(self, key: DocumentKey) -> bool:
        """Delete from both stores."""
        primary_ok = True
        try:
            await self._timed(self.primary, "delete", str(key), lambda: self.primary.delete(key))
        except StorageError:
            primary_ok = False

        try:
            await self.mirror.delete(key)
        except StorageError:
            logger.warning("Mirror delete failed for %s", key)

        return primary_ok

    async def close(self) -> None:
        """Close both stores."""
        await self.primary.close()
        await self.mirror.close()


async def open_document_store(settings: Settings) -> DocumentStore:
    """Select the document store once at process start.

    Unconfigured or unreachable remote -> local cache only. Otherwise the
    remote store is primary with the local cache as mirror and fallback.
    """
    local = SqlDocumentStore.from_url(settings.local_store_url)

    if not settings.remote_configured:
        logger.info("Remote store not configured; using local cache only")
        return local

    remote = HttpDocumentStore(
        base_url=settings.remote_store_url or "",
        token=settings.remote_store_token,
        timeout=settings.remote_timeout_seconds,
    )
    if not await remote.ping():
        logger.warning("Remote store unreachable at startup; using local cache only")
        await remote.close()
        return local

    return MirroredDocumentStore(primary=remote, mirror=local)
