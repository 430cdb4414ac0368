"""In-memory implementation of the DocumentStore protocol."""

import json
from typing import Any

from travelpulse.storage.documents import (
    DocumentKey,
    MalformedDocumentError,
    StorageUnavailableError,
    sanitize_document,
)


class InMemoryDocumentStore:
    """Dict-backed document store.

    Documents are held as JSON text, so callers never share objects with the
    store. Setting `available = False` makes every call raise
    StorageUnavailableError, which simulates an unreachable backend.
    """

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self.available = True
        self.write_log: list[tuple[DocumentKey, dict[str, Any]]] = []
        self._documents: dict[DocumentKey, str] = {}

    def _check_available(self) -> None:
        if not self.available:
            raise StorageUnavailableError(f"{self.name} store unavailable")

    async def read(self, key: DocumentKey) -> dict[str, Any] | None:
        """Read one document."""
        self._check_available()
        body = self._documents.get(key)
        if body is None:
            return None
        try:
            result: dict[str, Any] = json.loads(body)
        except json.JSONDecodeError as e:
            raise MalformedDocumentError(f"Unparseable document at {key}") from e
        return result

    async def write(self, key: DocumentKey, document: dict[str, Any]) -> bool:
        """Replace one document."""
        self._check_available()
        sanitized = sanitize_document(document)
        self._documents[key] = json.dumps(sanitized, ensure_ascii=False)
        self.write_log.append((key, json.loads(self._documents[key])))
        return True

    async def list_collection(self, collection: str) -> list[dict[str, Any]]:
        """List documents in a collection."""
        self._check_available()
        documents = []
        for key, body in self._documents.items():
            if key.collection != collection:
                continue
            try:
                documents.append(json.loads(body))
            except json.JSONDecodeError:
                continue
        return documents

    async def delete(self, key: DocumentKey) -> bool:
        """Delete one document."""
        self._check_available()
        self._documents.pop(key, None)
        return True

    async def close(self) -> None:
        """Nothing to release."""
        return None

    def put_raw(self, key: DocumentKey, body: str) -> None:
        """Store raw text under a key (used to seed corrupted payloads)."""
        self._documents[key] = body
