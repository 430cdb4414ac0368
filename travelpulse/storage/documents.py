"""Document store protocol, keys, errors and payload sanitization."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


class _Missing:
    """Marker for a field that has no value at all (distinct from an explicit None)."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class StorageError(Exception):
    """Base error raised by document stores."""

    pass


class StorageUnavailableError(StorageError):
    """Store could not be reached or rejected the request."""

    pass


class MalformedDocumentError(StorageError):
    """Persisted payload could not be parsed."""

    pass


@dataclass(frozen=True)
class DocumentKey:
    """Address of one document: a collection plus a document id."""

    collection: str
    document_id: str

    def __str__(self) -> str:
        return f"{self.collection}/{self.document_id}"

    @classmethod
    def parse(cls, value: str) -> "DocumentKey":
        """Parse the `collection/document_id` string form."""
        collection, sep, document_id = value.partition("/")
        if not sep or not collection or not document_id:
            raise ValueError(f"Invalid document key: {value!r}")
        return cls(collection=collection, document_id=document_id)


def sanitize_document(value: Any) -> Any:
    """Recursively drop MISSING values from a plain document tree.

    Mappings lose entries whose value is MISSING, sequences lose MISSING
    elements, and everything else (None included) passes through unchanged.
    The input is assumed to be a tree without back-references.
    """
    if isinstance(value, Mapping):
        return {k: sanitize_document(v) for k, v in value.items() if v is not MISSING}
    if isinstance(value, (list, tuple)):
        return [sanitize_document(v) for v in value if v is not MISSING]
    return value


class DocumentStore(Protocol):
    """Uniform keyed-document storage."""

    name: str

    async def read(self, key: DocumentKey) -> dict[str, Any] | None:
        """Read one document.

        Args:
            key: Document key

        Returns:
            Document, or None if absent
        """
        ...

    async def write(self, key: DocumentKey, document: dict[str, Any]) -> bool:
        """Replace one document entirely.

        Args:
            key: Document key
            document: Full payload; sanitized before storing

        Returns:
            True if the document was stored
        """
        ...

    async def list_collection(self, collection: str) -> list[dict[str, Any]]:
        """List every document in a collection, in no particular order."""
        ...

    async def delete(self, key: DocumentKey) -> bool:
        """Delete one document; deleting an absent key succeeds."""
        ...

    async def close(self) -> None:
        """Release any held resources."""
        ...
