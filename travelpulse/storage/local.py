"""Local on-device document cache backed by SQLite through SQLAlchemy."""

import json
import logging
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Text, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

from travelpulse.storage.documents import (
    DocumentKey,
    MalformedDocumentError,
    StorageUnavailableError,
    sanitize_document,
)

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class DocumentRow(Base):
    """One cached document, stored as JSON text."""

    __tablename__ = "document"

    collection: Mapped[str] = mapped_column(Text, primary_key=True)
    document_id: Mapped[str] = mapped_column(Text, primary_key=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class SqlDocumentStore:
    """SQL implementation of DocumentStore, used as the on-device cache."""

    name = "local"

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory = async_sessionmaker(engine, expire_on_commit=False)
        self._schema_ready = False

    @classmethod
    def from_url(cls, database_url: str) -> "SqlDocumentStore":
        """Create a store from an async SQLAlchemy URL (e.g. sqlite+aiosqlite:///cache.db)."""
        return cls(create_async_engine(database_url, echo=False))

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._schema_ready = True

    async def read(self, key: DocumentKey) -> dict[str, Any] | None:
        """Read one document."""
        try:
            await self._ensure_schema()
            async with self._session_factory() as session:
                row = await session.get(DocumentRow, (key.collection, key.document_id))
                body = row.body if row is not None else None
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Local read failed for {key}") from e

        if body is None:
            return None
        try:
            document: dict[str, Any] = json.loads(body)
        except json.JSONDecodeError as e:
            raise MalformedDocumentError(f"Unparseable document at {key}") from e
        return document

    async def write(self, key: DocumentKey, document: dict[str, Any]) -> bool:
        """Replace one document."""
        body = json.dumps(sanitize_document(document), ensure_ascii=False)
        try:
            await self._ensure_schema()
            async with self._session_factory() as session:
                row = await session.get(DocumentRow, (key.collection, key.document_id))
                if row is None:
                    session.add(
                        DocumentRow(
                            collection=key.collection, document_id=key.document_id, body=body
                        )
                    )
                else:
                    row.body = body
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Local write failed for {key}") from e
        return True

    async def list_collection(self, collection: str) -> list[dict[str, Any]]:
        """List documents in a collection, skipping unparseable rows."""
        try:
            await self._ensure_schema()
            async with self._session_factory() as session:
                result = await session.execute(
                    select(DocumentRow.document_id, DocumentRow.body).where(
                        DocumentRow.collection == collection
                    )
                )
                rows = result.all()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Local list failed for {collection}") from e

        documents = []
        for document_id, body in rows:
            try:
                documents.append(json.loads(body))
            except json.JSONDecodeError:
                logger.warning("Skipping unparseable cached document %s/%s", collection, document_id)
        return documents

    async def delete(self, key: DocumentKey) -> bool:
        """Delete one document."""
        try:
            await self._ensure_schema()
            async with self._session_factory() as session:
                await session.execute(
                    delete(DocumentRow).where(
                        DocumentRow.collection == key.collection,
                        DocumentRow.document_id == key.document_id,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Local delete failed for {key}") from e
        return True

    async def close(self) -> None:
        """Dispose of the engine's connection pool."""
        await self._engine.dispose()
