"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from travelpulse.api.routes.archives import router as archives_router
from travelpulse.api.routes.health import router as health_router
from travelpulse.api.routes.itinerary import router as itinerary_router
from travelpulse.api.routes.ledger import router as ledger_router
from travelpulse.api.routes.metrics import router as metrics_router
from travelpulse.api.routes.shopping import router as shopping_router
from travelpulse.api.routes.trip import router as trip_router
from travelpulse.config import Settings, get_settings
from travelpulse.state.session import TripSession
from travelpulse.storage.documents import DocumentStore
from travelpulse.storage.mirrored import open_document_store


def create_app(
    settings: Settings | None = None, document_store: DocumentStore | None = None
) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings override (defaults to environment settings)
        document_store: Store override; when omitted the store is selected at
            startup from settings
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        resolved = settings or get_settings()
        documents = document_store or await open_document_store(resolved)
        session = TripSession.create(documents, resolved)
        await session.load_current_trip()

        app.state.documents = documents
        app.state.session = session
        try:
            yield
        finally:
            await session.close()
            if document_store is None:
                await documents.close()
            app.state.session = None

    app = FastAPI(title="TravelPulse API", version="0.1.0", lifespan=lifespan)

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(trip_router)
    app.include_router(itinerary_router)
    app.include_router(ledger_router)
    app.include_router(shopping_router)
    app.include_router(archives_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "TravelPulse API", "version": "0.1.0"}

    return app


app = create_app()
