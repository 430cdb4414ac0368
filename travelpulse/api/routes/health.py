"""Health check endpoints.

- /health: liveness, always ok
- /healthz: which store mode was selected at startup and whether an archive
  is being viewed
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from travelpulse.api.deps import get_trip_session
from travelpulse.state.session import TripSession

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz")
async def healthz(
    request: Request, session: Annotated[TripSession, Depends(get_trip_session)]
) -> dict[str, Any]:
    """Component status.

    Local-only mode is a normal steady state, not a degradation.
    """
    documents = getattr(request.app.state, "documents", None)
    return {
        "status": "ok",
        "components": {
            "store": getattr(documents, "name", "unknown"),
            "read_only": session.is_read_only,
            "pending_write": session.synchronizer.has_pending_write,
        },
    }
