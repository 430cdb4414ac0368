"""FastAPI dependencies."""

from fastapi import HTTPException, Request, status

from travelpulse.state.session import TripSession


def get_trip_session(request: Request) -> TripSession:
    """The process-wide TripSession created by the app lifespan."""
    session: TripSession | None = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Trip session not ready"
        )
    return session


def require_confirmation(confirm: bool) -> None:
    """Destructive operations must be explicitly confirmed by the caller."""
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            detail="Destructive action requires confirm=true",
        )
