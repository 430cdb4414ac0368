"""Live trip endpoints - read, patch, load, reset, daily maps and calendar."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from travelpulse.api.deps import get_trip_session, require_confirmation
from travelpulse.api.schemas import CalendarResponse, DailyMapRequest, TripResponse
from travelpulse.features import calendar
from travelpulse.models.trip import TripDocument
from travelpulse.state.session import TripSession

router = APIRouter(prefix="/trip", tags=["trip"])

SessionDep = Annotated[TripSession, Depends(get_trip_session)]


@router.get("", response_model=TripResponse)
async def get_trip(session: SessionDep) -> TripResponse:
    """Current trip (live, or an archive when viewing read-only)."""
    return TripResponse.from_session(session)


@router.patch("", response_model=TripResponse)
async def patch_trip(patch: TripDocument, session: SessionDep) -> TripResponse:
    """Replace the given top-level fields.

    List-valued fields are replaced wholesale. While read-only the request
    succeeds but changes nothing.
    """
    changes = {
        name: getattr(patch, name)
        for name in patch.model_fields_set
        if getattr(patch, name) is not None
    }
    session.update_trip(changes)
    return TripResponse.from_session(session)


@router.post("/load", response_model=TripResponse)
async def load_trip(session: SessionDep) -> TripResponse:
    """Reload the live trip; also leaves archive viewing."""
    await session.load_current_trip()
    return TripResponse.from_session(session)


@router.post("/reset", response_model=TripResponse)
async def reset_trip(session: SessionDep, confirm: bool = Query(False)) -> TripResponse:
    """Replace the live trip with a blank one."""
    require_confirmation(confirm)
    session.reset_trip()
    return TripResponse.from_session(session)


@router.put("/daily-maps/{day}", response_model=TripResponse)
async def put_daily_map(day: date, body: DailyMapRequest, session: SessionDep) -> TripResponse:
    """Set the map link for one day."""
    session.set_daily_map(day, body.url)
    return TripResponse.from_session(session)


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(session: SessionDep) -> CalendarResponse:
    """Trip dates, embeddable map links per day and the booked hotels."""
    state = session.state
    return CalendarResponse(
        dates=calendar.trip_dates(state.start_date, state.end_date),
        daily_maps={
            day: calendar.embed_map_url(url) for day, url in state.daily_maps.items() if url
        },
        selected_hotels=[hotel.to_document() for hotel in calendar.selected_hotels(state.hotels)],
    )
