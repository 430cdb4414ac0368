"""Itinerary endpoints - quick add, edit, delete and drag reordering."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from travelpulse.api.deps import get_trip_session
from travelpulse.api.schemas import (
    DayItineraryResponse,
    ItineraryItemRequest,
    MoveRequest,
    ReorderRequest,
    TripResponse,
)
from travelpulse.features import shopping
from travelpulse.scheduling.engine import CrossDateReorderError, ScheduleError, items_for_day
from travelpulse.state.session import TripSession

router = APIRouter(prefix="/trip/itinerary", tags=["itinerary"])

SessionDep = Annotated[TripSession, Depends(get_trip_session)]


def _day_response(day: date, session: TripSession) -> DayItineraryResponse:
    state = session.state
    day_items = items_for_day(state.itinerary_items, day)
    linked = {
        item.id: [
            entry.to_document()
            for entry in shopping.items_for_itinerary_item(state.shopping_items, item.id)
        ]
        for item in day_items
    }
    return DayItineraryResponse(
        date=day,
        items=[item.to_document() for item in day_items],
        shopping={item_id: entries for item_id, entries in linked.items() if entries},
    )


@router.get("/{day}", response_model=DayItineraryResponse)
async def get_day(day: date, session: SessionDep) -> DayItineraryResponse:
    """One day's items in display order."""
    return _day_response(day, session)


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def add_item(body: ItineraryItemRequest, session: SessionDep) -> TripResponse:
    """Quick-add an item; blanks get the default slot values."""
    fields = body.model_dump(exclude_none=True)
    if "type" in fields:
        fields["item_type"] = fields.pop("type")
    session.add_itinerary_item(**fields)
    return TripResponse.from_session(session)


@router.put("/{item_id}", response_model=TripResponse)
async def update_item(item_id: str, body: ItineraryItemRequest, session: SessionDep) -> TripResponse:
    """Merge the given fields into one item."""
    if not any(i.id == item_id for i in session.state.itinerary_items):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary item not found")
    session.update_itinerary_item(item_id, body.model_dump(exclude_none=True))
    return TripResponse.from_session(session)


@router.delete("/{item_id}", response_model=TripResponse)
async def delete_item(item_id: str, session: SessionDep) -> TripResponse:
    """Delete one item; linked shopping entries become unlinked."""
    session.remove_itinerary_item(item_id)
    return TripResponse.from_session(session)


@router.post("/reorder", response_model=DayItineraryResponse)
async def reorder(body: ReorderRequest, session: SessionDep) -> DayItineraryResponse:
    """Move an item within a day by index and cascade start times."""
    try:
        session.reorder_itinerary(body.date, body.from_index, body.to_index)
    except ScheduleError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _day_response(body.date, session)


@router.post("/move", response_model=DayItineraryResponse)
async def move(body: MoveRequest, session: SessionDep) -> DayItineraryResponse:
    """Drag one item onto another's position; both must be on the same day."""
    try:
        day_items = session.move_itinerary_item(body.item_id, body.over_id)
    except CrossDateReorderError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ScheduleError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _day_response(day_items[0].date, session)
