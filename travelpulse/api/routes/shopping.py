"""Shopping list endpoints - filtered view, linkable slots and entry edits."""

from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from travelpulse.api.deps import get_trip_session
from travelpulse.api.schemas import ShoppingItemRequest, ShoppingResponse, TripResponse
from travelpulse.features import shopping
from travelpulse.state.session import TripSession

router = APIRouter(prefix="/trip/shopping", tags=["shopping"])

SessionDep = Annotated[TripSession, Depends(get_trip_session)]


def _require_entry(session: TripSession, item_id: str) -> None:
    if not any(item.id == item_id for item in session.state.shopping_items):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Shopping item not found"
        )


@router.get("", response_model=ShoppingResponse)
async def get_shopping(
    session: SessionDep, buyer: str = Query(shopping.ALL_BUYERS)
) -> ShoppingResponse:
    """Shopping list filtered by recipient, ordered by linked itinerary slot."""
    state = session.state
    filtered = shopping.filter_by_buyer(state.shopping_items, buyer)
    ordered = shopping.sort_for_display(filtered, state.itinerary_items)
    return ShoppingResponse(
        buyers=shopping.buyers(state.shopping_items),
        items=[item.to_document() for item in ordered],
        checked_totals=shopping.checked_totals_by_currency(filtered),
    )


@router.get("/linkable", response_model=list[dict[str, Any]])
async def get_linkable(session: SessionDep, day: date | None = None) -> list[dict[str, Any]]:
    """Itinerary items an entry can be linked to, optionally for one day."""
    items = shopping.linkable_itinerary_items(session.state.itinerary_items, day)
    return [item.to_document() for item in items]


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def add_entry(body: ShoppingItemRequest, session: SessionDep) -> TripResponse:
    session.save_shopping_item(body.model_dump())
    return TripResponse.from_session(session)


@router.put("/{item_id}", response_model=TripResponse)
async def replace_entry(
    item_id: str, body: ShoppingItemRequest, session: SessionDep
) -> TripResponse:
    """Replace one entry entirely."""
    _require_entry(session, item_id)
    session.save_shopping_item(body.model_dump(), item_id=item_id)
    return TripResponse.from_session(session)


@router.post("/{item_id}/toggle", response_model=TripResponse)
async def toggle_entry(item_id: str, session: SessionDep) -> TripResponse:
    """Flip the purchased flag."""
    _require_entry(session, item_id)
    session.toggle_shopping_item(item_id)
    return TripResponse.from_session(session)


@router.delete("/{item_id}", response_model=TripResponse)
async def delete_entry(item_id: str, session: SessionDep) -> TripResponse:
    session.remove_shopping_item(item_id)
    return TripResponse.from_session(session)
