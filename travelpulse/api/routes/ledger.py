"""Shared-expense endpoints - totals and debt edits."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from travelpulse.api.deps import get_trip_session
from travelpulse.api.schemas import DebtRequest, LedgerResponse, TripResponse
from travelpulse.features import ledger
from travelpulse.models.common import Currency
from travelpulse.state.session import TripSession

router = APIRouter(prefix="/trip", tags=["ledger"])

SessionDep = Annotated[TripSession, Depends(get_trip_session)]


@router.get("/ledger", response_model=LedgerResponse)
async def get_ledger(session: SessionDep, currency: Currency = Currency.TWD) -> LedgerResponse:
    """Expense totals converted into `currency`."""
    debts = session.state.debts
    return LedgerResponse(
        currency=currency.value,
        total=ledger.total_in(debts, currency),
        by_payer=ledger.totals_by_payer(debts, currency),
    )


@router.post("/debts", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def add_debt(body: DebtRequest, session: SessionDep) -> TripResponse:
    session.save_debt(body.description, body.amount, body.currency, body.payer, body.date)
    return TripResponse.from_session(session)


@router.put("/debts/{debt_id}", response_model=TripResponse)
async def replace_debt(debt_id: str, body: DebtRequest, session: SessionDep) -> TripResponse:
    """Replace one debt entirely."""
    if not any(d.id == debt_id for d in session.state.debts):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Debt not found")
    session.save_debt(
        body.description, body.amount, body.currency, body.payer, body.date, debt_id=debt_id
    )
    return TripResponse.from_session(session)


@router.delete("/debts/{debt_id}", response_model=TripResponse)
async def delete_debt(debt_id: str, session: SessionDep) -> TripResponse:
    session.remove_debt(debt_id)
    return TripResponse.from_session(session)
