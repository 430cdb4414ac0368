"""Shared-expense ledger helpers: currency normalization and per-payer totals."""

import uuid
from collections.abc import Mapping, Sequence
from datetime import date

from travelpulse.models.common import Currency
from travelpulse.models.trip import DebtItem

# Multiplier into the base unit (TWD). Consumed read-only; callers may inject their own.
DEFAULT_RATES: dict[str, float] = {
    Currency.TWD.value: 1.0,
    Currency.JPY.value: 0.21,
    Currency.USD.value: 32.5,
}


def _code(currency: Currency | str) -> str:
    return currency.value if isinstance(currency, Currency) else currency


def total_in(
    debts: Sequence[DebtItem],
    currency: Currency | str = Currency.TWD,
    rates: Mapping[str, float] = DEFAULT_RATES,
) -> float:
    """Sum debts in the base unit and express the total in `currency`.

    Unknown currencies use a multiplier of 1.
    """
    total_base = sum(debt.amount * rates.get(_code(debt.currency), 1.0) for debt in debts)
    return total_base / rates.get(_code(currency), 1.0)


def payers(debts: Sequence[DebtItem]) -> list[str]:
    """Distinct non-empty payer names, sorted."""
    return sorted({debt.payer for debt in debts if debt.payer})


def totals_by_payer(
    debts: Sequence[DebtItem],
    currency: Currency | str = Currency.TWD,
    rates: Mapping[str, float] = DEFAULT_RATES,
) -> dict[str, float]:
    """Total paid by each payer, expressed in `currency`."""
    return {
        payer: total_in([d for d in debts if d.payer == payer], currency, rates)
        for payer in payers(debts)
    }


def upsert_debt(
    debts: Sequence[DebtItem],
    description: str,
    amount: float,
    currency: Currency | str,
    payer: str,
    paid_on: date,
    debt_id: str | None = None,
) -> list[DebtItem]:
    """Return a new debt list with the entry added, or replaced when `debt_id` matches."""
    item = DebtItem(
        id=debt_id or uuid.uuid4().hex,
        description=description,
        amount=amount,
        currency=Currency(_code(currency)),
        payer=payer,
        date=paid_on,
    )
    if debt_id and any(d.id == debt_id for d in debts):
        return [item if d.id == debt_id else d for d in debts]
    return [*debts, item]


def remove_debt(debts: Sequence[DebtItem], debt_id: str) -> list[DebtItem]:
    """Return a new debt list without `debt_id`."""
    return [d for d in debts if d.id != debt_id]
