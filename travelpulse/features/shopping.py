"""Shopping list helpers.

Shopping items may point at an itinerary item through `itinerary_item_id`.
That link is weak: if the itinerary item has been deleted, the shopping item
is simply treated as unlinked.
"""

from collections import defaultdict
from collections.abc import Sequence
from datetime import date

from travelpulse.models.trip import DEFAULT_FOR_WHOM, ItineraryItem, ShoppingItem
from travelpulse.scheduling.engine import DEFAULT_ACTIVITY

ALL_BUYERS = "全部"
UNLINKED_SORT_KEY = "9999-12-31 23:59"


def normalize_for_whom(value: str | None) -> str:
    """Empty recipients fall back to the default label."""
    if value is None or not value.strip():
        return DEFAULT_FOR_WHOM
    return value.strip()


def buyers(items: Sequence[ShoppingItem]) -> list[str]:
    """Filter options: the "all" entry followed by sorted distinct recipients."""
    return [ALL_BUYERS, *sorted({normalize_for_whom(item.for_whom) for item in items})]


def resolve_linked_item(
    item: ShoppingItem, itinerary: Sequence[ItineraryItem]
) -> ItineraryItem | None:
    """Itinerary item a shopping entry points at, or None if unlinked or dangling."""
    if not item.itinerary_item_id:
        return None
    return next((i for i in itinerary if i.id == item.itinerary_item_id), None)


def items_for_itinerary_item(
    items: Sequence[ShoppingItem], itinerary_item_id: str
) -> list[ShoppingItem]:
    """Shopping entries linked to one itinerary item."""
    return [item for item in items if item.itinerary_item_id == itinerary_item_id]


def linkable_itinerary_items(
    itinerary: Sequence[ItineraryItem], day: date | None = None
) -> list[ItineraryItem]:
    """Itinerary items a shopping entry can be linked to.

    Placeholder and blank activities are excluded. When `day` is given only
    that day's items are returned.
    """
    eligible = [
        i
        for i in itinerary
        if i.activity and i.activity.strip() and i.activity != DEFAULT_ACTIVITY
    ]
    if day is not None:
        eligible = [i for i in eligible if i.date == day]
    return sorted(eligible, key=lambda i: (i.date, i.start_time))


def filter_by_buyer(items: Sequence[ShoppingItem], buyer: str = ALL_BUYERS) -> list[ShoppingItem]:
    """Entries for one recipient, or all of them."""
    if buyer == ALL_BUYERS:
        return list(items)
    return [item for item in items if normalize_for_whom(item.for_whom) == buyer]


def sort_for_display(
    items: Sequence[ShoppingItem], itinerary: Sequence[ItineraryItem]
) -> list[ShoppingItem]:
    """Order by linked itinerary date and start time, then recipient.

    Unlinked and dangling entries sort last.
    """

    def sort_key(item: ShoppingItem) -> tuple[str, str]:
        linked = resolve_linked_item(item, itinerary)
        when = f"{linked.date.isoformat()} {linked.start_time}" if linked else UNLINKED_SORT_KEY
        return (when, normalize_for_whom(item.for_whom))

    return sorted(items, key=sort_key)


def checked_totals_by_currency(items: Sequence[ShoppingItem]) -> dict[str, float]:
    """Sum of purchased entries per currency."""
    totals: dict[str, float] = defaultdict(float)
    for item in items:
        if item.is_checked:
            totals[item.currency.value] += item.amount
    return dict(totals)


def toggle_checked(items: Sequence[ShoppingItem], item_id: str) -> list[ShoppingItem]:
    """Return a new list with one entry's purchased flag flipped."""
    return [
        item.model_copy(update={"is_checked": not item.is_checked}) if item.id == item_id else item
        for item in items
    ]


def upsert_shopping_item(items: Sequence[ShoppingItem], entry: ShoppingItem) -> list[ShoppingItem]:
    """Return a new list with `entry` added or replacing the entry with the same id."""
    if any(item.id == entry.id for item in items):
        return [entry if item.id == entry.id else item for item in items]
    return [*items, entry]


def remove_shopping_item(items: Sequence[ShoppingItem], item_id: str) -> list[ShoppingItem]:
    """Return a new list without `item_id`."""
    return [item for item in items if item.id != item_id]
