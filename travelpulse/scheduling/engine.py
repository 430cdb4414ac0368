"""Itinerary scheduling: per-day ordering and start-time cascade on reorder.

A day's items are shown in ascending start time (stable, so ties keep their
insertion order). Dragging an item to a new position reorders that day only
and then recomputes every start time after the first from its predecessor's
start plus duration. The first item anchors the day and keeps its start time.

Clock arithmetic wraps modulo 24 hours; a cascade that crosses midnight does
not move items to the next date.
"""

import uuid
from collections.abc import Sequence
from datetime import date

from travelpulse.models.common import ItineraryItemType
from travelpulse.models.trip import ItineraryItem

ALL_DAY_TOKENS = frozenset({"全天", "all-day"})

DEFAULT_START_TIME = "10:00"
DEFAULT_DURATION = "1h"
DEFAULT_ACTIVITY = "新行程"
DEFAULT_TRANSPORTATION = "步行"

MINUTES_PER_DAY = 24 * 60


class ScheduleError(ValueError):
    """Reorder request could not be applied."""

    pass


class CrossDateReorderError(ScheduleError):
    """Reorder attempted to move an item onto a different date."""

    pass


def parse_duration_minutes(token: str) -> int:
    """Convert a duration token to minutes.

    "<n>h" is a (possibly fractional) number of hours, "<n>m" whole minutes.
    All-day and unparseable tokens count as zero.
    """
    token = (token or "").strip()
    if token in ALL_DAY_TOKENS:
        return 0
    try:
        if token.endswith("h"):
            return round(float(token[:-1]) * 60)
        if token.endswith("m"):
            return int(float(token[:-1]))
    except ValueError:
        return 0
    return 0


def parse_clock(value: str) -> int:
    """Parse "HH:MM" into minutes after midnight."""
    hours, _, minutes = value.partition(":")
    return int(hours) * 60 + int(minutes)


def format_clock(minutes: int) -> str:
    """Format minutes after midnight as "HH:MM", wrapping modulo 24 hours."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_duration(start_time: str, duration: str) -> str:
    """Advance a clock time by a duration token.

    >>> add_duration("23:30", "1h")
    '00:30'
    >>> add_duration("09:00", "全天")
    '09:00'
    """
    if duration in ALL_DAY_TOKENS:
        return start_time
    return format_clock(parse_clock(start_time) + parse_duration_minutes(duration))


def items_for_day(items: Sequence[ItineraryItem], day: date) -> list[ItineraryItem]:
    """Items on `day`, in display order (start time, stable)."""
    return sorted((item for item in items if item.date == day), key=lambda item: item.start_time)


def cascade_start_times(day_items: Sequence[ItineraryItem]) -> list[ItineraryItem]:
    """Recompute start times after the anchor from each predecessor's duration."""
    result: list[ItineraryItem] = []
    for idx, item in enumerate(day_items):
        if idx == 0:
            result.append(item)
            continue
        prev = result[idx - 1]
        result.append(
            item.model_copy(update={"start_time": add_duration(prev.start_time, prev.duration)})
        )
    return result


def reorder_day(
    items: Sequence[ItineraryItem], day: date, from_index: int, to_index: int
) -> list[ItineraryItem]:
    """Move the item at `from_index` to `to_index` within `day` and cascade.

    Returns the full itinerary: other dates' items unchanged and in their
    original order, followed by the recomputed items for `day`.

    Raises:
        ScheduleError: If either index is outside the day's list
    """
    day_items = items_for_day(items, day)
    if len(day_items) <= 1:
        return list(items)

    for index in (from_index, to_index):
        if not 0 <= index < len(day_items):
            raise ScheduleError(f"Index {index} out of range for {len(day_items)} items on {day}")
    if from_index == to_index:
        return list(items)

    reordered = list(day_items)
    reordered.insert(to_index, reordered.pop(from_index))

    other_items = [item for item in items if item.date != day]
    return other_items + cascade_start_times(reordered)


def move_item(
    items: Sequence[ItineraryItem], item_id: str, over_id: str
) -> list[ItineraryItem]:
    """Drag `item_id` onto the position currently held by `over_id`.

    Both items must share a date; the engine never changes an item's date.

    Raises:
        ScheduleError: If either id is unknown
        CrossDateReorderError: If the items are on different dates
    """
    by_id = {item.id: item for item in items}
    if item_id not in by_id or over_id not in by_id:
        missing = item_id if item_id not in by_id else over_id
        raise ScheduleError(f"Unknown itinerary item: {missing}")
    if item_id == over_id:
        return list(items)

    active, over = by_id[item_id], by_id[over_id]
    if active.date != over.date:
        raise CrossDateReorderError(
            f"Cannot move {item_id} from {active.date} onto {over_id} on {over.date}"
        )

    day_items = items_for_day(items, active.date)
    from_index = next(i for i, item in enumerate(day_items) if item.id == item_id)
    to_index = next(i for i, item in enumerate(day_items) if item.id == over_id)
    return reorder_day(items, active.date, from_index, to_index)


def new_itinerary_item(
    trip_start: date,
    *,
    item_id: str | None = None,
    date: date | None = None,
    start_time: str | None = None,
    duration: str | None = None,
    activity: str | None = None,
    location: str | None = None,
    location_url: str | None = None,
    item_type: ItineraryItemType | None = None,
    transportation: str | None = None,
    note: str | None = None,
    attachment: str | None = None,
) -> ItineraryItem:
    """Build a quick-add item, filling blanks with the default schedule slot."""
    return ItineraryItem(
        id=item_id or uuid.uuid4().hex,
        date=date or trip_start,
        start_time=start_time or DEFAULT_START_TIME,
        duration=duration or DEFAULT_DURATION,
        activity=activity or DEFAULT_ACTIVITY,
        location=location or "",
        location_url=location_url or "",
        type=item_type or ItineraryItemType.attraction,
        transportation=transportation or DEFAULT_TRANSPORTATION,
        note=note or "",
        attachment=attachment or "",
    )
