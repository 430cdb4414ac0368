"""Trip calendar helpers: date ranges, daily map links and hotel selection."""

from collections.abc import Sequence
from datetime import date, timedelta

from travelpulse.models.trip import Hotel


def trip_dates(start: date | str, end: date | str) -> list[date]:
    """Every date from `start` to `end` inclusive.

    Unparseable input yields an empty list, as does an end before the start.
    """
    try:
        first = start if isinstance(start, date) else date.fromisoformat(start)
        last = end if isinstance(end, date) else date.fromisoformat(end)
    except ValueError:
        return []

    days = (last - first).days
    return [first + timedelta(days=offset) for offset in range(days + 1)]


def embed_map_url(url: str) -> str:
    """Turn a Google My Maps edit/viewer link into its embeddable form."""
    if not url:
        return ""
    if "/d/embed" in url:
        return url
    if "/d/u/0/edit" in url:
        return url.replace("/edit", "/embed")
    if "/d/viewer" in url:
        return url.replace("/viewer", "/embed")
    return url


def selected_hotels(hotels: Sequence[Hotel]) -> list[Hotel]:
    """Hotels flagged as booked."""
    return [hotel for hotel in hotels if hotel.is_selected]
