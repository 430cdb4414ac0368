"""Shared pytest fixtures for all test suites."""

from datetime import date

import pytest

from travelpulse.config import Settings
from travelpulse.models import (
    Currency,
    DebtItem,
    Flight,
    Hotel,
    ItineraryItem,
    ShoppingItem,
    TripState,
)
from travelpulse.storage.inmemory import InMemoryDocumentStore

DAY_ONE = date(2024, 10, 15)
DAY_TWO = date(2024, 10, 16)


def make_item(
    item_id: str,
    start_time: str,
    duration: str = "1h",
    day: date = DAY_ONE,
    activity: str | None = None,
) -> ItineraryItem:
    """Build an itinerary item with sensible filler values."""
    return ItineraryItem(
        id=item_id,
        date=day,
        start_time=start_time,
        duration=duration,
        activity=activity or f"Activity {item_id}",
        location="Tokyo",
    )


@pytest.fixture
def sample_state() -> TripState:
    """A fully populated trip."""
    return TripState(
        destination="東京 / 日本",
        start_date=DAY_ONE,
        end_date=date(2024, 10, 20),
        cover_image="https://example.com/cover.jpg",
        daily_maps={DAY_ONE: "https://www.google.com/maps/d/viewer?mid=abc"},
        debts=[
            DebtItem(
                id="d1",
                description="Sushi dinner",
                amount=12000,
                currency=Currency.JPY,
                payer="Amy",
                date=DAY_ONE,
            ),
            DebtItem(
                id="d2",
                description="Taxi",
                amount=30,
                currency=Currency.USD,
                payer="Ben",
                date=DAY_TWO,
            ),
        ],
        flights=[
            Flight(
                id="f1",
                airline="EVA Air",
                flight_number="BR198",
                departure="TPE",
                arrival="NRT",
                departure_time="08:50",
                arrival_time="13:15",
                price=15000,
                date=DAY_ONE,
            )
        ],
        hotels=[
            Hotel(
                id="h1",
                name="Shinjuku Hotel",
                rating=4.5,
                price_per_person=3500,
                address="Shinjuku",
                pros=["Near station"],
                is_selected=True,
            )
        ],
        itinerary_items=[
            make_item("i1", "09:00", "1h"),
            make_item("i2", "10:00", "30m"),
            make_item("i3", "13:00", "2h"),
            make_item("i4", "11:00", "2h", day=DAY_TWO),
        ],
        shopping_items=[
            ShoppingItem(
                id="s1",
                name="Matcha",
                amount=1500,
                currency=Currency.JPY,
                itinerary_item_id="i3",
                for_whom="Mom",
            ),
            ShoppingItem(id="s2", name="Snacks", amount=800, currency=Currency.JPY),
        ],
    )


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with a short debounce window for timing-sensitive tests."""
    return Settings(
        remote_store_url="",
        local_store_url="sqlite+aiosqlite:///:memory:",
        save_debounce_ms=20,
    )


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    """Empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def item_factory():
    """The `make_item` helper, for tests that build their own days."""
    return make_item
