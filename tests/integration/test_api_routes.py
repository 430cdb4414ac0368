"""Integration tests for the HTTP surface."""

import json
import time
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from travelpulse.config import Settings
from travelpulse.main import create_app
from travelpulse.models import TripState
from travelpulse.storage.documents import DocumentKey
from travelpulse.storage.inmemory import InMemoryDocumentStore

TRIP_KEY = DocumentKey("trips", "travel_pulse_default_trip")


@pytest.fixture
def seeded_store(sample_state: TripState) -> InMemoryDocumentStore:
    """Store already holding the sample trip as the live document."""
    store = InMemoryDocumentStore()
    store.put_raw(TRIP_KEY, json.dumps(sample_state.to_document(), ensure_ascii=False))
    return store


@pytest.fixture
def client(fast_settings: Settings, seeded_store: InMemoryDocumentStore) -> Iterator[TestClient]:
    """Test client with the lifespan running (trip loaded at startup)."""
    with TestClient(create_app(fast_settings, document_store=seeded_store)) as test_client:
        yield test_client


def wait_for_write(store: InMemoryDocumentStore, count: int = 1, timeout: float = 2.0) -> None:
    """Block until the debounced write-through has happened."""
    deadline = time.monotonic() + timeout
    while len(store.write_log) < count and time.monotonic() < deadline:
        time.sleep(0.02)


def test_startup_loads_live_trip(client: TestClient) -> None:
    """Test the stored trip is loaded when the app starts."""
    response = client.get("/trip")

    assert response.status_code == 200
    data = response.json()
    assert data["is_read_only"] is False
    assert data["trip"]["destination"] == "東京 / 日本"
    assert len(data["trip"]["itineraryItems"]) == 4


def test_patch_trip_writes_through(client: TestClient, seeded_store: InMemoryDocumentStore) -> None:
    """Test top-level edits are applied and persisted after the debounce."""
    response = client.patch("/trip", json={"destination": "Kyoto", "endDate": "2024-10-22"})

    assert response.status_code == 200
    assert response.json()["trip"]["destination"] == "Kyoto"
    wait_for_write(seeded_store)
    assert seeded_store.write_log[-1][1]["destination"] == "Kyoto"
    assert seeded_store.write_log[-1][1]["endDate"] == "2024-10-22"


def test_reset_requires_confirmation(client: TestClient) -> None:
    """Test reset is refused without confirm and applied with it."""
    assert client.post("/trip/reset").status_code == 428

    response = client.post("/trip/reset", params={"confirm": "true"})

    assert response.status_code == 200
    assert response.json()["trip"]["destination"] == "新旅程"
    assert response.json()["trip"]["itineraryItems"] == []


def test_daily_map(client: TestClient) -> None:
    """Test setting one day's map link."""
    response = client.put("/trip/daily-maps/2024-10-16", json={"url": "https://maps.example/d2"})

    assert response.status_code == 200
    assert response.json()["trip"]["dailyMaps"]["2024-10-16"] == "https://maps.example/d2"


def test_quick_add_and_day_view(client: TestClient) -> None:
    """Test quick-add defaults and the per-day listing."""
    response = client.post("/trip/itinerary", json={"activity": "Ramen", "date": "2024-10-16"})
    assert response.status_code == 201

    day = client.get("/trip/itinerary/2024-10-16").json()

    assert [item["activity"] for item in day["items"]] == ["Ramen", "Activity i4"]
    assert day["items"][0]["startTime"] == "10:00"
    assert day["items"][0]["duration"] == "1h"


def test_update_and_delete_item(client: TestClient) -> None:
    """Test editing and deleting an item."""
    response = client.put("/trip/itinerary/i1", json={"activity": "Tsukiji"})
    assert response.status_code == 200
    assert client.put("/trip/itinerary/nope", json={"activity": "x"}).status_code == 404

    client.delete("/trip/itinerary/i1")
    day = client.get("/trip/itinerary/2024-10-15").json()

    assert [item["id"] for item in day["items"]] == ["i2", "i3"]


def test_day_view_includes_linked_shopping(client: TestClient) -> None:
    """Test each day item lists the shopping entries linked to it."""
    day = client.get("/trip/itinerary/2024-10-15").json()

    assert list(day["shopping"]) == ["i3"]
    assert [entry["id"] for entry in day["shopping"]["i3"]] == ["s1"]


def test_reorder_cascades(client: TestClient) -> None:
    """Test reordering a day recomputes the start times."""
    response = client.post(
        "/trip/itinerary/reorder", json={"date": "2024-10-15", "from_index": 2, "to_index": 0}
    )

    assert response.status_code == 200
    assert [(i["id"], i["startTime"]) for i in response.json()["items"]] == [
        ("i3", "13:00"),
        ("i1", "15:00"),
        ("i2", "16:00"),
    ]


def test_reorder_errors(client: TestClient) -> None:
    """Test invalid reorders are rejected."""
    out_of_range = client.post(
        "/trip/itinerary/reorder", json={"date": "2024-10-15", "from_index": 0, "to_index": 9}
    )
    cross_date = client.post("/trip/itinerary/move", json={"item_id": "i1", "over_id": "i4"})
    unknown = client.post("/trip/itinerary/move", json={"item_id": "i1", "over_id": "zz"})

    assert out_of_range.status_code == 422
    assert cross_date.status_code == 409
    assert unknown.status_code == 422


def test_ledger_totals(client: TestClient) -> None:
    """Test ledger totals in the base currency."""
    data = client.get("/trip/ledger", params={"currency": "TWD"}).json()

    assert data["currency"] == "TWD"
    assert data["total"] == pytest.approx(3495.0)
    assert data["by_payer"]["Ben"] == pytest.approx(975.0)


def test_shopping_filter(client: TestClient) -> None:
    """Test the shopping list filtered by recipient."""
    data = client.get("/trip/shopping", params={"buyer": "Mom"}).json()

    assert data["buyers"] == ["全部", "Mom", "自己"]
    assert [item["id"] for item in data["items"]] == ["s1"]


def test_archive_view_and_return(client: TestClient, seeded_store: InMemoryDocumentStore) -> None:
    """Test archiving, read-only viewing and returning to the live trip."""
    created = client.post("/archives")
    assert created.status_code == 201
    archive_id = created.json()["id"]
    assert [a["id"] for a in client.get("/archives").json()] == [archive_id]

    viewed = client.post(f"/archives/{archive_id}/view")
    assert viewed.status_code == 200
    assert viewed.json()["is_read_only"] is True

    patched = client.patch("/trip", json={"destination": "Should not stick"})
    assert patched.json()["trip"]["destination"] == "東京 / 日本"

    live = client.post("/trip/load")
    assert live.json()["is_read_only"] is False
    assert live.json()["trip"]["destination"] == "東京 / 日本"
    assert all(key != TRIP_KEY for key, _ in seeded_store.write_log)


def test_archive_refused_while_viewing(client: TestClient) -> None:
    """Test archiving a viewed archive is rejected with 409."""
    archive_id = client.post("/archives").json()["id"]
    client.post(f"/archives/{archive_id}/view")

    response = client.post("/archives")

    assert response.status_code == 409
    assert [a["id"] for a in client.get("/archives").json()] == [archive_id]


def test_archive_delete_and_missing(client: TestClient) -> None:
    """Test archive deletion needs confirmation and unknown ids 404 on view."""
    archive_id = client.post("/archives").json()["id"]

    assert client.delete(f"/archives/{archive_id}").status_code == 428
    assert client.delete(f"/archives/{archive_id}", params={"confirm": "true"}).status_code == 204
    assert client.get("/archives").json() == []
    assert client.post("/archives/archive_0/view").status_code == 404


def test_health_endpoints(client: TestClient) -> None:
    """Test liveness and component status."""
    assert client.get("/health").json() == {"status": "ok"}

    data = client.get("/healthz").json()

    assert data["components"]["store"] == "memory"
    assert data["components"]["read_only"] is False


def test_metrics_endpoint(client: TestClient) -> None:
    """Test Prometheus exposition includes the storage counters."""
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "storage_ops_total" in response.text
    assert "trip_sync_writes_total" in response.text


def test_calendar(client: TestClient) -> None:
    """Test trip dates, embeddable map links and booked hotels."""
    data = client.get("/trip/calendar").json()

    assert data["dates"] == [f"2024-10-{day}" for day in range(15, 21)]
    assert data["daily_maps"] == {"2024-10-15": "https://www.google.com/maps/d/embed?mid=abc"}
    assert [hotel["id"] for hotel in data["selected_hotels"]] == ["h1"]


def test_debt_edits(client: TestClient) -> None:
    """Test adding, replacing and deleting debts."""
    body = {
        "description": "Coffee",
        "amount": 600,
        "currency": "JPY",
        "payer": "Cy",
        "date": "2024-10-16",
    }

    added = client.post("/trip/debts", json=body)
    assert added.status_code == 201
    assert added.json()["trip"]["debts"][-1]["description"] == "Coffee"

    replaced = client.put("/trip/debts/d2", json={**body, "description": "Bus"})
    assert replaced.json()["trip"]["debts"][1]["description"] == "Bus"
    assert client.put("/trip/debts/unknown", json=body).status_code == 404

    deleted = client.delete("/trip/debts/d1")
    assert [d["id"] for d in deleted.json()["trip"]["debts"]][0] == "d2"


def test_debt_rejects_negative_amount(client: TestClient) -> None:
    """Test invalid debts are refused."""
    body = {"description": "x", "amount": -5, "payer": "Cy", "date": "2024-10-16"}

    assert client.post("/trip/debts", json=body).status_code == 422


def test_shopping_edits(client: TestClient) -> None:
    """Test adding, replacing, toggling and deleting shopping entries."""
    added = client.post("/trip/shopping", json={"name": "Pen", "itineraryItemId": "i4"})
    assert added.status_code == 201
    new_entry = added.json()["trip"]["shoppingItems"][-1]
    assert new_entry["forWhom"] == "自己"
    assert new_entry["itineraryItemId"] == "i4"

    replaced = client.put("/trip/shopping/s1", json={"name": "Hojicha", "forWhom": "Dad"})
    assert replaced.json()["trip"]["shoppingItems"][0]["name"] == "Hojicha"

    toggled = client.post("/trip/shopping/s2/toggle")
    assert toggled.json()["trip"]["shoppingItems"][1]["isChecked"] is True
    assert client.post("/trip/shopping/unknown/toggle").status_code == 404

    deleted = client.delete(f"/trip/shopping/{new_entry['id']}")
    assert [i["id"] for i in deleted.json()["trip"]["shoppingItems"]] == ["s1", "s2"]


def test_linkable_itinerary_items(client: TestClient) -> None:
    """Test the itinerary items offered for linking."""
    all_days = client.get("/trip/shopping/linkable").json()
    one_day = client.get("/trip/shopping/linkable", params={"day": "2024-10-16"}).json()

    assert [item["id"] for item in all_days] == ["i1", "i2", "i3", "i4"]
    assert [item["id"] for item in one_day] == ["i4"]


def test_ledger_and_shopping_edits_ignored_while_viewing(client: TestClient) -> None:
    """Test edits through the ledger and shopping routes change nothing in read-only mode."""
    archive_id = client.post("/archives").json()["id"]
    before = client.post(f"/archives/{archive_id}/view").json()["trip"]

    client.post(
        "/trip/debts",
        json={"description": "x", "amount": 1, "payer": "Cy", "date": "2024-10-16"},
    )
    client.post("/trip/shopping", json={"name": "Pen"})
    response = client.post("/trip/shopping/s2/toggle")

    assert response.json()["is_read_only"] is True
    assert response.json()["trip"] == before
