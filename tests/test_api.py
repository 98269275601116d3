"""
HTTP tests for the booking wizard API (dev wiring: mock collaborators, in-memory drafts).
"""

from __future__ import annotations

import tempfile
from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.infrastructure.store.json_draft_store import JsonDraftStore
from app.infrastructure.store.memory_draft_store import MemoryDraftStore
from app.main import app
from app.wiring import dependencies

NEW_ADDRESS = {
    "name": "Home",
    "address_line_1": "1 Broad St",
    "city": "Lagos",
    "state": "Lagos",
    "postal_code": "100001",
}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(dependencies, "_draft_store", MemoryDraftStore())
    dependencies.reset_wizards()
    yield TestClient(app)
    dependencies.reset_wizards()


def _weekday_in_window() -> str:
    day = dependencies.business_today() + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day.isoformat()


def _open(client: TestClient, **body) -> str:
    response = client.post("/api/v1/booking/sessions", json=body)
    assert response.status_code == 200
    return response.json()["session_id"]


def test_open_session_starts_on_services(client):
    response = client.post("/api/v1/booking/sessions", json={"session_id": "api-1"})

    data = response.json()
    assert data["session_id"] == "api-1"
    assert data["step"] == "services"
    assert data["title"] == "Select Your Services"
    assert data["can_go_back"] is False
    assert data["can_go_next"] is False
    assert data["payment"]["status"] == "idle"


def test_unknown_session_is_404(client):
    assert client.get("/api/v1/booking/sessions/nope").status_code == 404
    assert client.post("/api/v1/booking/sessions/nope/next").status_code == 404


def test_next_on_empty_draft_stays_on_services(client):
    session_id = _open(client)

    data = client.post(f"/api/v1/booking/sessions/{session_id}/next").json()

    assert data["step"] == "services"


def test_services_reference_data(client):
    session_id = _open(client)

    data = client.get(f"/api/v1/booking/sessions/{session_id}/reference-data").json()

    assert data["status"] == "loaded"
    assert data["data"]["selected_category_id"] == "cat_home"
    assert {item["id"] for item in data["data"]["catalog"]["items"]} >= {"svc_standard_room", "svc_kitchen"}


def test_invalid_selection_is_422(client):
    session_id = _open(client)

    response = client.put(f"/api/v1/booking/sessions/{session_id}/services/svc_missing", json={"quantity": 1})
    assert response.status_code == 422

    response = client.post(f"/api/v1/booking/sessions/{session_id}/schedule/date", json={"service_date": "2000-01-01"})
    assert response.status_code == 422


def test_patch_merges_services_and_ignores_locked_fields(client):
    session_id = _open(client)
    url = f"/api/v1/booking/sessions/{session_id}"

    client.patch(url, json={"services": [{"service_item_id": "svc_bathroom", "quantity": 2}]})
    data = client.patch(
        url, json={"services": [{"service_item_id": "svc_standard_room", "quantity": 1}], "notes": "Pets at home"}
    ).json()

    assert data["draft"]["services"] == [
        {"service_item_id": "svc_bathroom", "quantity": 2},
        {"service_item_id": "svc_standard_room", "quantity": 1},
    ]
    assert data["draft"]["notes"] == "Pets at home"
    assert data["can_go_next"] is True


def test_full_booking_through_payment(client):
    session_id = _open(client, email="guest@example.com")
    base = f"/api/v1/booking/sessions/{session_id}"

    client.put(f"{base}/services/svc_standard_room", json={"quantity": 2})
    client.put(f"{base}/extras/ext_fridge", json={"quantity": 1})
    assert client.post(f"{base}/next").json()["step"] == "schedule"

    client.post(f"{base}/schedule/date", json={"service_date": _weekday_in_window()})
    client.post(f"{base}/schedule/time", json={"service_time": "10:00"})
    assert client.post(f"{base}/next").json()["step"] == "address"

    client.post(f"{base}/address/new", json={"address": NEW_ADDRESS})
    review = client.post(f"{base}/next").json()
    assert review["step"] == "review"
    assert review["next_label"] == "Proceed to Payment"

    summary = client.get(f"{base}/reference-data").json()
    assert summary["data"]["pricing"]["total"] == 12500

    payment = client.post(f"{base}/next").json()
    assert payment["step"] == "payment"
    assert payment["payment"]["status"] == "processing_payment"
    reference = payment["payment"]["payment_reference"]
    assert reference.startswith("BOOK_")
    assert payment["payment"]["total_amount"] == 12500

    done = client.post(f"{base}/payment/success", json={"reference": reference}).json()
    assert done["payment"]["status"] == "success"
    assert done["draft"]["services"] == []

    status = client.get(f"{base}/draft-status").json()
    assert status["has_draft"] is False


def test_go_back_from_review_keeps_data(client):
    session_id = _open(client)
    base = f"/api/v1/booking/sessions/{session_id}"
    client.patch(
        base,
        json={
            "services": [{"service_item_id": "svc_standard_room", "quantity": 1}],
            "service_date": _weekday_in_window(),
            "service_time": "09:00",
            "new_address": NEW_ADDRESS,
        },
    )
    for _ in range(3):
        client.post(f"{base}/next")

    data = client.post(f"{base}/goto", json={"step": "services"}).json()

    assert data["step"] == "services"
    assert data["draft"]["new_address"]["city"] == "Lagos"
    assert client.post(f"{base}/goto", json={"step": "payment"}).json()["step"] == "services"


def test_draft_is_restored_for_new_wizard(client):
    session_id = _open(client)
    client.put(f"/api/v1/booking/sessions/{session_id}/services/svc_carpet", json={"quantity": 1})
    dependencies.reset_wizards()

    data = client.post("/api/v1/booking/sessions", json={"session_id": session_id}).json()

    assert data["draft"]["services"] == [{"service_item_id": "svc_carpet", "quantity": 1}]
    assert client.get(f"/api/v1/booking/sessions/{session_id}/draft-status").json()["has_draft"] is True


def test_abandon_clears_draft(client):
    session_id = _open(client)
    client.put(f"/api/v1/booking/sessions/{session_id}/services/svc_carpet", json={"quantity": 1})

    data = client.delete(f"/api/v1/booking/sessions/{session_id}").json()

    assert data["draft"]["services"] == []
    assert data["step"] == "services"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_invalid_session_id_is_rejected(client):
    assert client.post("/api/v1/booking/sessions", json={"session_id": "p.a.y"}).status_code == 422
    assert client.post("/api/v1/booking/sessions", json={"session_id": "../pay"}).status_code == 422


def test_draft_status_ignores_malformed_file(client, monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.setattr(dependencies, "_draft_store", JsonDraftStore(data_dir=tmpdir))
        path = Path(tmpdir) / "garbled.json"
        path.write_bytes(b'{"booking-draft": "\xff\xfe"}')

        data = client.get("/api/v1/booking/sessions/garbled/draft-status").json()

        assert data == {"session_id": "garbled", "has_draft": False, "age_hours": 0}
        assert not path.exists()
        assert client.get("/api/v1/booking/sessions/p.a.y/draft-status").status_code == 422


def test_registry_evicts_least_recently_used_and_reopen_restores(client, monkeypatch):
    monkeypatch.setattr(settings, "WIZARD_REGISTRY_SIZE", 2)
    first = _open(client, session_id="first")
    client.put(f"/api/v1/booking/sessions/{first}/services/svc_carpet", json={"quantity": 1})
    _open(client, session_id="second")
    _open(client, session_id="third")

    assert client.get("/api/v1/booking/sessions/first").status_code == 404
    assert client.get("/api/v1/booking/sessions/third").status_code == 200

    data = client.post("/api/v1/booking/sessions", json={"session_id": "first"}).json()
    assert data["draft"]["services"] == [{"service_item_id": "svc_carpet", "quantity": 1}]


def test_registry_evicts_idle_sessions(client, monkeypatch):
    _open(client, session_id="sleepy")
    monkeypatch.setattr(settings, "WIZARD_IDLE_SECONDS", -1)

    assert client.get("/api/v1/booking/sessions/sleepy").status_code == 404
