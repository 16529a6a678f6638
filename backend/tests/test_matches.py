"""Match CRUD endpoints and status resolution on write paths."""
from datetime import date

from fastapi.testclient import TestClient
from sqlmodel import Session

from clubhouse.models.match import Match

FUTURE_DATE = "2099-03-14"
PAST_DATE = "2020-03-14"


def _match_payload(**overrides):
    payload = {
        "title": "Friday Doubles",
        "location": "GOR Sudirman",
        "court_number": "3",
        "date": FUTURE_DATE,
        "time": "19:00-21:00",
        "fee": 50000,
        "description": "Bring shuttlecocks",
    }
    payload.update(overrides)
    return payload


def test_create_match_defaults(client: TestClient):
    payload = _match_payload()
    del payload["fee"]
    response = client.post("/api/matches", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Friday Doubles"
    assert data["date"] == FUTURE_DATE
    assert data["fee"] == 0
    assert data["status"] == "UPCOMING"
    assert data["players"] == []
    assert data["payments"] == []


def test_create_past_match_is_completed_immediately(client: TestClient):
    response = client.post("/api/matches", json=_match_payload(date=PAST_DATE))
    assert response.status_code == 201
    assert response.json()["status"] == "COMPLETED"


def test_create_match_validation_errors(client: TestClient):
    response = client.post(
        "/api/matches",
        json={"title": "ab", "location": "  ", "date": "not-a-date", "time": "7pm", "fee": -5},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    details = " ".join(body["details"])
    assert "title" in details
    assert "location" in details
    assert "date" in details
    assert "time must be in format HH:MM-HH:MM" in details
    assert "fee" in details


def test_create_match_rejects_out_of_range_clock(client: TestClient):
    response = client.post("/api/matches", json=_match_payload(time="25:00-26:00"))
    assert response.status_code == 400


def test_create_match_requires_fields(client: TestClient):
    response = client.post("/api/matches", json={"title": "Only a title"})
    assert response.status_code == 400
    assert "error" in response.json()


def test_get_match_and_404(client: TestClient):
    match_id = client.post("/api/matches", json=_match_payload()).json()["id"]

    response = client.get(f"/api/matches/{match_id}")
    assert response.status_code == 200
    assert response.json()["id"] == match_id

    missing = client.get("/api/matches/9999")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Match not found."}


def test_list_matches_ordering_and_filter(client: TestClient):
    client.post("/api/matches", json=_match_payload(title="Later", date="2099-05-01"))
    client.post("/api/matches", json=_match_payload(title="Sooner", date="2099-04-01"))
    client.post("/api/matches", json=_match_payload(title="Old one", date=PAST_DATE))

    titles = [m["title"] for m in client.get("/api/matches").json()]
    assert titles == ["Old one", "Sooner", "Later"]

    titles_desc = [m["title"] for m in client.get("/api/matches", params={"order": "desc"}).json()]
    assert titles_desc == ["Later", "Sooner", "Old one"]

    upcoming = client.get("/api/matches", params={"status": "upcoming"}).json()
    assert {m["title"] for m in upcoming} == {"Later", "Sooner"}

    bad = client.get("/api/matches", params={"status": "cancelled"})
    assert bad.status_code == 400


def test_update_match_partial(client: TestClient):
    match_id = client.post("/api/matches", json=_match_payload()).json()["id"]

    response = client.put(f"/api/matches/{match_id}", json={"location": "Hall B"})
    assert response.status_code == 200
    data = response.json()
    assert data["location"] == "Hall B"
    # untouched fields survive
    assert data["title"] == "Friday Doubles"
    assert data["fee"] == 50000
    assert data["court_number"] == "3"


def test_update_match_into_past_completes_it(client: TestClient):
    match_id = client.post("/api/matches", json=_match_payload()).json()["id"]

    response = client.put(f"/api/matches/{match_id}", json={"date": PAST_DATE})
    assert response.status_code == 200
    assert response.json()["status"] == "COMPLETED"


def test_update_cannot_clear_required_field(client: TestClient):
    match_id = client.post("/api/matches", json=_match_payload()).json()["id"]
    response = client.put(f"/api/matches/{match_id}", json={"title": None})
    assert response.status_code == 400


def test_update_missing_match(client: TestClient):
    response = client.put("/api/matches/4242", json={"title": "Nobody"})
    assert response.status_code == 404


def test_delete_match(client: TestClient):
    match_id = client.post("/api/matches", json=_match_payload()).json()["id"]

    response = client.delete(f"/api/matches/{match_id}")
    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/api/matches/{match_id}").status_code == 404
    assert client.delete(f"/api/matches/{match_id}").status_code == 404


def test_auto_update_endpoint(client: TestClient, session: Session):
    session.add(Match(title="Stale", location="Hall", date=date(2021, 1, 1), time="16:00-18:00"))
    session.add(Match(title="Ahead", location="Hall", date=date(2099, 1, 1), time="16:00-18:00"))
    session.commit()

    response = client.post("/api/matches/auto-update")
    assert response.status_code == 200
    assert response.json()["updated_count"] == 1

    again = client.post("/api/matches/auto-update")
    assert again.json()["updated_count"] == 0


def test_match_mutations_publish_notifications(client: TestClient, notifier_events):
    match_id = client.post("/api/matches", json=_match_payload()).json()["id"]
    client.put(f"/api/matches/{match_id}", json={"fee": 60000})
    client.delete(f"/api/matches/{match_id}")

    assert notifier_events == [
        ("match_created", match_id),
        ("match_updated", match_id),
        ("match_deleted", match_id),
    ]


def test_auto_update_publishes_only_when_something_changed(
    client: TestClient, session: Session, notifier_events
):
    client.post("/api/matches/auto-update")
    assert notifier_events == []

    session.add(Match(title="Stale", location="Hall", date=date(2021, 1, 1), time="16:00-18:00"))
    session.commit()
    client.post("/api/matches/auto-update")
    assert notifier_events == [("auto_update", None)]


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
