"""Stats aggregation helpers and the /stats endpoints."""
from datetime import date

from fastapi.testclient import TestClient
from sqlmodel import Session

from clubhouse.models.match import Match
from clubhouse.services.stats_service import format_hours, group_by_month, month_key, total_hours


def _add(session: Session, day: date, time_range: str, status: str):
    session.add(Match(title="Session", location="Hall", date=day, time=time_range, status=status))
    session.commit()


def test_month_key_is_zero_padded():
    assert month_key(date(2025, 1, 15)) == "2025-01"
    assert month_key(date(2024, 12, 1)) == "2024-12"


def test_total_hours_skips_unparsable():
    assert total_hours(["16:00-18:00", "bad", None, "22:00-02:00"]) == 6.0


def test_format_hours_one_decimal():
    assert format_hours(0) == "0.0"
    assert format_hours(3.5) == "3.5"
    assert format_hours(2.0 + 1 / 3) == "2.3"


def test_group_by_month_merges_same_month():
    buckets = group_by_month(
        [
            (date(2025, 2, 3), "16:00-18:00"),
            (date(2025, 1, 10), "18:00-19:30"),
            (date(2025, 1, 24), "20:00-22:00"),
        ]
    )
    assert list(buckets) == ["2025-01", "2025-02"]
    assert buckets["2025-01"].count == 2
    assert buckets["2025-01"].total_hours == 3.5
    assert buckets["2025-02"].count == 1


def test_group_by_month_counts_unparsable_with_zero_hours():
    buckets = group_by_month([(date(2025, 3, 1), "oops")])
    assert buckets["2025-03"].count == 1
    assert buckets["2025-03"].total_hours == 0.0


def test_stats_empty(client: TestClient):
    response = client.get("/api/stats")
    assert response.status_code == 200
    assert response.json() == {
        "total_matches": 0,
        "upcoming_matches": 0,
        "completed_matches": 0,
        "hours_played": "0.0",
    }


def test_stats_counts_and_hours(client: TestClient, session: Session):
    _add(session, date(2025, 1, 1), "16:00-18:00", "COMPLETED")
    _add(session, date(2025, 1, 2), "22:00-02:00", "COMPLETED")
    _add(session, date(2025, 1, 3), "garbled", "COMPLETED")
    _add(session, date(2099, 1, 1), "16:00-20:00", "UPCOMING")

    data = client.get("/api/stats").json()
    assert data["total_matches"] == 4
    assert data["upcoming_matches"] == 1
    assert data["completed_matches"] == 3
    # Upcoming hours are not counted
    assert data["hours_played"] == "6.0"


def test_monthly_stats(client: TestClient, session: Session):
    _add(session, date(2025, 1, 5), "16:00-18:00", "COMPLETED")
    _add(session, date(2025, 1, 20), "19:00-20:30", "COMPLETED")
    _add(session, date(2024, 12, 31), "20:00-22:00", "COMPLETED")
    _add(session, date(2025, 1, 25), "16:00-18:00", "UPCOMING")

    response = client.get("/api/stats/monthly")
    assert response.status_code == 200
    data = response.json()
    assert list(data) == ["2024-12", "2025-01"]
    assert data["2025-01"] == {"count": 2, "total_hours": 3.5}
    assert data["2024-12"] == {"count": 1, "total_hours": 2.0}


def test_monthly_stats_year_filter(client: TestClient, session: Session):
    _add(session, date(2025, 1, 5), "16:00-18:00", "COMPLETED")
    _add(session, date(2024, 12, 31), "20:00-22:00", "COMPLETED")

    data = client.get("/api/stats/monthly", params={"year": 2025}).json()
    assert list(data) == ["2025-01"]
