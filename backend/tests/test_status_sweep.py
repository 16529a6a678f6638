"""Batch status sweep: transitions, skips, idempotence."""
import logging
from datetime import date, datetime

import pytest
from sqlmodel import Session, select

from clubhouse.models.match import Match
from clubhouse.services.match_status import run_status_sweep

NOW = datetime(2025, 6, 15, 20, 0)


def _add_match(session: Session, title: str, day: date, time_range: str, status: str = "UPCOMING") -> Match:
    match = Match(title=title, location="GOR Sudirman", date=day, time=time_range, status=status)
    session.add(match)
    session.commit()
    session.refresh(match)
    return match


def _status(session: Session, match_id: int) -> str:
    session.expire_all()
    return session.get(Match, match_id).status


def test_sweep_completes_elapsed_matches(session: Session):
    past = _add_match(session, "Last week", date(2025, 6, 8), "16:00-18:00")
    earlier_today = _add_match(session, "This afternoon", date(2025, 6, 15), "16:00-18:00")
    later_today = _add_match(session, "Tonight", date(2025, 6, 15), "19:00-21:00")
    future = _add_match(session, "Next week", date(2025, 6, 22), "16:00-18:00")

    assert run_status_sweep(session, NOW) == 2

    assert _status(session, past.id) == "COMPLETED"
    assert _status(session, earlier_today.id) == "COMPLETED"
    assert _status(session, later_today.id) == "UPCOMING"
    assert _status(session, future.id) == "UPCOMING"


def test_sweep_is_idempotent(session: Session):
    _add_match(session, "A", date(2025, 6, 1), "16:00-18:00")
    _add_match(session, "B", date(2025, 6, 2), "16:00-18:00")

    assert run_status_sweep(session, NOW) == 2
    assert run_status_sweep(session, NOW) == 0


def test_sweep_skips_malformed_time_ranges(session: Session, caplog):
    bad = _add_match(session, "Broken", date(2025, 6, 1), "sometime")
    good = _add_match(session, "Fine", date(2025, 6, 1), "16:00-18:00")

    with caplog.at_level(logging.WARNING, logger="clubhouse.services.match_status"):
        assert run_status_sweep(session, NOW) == 1

    assert _status(session, bad.id) == "UPCOMING"
    assert _status(session, good.id) == "COMPLETED"
    assert any("invalid time range" in r.getMessage() for r in caplog.records)


def test_sweep_handles_overnight_matches(session: Session):
    """Yesterday 22:00-02:00 ended at 02:00 today."""
    still_running = _add_match(session, "Late", date(2025, 6, 15), "19:00-01:00")
    finished = _add_match(session, "Overnight", date(2025, 6, 14), "22:00-02:00")

    assert run_status_sweep(session, NOW) == 1
    assert _status(session, finished.id) == "COMPLETED"
    assert _status(session, still_running.id) == "UPCOMING"


def test_sweep_ignores_completed_matches(session: Session):
    _add_match(session, "Done", date(2025, 6, 1), "16:00-18:00", status="COMPLETED")
    assert run_status_sweep(session, NOW) == 0


def test_sweep_without_candidates_writes_nothing(session: Session):
    future = _add_match(session, "Future", date(2026, 1, 1), "16:00-18:00")
    before = session.get(Match, future.id).updated_at

    assert run_status_sweep(session, NOW) == 0

    session.expire_all()
    assert session.get(Match, future.id).updated_at == before


def test_concurrent_style_runs_converge(session: Session):
    """Two sweeps against the same snapshot end in the same state."""
    ids = [_add_match(session, f"M{i}", date(2025, 6, i + 1), "10:00-12:00").id for i in range(3)]

    first = run_status_sweep(session, NOW)
    second = run_status_sweep(session, NOW)

    assert first + second == 3
    statuses = session.exec(select(Match.status).where(Match.id.in_(ids))).all()
    assert set(statuses) == {"COMPLETED"}


def test_sweep_failure_rolls_back_every_transition(session: Session, monkeypatch):
    matches = [
        _add_match(session, "First", date(2025, 6, 1), "16:00-18:00"),
        _add_match(session, "Second", date(2025, 6, 2), "16:00-18:00"),
        _add_match(session, "Third", date(2025, 6, 3), "16:00-18:00"),
    ]

    def failing_commit():
        raise RuntimeError("database went away")

    monkeypatch.setattr(session, "commit", failing_commit)

    with pytest.raises(RuntimeError, match="database went away"):
        run_status_sweep(session, NOW)

    monkeypatch.undo()
    assert [_status(session, m.id) for m in matches] == ["UPCOMING", "UPCOMING", "UPCOMING"]
