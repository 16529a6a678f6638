"""Match status resolver: one-directional, fail-open, strict end comparison."""
from datetime import date, datetime

import pytest

from clubhouse.services.match_status import resolve_match_status


def test_past_match_resolves_completed():
    """2025-01-01 16:00-18:00 is long over by 2030."""
    assert resolve_match_status("2025-01-01", "16:00-18:00", "UPCOMING", datetime(2030, 1, 1)) == "COMPLETED"


def test_future_match_stays_upcoming():
    assert resolve_match_status(date(2030, 6, 1), "16:00-18:00", "UPCOMING", datetime(2025, 1, 1)) == "UPCOMING"


@pytest.mark.parametrize(
    "now",
    [datetime(2000, 1, 1), datetime(2025, 1, 1, 17, 0), datetime(2099, 12, 31)],
)
def test_completed_is_never_reverted(now):
    assert resolve_match_status(date(2025, 1, 1), "16:00-18:00", "COMPLETED", now) == "COMPLETED"


def test_unparsable_time_keeps_upcoming():
    assert resolve_match_status(date(2020, 1, 1), "garbage", "UPCOMING", datetime(2030, 1, 1)) == "UPCOMING"


def test_unparsable_date_keeps_status():
    assert resolve_match_status("not-a-date", "16:00-18:00", "UPCOMING", datetime(2030, 1, 1)) == "UPCOMING"


def test_end_instant_must_be_strictly_before_now():
    """At exactly the end minute the match is not yet completed."""
    day = date(2025, 5, 10)
    assert resolve_match_status(day, "16:00-18:00", "UPCOMING", datetime(2025, 5, 10, 18, 0)) == "UPCOMING"
    assert (
        resolve_match_status(day, "16:00-18:00", "UPCOMING", datetime(2025, 5, 10, 18, 0, 1)) == "COMPLETED"
    )


def test_overnight_match_ends_next_day():
    """22:00-02:00 on the 15th is still running at 01:00 on the 16th."""
    day = date(2025, 1, 15)
    assert resolve_match_status(day, "22:00-02:00", "UPCOMING", datetime(2025, 1, 16, 1, 0)) == "UPCOMING"
    assert resolve_match_status(day, "22:00-02:00", "UPCOMING", datetime(2025, 1, 16, 2, 30)) == "COMPLETED"


def test_lowercase_status_is_normalized():
    assert resolve_match_status(date(2020, 1, 1), "16:00-18:00", "upcoming", datetime(2030, 1, 1)) == "COMPLETED"
    assert resolve_match_status(date(2020, 1, 1), "16:00-18:00", "completed", datetime(2000, 1, 1)) == "COMPLETED"


def test_datetime_input_uses_calendar_day():
    assert (
        resolve_match_status(datetime(2025, 1, 1, 9, 0), "16:00-18:00", "UPCOMING", datetime(2025, 1, 1, 19, 0))
        == "COMPLETED"
    )
