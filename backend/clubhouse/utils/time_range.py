"""
Parser for match time-range strings.

Supports the single canonical format:
  "16:00-18:00"   → 120 minutes, same day
  "22:00-02:00"   → 240 minutes, ends the next calendar day
  "18:00-18:00"   → a full 24-hour span (zero or negative raw duration
                    always means the range wraps past midnight)

Returns None on parse failure (non-fatal). Multi-dash input such as
"10:00-11:00-12:00" is a failure rather than a guess at which part is the end.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class TimeRange:
    start_hour: int
    start_minute: int
    end_hour: int
    end_minute: int
    duration_minutes: int
    crosses_midnight: bool

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / 60

    def start_datetime(self, base_date: date) -> datetime:
        return datetime.combine(base_date, time(self.start_hour, self.start_minute))

    def end_datetime(self, base_date: date) -> datetime:
        """Absolute end instant for a match held on ``base_date``."""
        end = datetime.combine(base_date, time(self.end_hour, self.end_minute))
        if self.crosses_midnight:
            end += timedelta(days=1)
        return end


def _parse_clock(raw: str) -> Optional[Tuple[int, int]]:
    parts = [part.strip() for part in raw.split(":")]
    if len(parts) != 2:
        return None
    # int() alone would also take "+1", "1_0" and non-ASCII digits
    if not all(part.isascii() and part.isdigit() for part in parts):
        return None
    hour = int(parts[0])
    minute = int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def parse_time_range(raw: Optional[str]) -> Optional[TimeRange]:
    """Parse "HH:MM-HH:MM" into a TimeRange, or None if it cannot be parsed."""
    if not raw or not isinstance(raw, str):
        return None

    sides = raw.split("-")
    if len(sides) != 2:
        return None

    start = _parse_clock(sides[0])
    end = _parse_clock(sides[1])
    if start is None or end is None:
        return None

    start_total = start[0] * 60 + start[1]
    end_total = end[0] * 60 + end[1]

    duration = end_total - start_total
    crosses_midnight = duration <= 0
    if crosses_midnight:
        duration += MINUTES_PER_DAY

    return TimeRange(
        start_hour=start[0],
        start_minute=start[1],
        end_hour=end[0],
        end_minute=end[1],
        duration_minutes=duration,
        crosses_midnight=crosses_midnight,
    )


def duration_hours(raw: Optional[str]) -> Optional[float]:
    parsed = parse_time_range(raw)
    if parsed is None:
        return None
    return parsed.duration_hours


def match_end_datetime(match_date: date, raw: Optional[str]) -> Optional[datetime]:
    """End instant of a match, or None when its time range is unparsable."""
    parsed = parse_time_range(raw)
    if parsed is None:
        return None
    return parsed.end_datetime(match_date)
