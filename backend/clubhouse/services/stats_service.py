"""
Dashboard statistics over the match table.

Counts come straight from COUNT queries; hours are summed from parsed time
ranges of COMPLETED matches. Matches whose time range cannot be parsed
contribute zero hours and are otherwise still counted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from sqlmodel import Session, func, select

from clubhouse.models.match import Match
from clubhouse.utils.sql import scalar_int
from clubhouse.utils.statuses import MATCH_COMPLETED, MATCH_UPCOMING
from clubhouse.utils.time_range import duration_hours


@dataclass
class MatchCounts:
    total: int
    upcoming: int
    completed: int


@dataclass
class MonthlyBucket:
    count: int = 0
    total_hours: float = field(default=0.0)


def month_key(day: date) -> str:
    """Sortable "YYYY-MM" key for a match date."""
    return f"{day.year:04d}-{day.month:02d}"


def format_hours(hours: float) -> str:
    return f"{hours:.1f}"


def total_hours(time_ranges: Iterable[Optional[str]]) -> float:
    total = 0.0
    for raw in time_ranges:
        hours = duration_hours(raw)
        if hours is not None:
            total += hours
    return total


def group_by_month(rows: Iterable[Tuple[date, Optional[str]]]) -> Dict[str, MonthlyBucket]:
    """Group (date, time_range) pairs into "YYYY-MM" buckets, keys ascending."""
    buckets: Dict[str, MonthlyBucket] = {}
    for day, raw in rows:
        bucket = buckets.setdefault(month_key(day), MonthlyBucket())
        bucket.count += 1
        hours = duration_hours(raw)
        if hours is not None:
            bucket.total_hours += hours
    return {key: buckets[key] for key in sorted(buckets)}


def _count(session: Session, status: Optional[str] = None) -> int:
    query = select(func.count()).select_from(Match)
    if status is not None:
        query = query.where(Match.status == status)
    return scalar_int(session.exec(query).one())


def match_counts(session: Session) -> MatchCounts:
    return MatchCounts(
        total=_count(session),
        upcoming=_count(session, MATCH_UPCOMING),
        completed=_count(session, MATCH_COMPLETED),
    )


def hours_played(session: Session) -> float:
    """Sum of durations (hours) across COMPLETED matches."""
    time_ranges: List[str] = session.exec(select(Match.time).where(Match.status == MATCH_COMPLETED)).all()
    return total_hours(time_ranges)


def monthly_breakdown(session: Session, year: Optional[int] = None) -> Dict[str, MonthlyBucket]:
    query = select(Match.date, Match.time).where(Match.status == MATCH_COMPLETED)
    if year is not None:
        query = query.where(Match.date >= date(year, 1, 1), Match.date <= date(year, 12, 31))
    rows = session.exec(query).all()
    return group_by_month((row[0], row[1]) for row in rows)
