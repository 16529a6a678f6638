"""
Dashboard statistics endpoints.
Reads already-resolved match rows; the dashboard triggers auto-update first.
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlmodel import Session

from clubhouse.database import get_session
from clubhouse.services import stats_service

router = APIRouter()


class StatsResponse(BaseModel):
    total_matches: int
    upcoming_matches: int
    completed_matches: int
    hours_played: str  # one decimal place, e.g. "12.5"


class MonthlyStats(BaseModel):
    count: int
    total_hours: float


@router.get("/stats", response_model=StatsResponse)
def get_stats(session: Session = Depends(get_session)):
    """Match counts by status and total hours played"""
    counts = stats_service.match_counts(session)
    hours = stats_service.hours_played(session)
    return StatsResponse(
        total_matches=counts.total,
        upcoming_matches=counts.upcoming,
        completed_matches=counts.completed,
        hours_played=stats_service.format_hours(hours),
    )


@router.get("/stats/monthly", response_model=Dict[str, MonthlyStats])
def get_monthly_stats(
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Restrict to one calendar year"),
    session: Session = Depends(get_session),
):
    """Completed matches grouped by "YYYY-MM" with count and total hours"""
    buckets = stats_service.monthly_breakdown(session, year=year)
    return {
        key: MonthlyStats(count=bucket.count, total_hours=bucket.total_hours)
        for key, bucket in buckets.items()
    }
