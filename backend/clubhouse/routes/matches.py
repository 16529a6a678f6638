"""
Match API Routes
CRUD for matches plus the status auto-update trigger used by the dashboard.

Every write path derives the stored status through resolve_match_status(),
so a match created or edited after its end time is COMPLETED immediately.
"""

import datetime as dt
import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Session, select

from clubhouse.config import club_now, utc_now
from clubhouse.database import get_session
from clubhouse.models.match import Match
from clubhouse.routes.players import PlayerResponse
from clubhouse.services.match_status import resolve_match_status, run_status_sweep
from clubhouse.services.notifier import MatchNotifier, get_notifier
from clubhouse.utils.statuses import MATCH_UPCOMING, normalize_match_status
from clubhouse.utils.time_range import parse_time_range

logger = logging.getLogger(__name__)

router = APIRouter()

TIME_RANGE_RE = re.compile(r"^\d{2}:\d{2}-\d{2}:\d{2}$")


# ============================================================================
# Request/Response Models
# ============================================================================


def _validate_title(v: str) -> str:
    v = (v or "").strip()
    if len(v) < 3:
        raise ValueError("title must be at least 3 characters")
    return v


def _validate_location(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("location is required")
    return v


def _validate_time(v: str) -> str:
    v = (v or "").strip()
    if not TIME_RANGE_RE.match(v) or parse_time_range(v) is None:
        raise ValueError("time must be in format HH:MM-HH:MM")
    return v


def _validate_fee(v: int) -> int:
    if v < 0:
        raise ValueError("fee must be a non-negative number")
    return v


class MatchCreateRequest(BaseModel):
    title: str
    location: str
    court_number: Optional[str] = None
    date: dt.date
    time: str
    fee: int = 0
    status: str = MATCH_UPCOMING
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _validate_title(v)

    @field_validator("location")
    @classmethod
    def validate_location(cls, v):
        return _validate_location(v)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return _validate_time(v)

    @field_validator("fee")
    @classmethod
    def validate_fee(cls, v):
        return _validate_fee(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return normalize_match_status(v)


class MatchUpdateRequest(BaseModel):
    title: Optional[str] = None
    location: Optional[str] = None
    court_number: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    fee: Optional[int] = None
    status: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return None if v is None else _validate_title(v)

    @field_validator("location")
    @classmethod
    def validate_location(cls, v):
        return None if v is None else _validate_location(v)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return None if v is None else _validate_time(v)

    @field_validator("fee")
    @classmethod
    def validate_fee(cls, v):
        return None if v is None else _validate_fee(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return None if v is None else normalize_match_status(v)


class MatchPlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    match_id: int
    player_id: int
    payment_status: str
    created_at: dt.datetime
    player: PlayerResponse


class MatchPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    player_id: int
    amount: int
    status: str
    paid_at: Optional[dt.datetime] = None


class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    location: str
    court_number: Optional[str] = None
    date: dt.date
    time: str
    fee: int
    status: str
    description: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime
    players: List[MatchPlayerResponse] = []
    payments: List[MatchPaymentResponse] = []


class AutoUpdateResponse(BaseModel):
    updated_count: int
    message: str


# Fields that must never be cleared by a partial update
REQUIRED_MATCH_FIELDS = ("title", "location", "date", "time", "fee", "status")


def get_match_or_404(session: Session, match_id: int) -> Match:
    match = session.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found.")
    return match


# ============================================================================
# Status auto-update
# ============================================================================


@router.post("/matches/auto-update", response_model=AutoUpdateResponse)
def auto_update_matches(
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """
    Complete every UPCOMING match whose end time has passed.

    Called by the dashboard on every load; safe to call repeatedly or
    concurrently with the background sweep.
    """
    try:
        updated = run_status_sweep(session, club_now())
    except Exception:
        logger.exception("Auto-update failed")
        raise HTTPException(status_code=500, detail="Failed to auto-update matches.")

    if updated:
        notifier.publish("auto_update")

    return AutoUpdateResponse(updated_count=updated, message=f"Successfully updated {updated} matches")


# ============================================================================
# Match CRUD Endpoints
# ============================================================================


@router.get("/matches", response_model=List[MatchResponse])
def list_matches(
    status: Optional[str] = Query(None, description="Filter by match status"),
    order: str = Query("asc", pattern="^(asc|desc)$", description="Sort by date"),
    session: Session = Depends(get_session),
):
    """List matches with their players and payments, ordered by date"""
    query = select(Match)
    if status:
        try:
            query = query.where(Match.status == normalize_match_status(status))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    if order == "desc":
        query = query.order_by(Match.date.desc(), Match.id.desc())
    else:
        query = query.order_by(Match.date, Match.id)
    return session.exec(query).all()


@router.get("/matches/{match_id}", response_model=MatchResponse)
def get_match(match_id: int, session: Session = Depends(get_session)):
    """Get a match by ID"""
    return get_match_or_404(session, match_id)


@router.post("/matches", response_model=MatchResponse, status_code=201)
def create_match(
    match_data: MatchCreateRequest,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """Create a match; status is resolved against the current time before saving"""
    payload = match_data.model_dump()
    payload["status"] = resolve_match_status(
        match_data.date, match_data.time, match_data.status, club_now()
    )
    match = Match(**payload)

    try:
        session.add(match)
        session.commit()
        session.refresh(match)
    except Exception:
        session.rollback()
        logger.exception("Failed to create match %r", match_data.title)
        raise HTTPException(status_code=500, detail="Failed to create match.")

    notifier.publish("match_created", match.id)
    return match


@router.put("/matches/{match_id}", response_model=MatchResponse)
def update_match(
    match_id: int,
    match_data: MatchUpdateRequest,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """Update only the supplied match fields, then re-resolve status"""
    match = get_match_or_404(session, match_id)

    update_data = match_data.model_dump(exclude_unset=True)
    cleared = [f for f in REQUIRED_MATCH_FIELDS if f in update_data and update_data[f] is None]
    if cleared:
        raise HTTPException(status_code=400, detail=f"{', '.join(cleared)} cannot be empty")

    for field, value in update_data.items():
        setattr(match, field, value)

    match.status = resolve_match_status(match.date, match.time, match.status, club_now())
    match.updated_at = utc_now()

    try:
        session.add(match)
        session.commit()
        session.refresh(match)
    except Exception:
        session.rollback()
        logger.exception("Failed to update match %s", match_id)
        raise HTTPException(status_code=500, detail="Failed to update match.")

    notifier.publish("match_updated", match.id)
    return match


@router.delete("/matches/{match_id}", status_code=204)
def delete_match(
    match_id: int,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """Delete a match and its roster entries and payments"""
    match = get_match_or_404(session, match_id)

    try:
        session.delete(match)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Failed to delete match %s", match_id)
        raise HTTPException(status_code=500, detail="Failed to delete match.")

    notifier.publish("match_deleted", match_id)
    return None
