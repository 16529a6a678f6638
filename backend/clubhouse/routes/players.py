"""
Player Roster API Routes
Provides CRUD operations for club players.
"""

import logging
import re
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from clubhouse.config import utc_now
from clubhouse.database import get_session
from clubhouse.models.player import Player
from clubhouse.services.notifier import MatchNotifier, get_notifier
from clubhouse.utils.statuses import (
    PLAYER_ACTIVE,
    normalize_player_name,
    normalize_player_status,
    player_name_key,
)

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# ============================================================================
# Request/Response Models
# ============================================================================


def _validate_name(v: str) -> str:
    name = normalize_player_name(v or "")
    if len(name) < 2:
        raise ValueError("name must be at least 2 characters")
    return name


def _validate_email(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return None
    v = v.strip()
    if not EMAIL_RE.match(v):
        raise ValueError("email must be a valid email address")
    return v


class PlayerCreateRequest(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str = PLAYER_ACTIVE

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _validate_name(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _validate_email(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return normalize_player_status(v)


class PlayerUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return None if v is None else _validate_name(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _validate_email(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return None if v is None else normalize_player_status(v)


class PlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


def find_player_by_name(session: Session, name: str) -> Optional[Player]:
    """Look up a player by case/whitespace-insensitive name."""
    return session.exec(select(Player).where(Player.name_key == player_name_key(name))).first()


# ============================================================================
# Player CRUD Endpoints
# ============================================================================


@router.get("/players", response_model=List[PlayerResponse])
def list_players(
    status: Optional[str] = Query(None, description="Filter by player status"),
    search: Optional[str] = Query(None, description="Case-insensitive name substring"),
    session: Session = Depends(get_session),
):
    """List players ordered by name"""
    query = select(Player)
    if status:
        try:
            query = query.where(Player.status == normalize_player_status(status))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    if search and search.strip():
        query = query.where(Player.name_key.contains(player_name_key(search), autoescape=True))
    return session.exec(query.order_by(Player.name_key, Player.id)).all()


@router.get("/players/{player_id}", response_model=PlayerResponse)
def get_player(player_id: int, session: Session = Depends(get_session)):
    """Get a player by ID"""
    player = session.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found.")
    return player


@router.post("/players", response_model=PlayerResponse, status_code=201)
def create_player(request: PlayerCreateRequest, session: Session = Depends(get_session)):
    """
    Create a new player.

    Names are unique regardless of case and surrounding/internal whitespace.
    """
    if find_player_by_name(session, request.name):
        raise HTTPException(status_code=409, detail="Player already exists.")

    player = Player(
        name=request.name,
        name_key=player_name_key(request.name),
        email=request.email,
        phone=request.phone,
        status=request.status,
    )

    try:
        session.add(player)
        session.commit()
        session.refresh(player)
        return player
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="Player already exists.")
    except Exception:
        session.rollback()
        logger.exception("Failed to create player %r", request.name)
        raise HTTPException(status_code=500, detail="Failed to create player.")


@router.put("/players/{player_id}", response_model=PlayerResponse)
def update_player(player_id: int, request: PlayerUpdateRequest, session: Session = Depends(get_session)):
    """Update only the supplied player fields"""
    player = session.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found.")

    update_data = request.model_dump(exclude_unset=True)
    if "name" in update_data:
        if update_data["name"] is None:
            raise HTTPException(status_code=400, detail="name cannot be empty")
        existing = find_player_by_name(session, update_data["name"])
        if existing and existing.id != player.id:
            raise HTTPException(status_code=409, detail="Player already exists.")
        player.name_key = player_name_key(update_data["name"])
    if "status" in update_data and update_data["status"] is None:
        raise HTTPException(status_code=400, detail="status cannot be empty")

    for field, value in update_data.items():
        setattr(player, field, value)
    player.updated_at = utc_now()

    try:
        session.add(player)
        session.commit()
        session.refresh(player)
        return player
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="Player already exists.")
    except Exception:
        session.rollback()
        logger.exception("Failed to update player %s", player_id)
        raise HTTPException(status_code=500, detail="Failed to update player.")


@router.delete("/players/{player_id}", status_code=204)
def delete_player(
    player_id: int,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """Delete a player together with their match entries and payments"""
    player = session.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found.")

    # Rosters and payments of these matches change with the cascade
    affected_match_ids = sorted(
        {entry.match_id for entry in player.match_entries} | {payment.match_id for payment in player.payments}
    )

    session.delete(player)
    session.commit()

    for match_id in affected_match_ids:
        notifier.publish("player_deleted", match_id)
    return None
