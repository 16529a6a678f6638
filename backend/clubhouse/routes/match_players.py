"""
Match Roster API Routes
Adds/removes players on a match and tracks each player's per-match
contribution (BELUM_SETOR = not yet paid, SUDAH_SETOR = paid).
"""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from clubhouse.database import get_session
from clubhouse.models.match import Match
from clubhouse.models.match_player import MatchPlayer
from clubhouse.models.player import Player
from clubhouse.routes.matches import MatchPlayerResponse, get_match_or_404
from clubhouse.routes.players import PlayerResponse
from clubhouse.services.notifier import MatchNotifier, get_notifier
from clubhouse.utils.statuses import MATCH_COMPLETED, normalize_setor_status, player_name_key

logger = logging.getLogger(__name__)

router = APIRouter()

# How many earlier completed matches feed the "past players" suggestions
PAST_MATCHES_LOOKBACK = 3


class MatchPlayerCreateRequest(BaseModel):
    player_id: int


class MatchPlayerUpdateRequest(BaseModel):
    payment_status: str

    @field_validator("payment_status")
    @classmethod
    def validate_payment_status(cls, v):
        return normalize_setor_status(v)


def _get_entry(session: Session, match_id: int, player_id: int) -> MatchPlayer:
    return session.exec(
        select(MatchPlayer).where(MatchPlayer.match_id == match_id, MatchPlayer.player_id == player_id)
    ).first()


@router.get("/matches/{match_id}/players", response_model=List[MatchPlayerResponse])
def list_match_players(match_id: int, session: Session = Depends(get_session)):
    """Players signed up for a match, in the order they were added"""
    match = get_match_or_404(session, match_id)
    return match.players


@router.post("/matches/{match_id}/players", response_model=MatchPlayerResponse, status_code=201)
def add_player_to_match(
    match_id: int,
    request: MatchPlayerCreateRequest,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """
    Add a player to a match.

    Constraints:
    - (match_id, player_id) must be unique → 400 when the player is already in
    """
    get_match_or_404(session, match_id)
    if not session.get(Player, request.player_id):
        raise HTTPException(status_code=404, detail="Player not found.")

    if _get_entry(session, match_id, request.player_id):
        raise HTTPException(status_code=400, detail="Player is already in this match.")

    entry = MatchPlayer(match_id=match_id, player_id=request.player_id)
    try:
        session.add(entry)
        session.commit()
        session.refresh(entry)
    except IntegrityError:
        # Lost a race against a concurrent insert of the same pair
        session.rollback()
        raise HTTPException(status_code=400, detail="Player is already in this match.")
    except Exception:
        session.rollback()
        logger.exception("Failed to add player %s to match %s", request.player_id, match_id)
        raise HTTPException(status_code=500, detail="Failed to add player to match.")

    notifier.publish("player_added", match_id)
    return entry


@router.patch("/matches/{match_id}/players/{player_id}", response_model=MatchPlayerResponse)
def update_match_player(
    match_id: int,
    player_id: int,
    request: MatchPlayerUpdateRequest,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """Set a player's contribution status for this match"""
    entry = _get_entry(session, match_id, player_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Player is not in this match.")

    entry.payment_status = request.payment_status
    session.add(entry)
    session.commit()
    session.refresh(entry)

    notifier.publish("payment_status_changed", match_id)
    return entry


@router.delete("/matches/{match_id}/players/{player_id}", status_code=204)
def remove_player_from_match(
    match_id: int,
    player_id: int,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """Remove a player from a match"""
    entry = _get_entry(session, match_id, player_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Player is not in this match.")

    session.delete(entry)
    session.commit()

    notifier.publish("player_removed", match_id)
    return None


@router.get("/matches/{match_id}/players/past", response_model=List[PlayerResponse])
def list_past_players(match_id: int, session: Session = Depends(get_session)):
    """
    Suggest players from the most recent completed matches.

    Looks at the 3 latest COMPLETED matches dated strictly before this one and
    returns their players once per normalized name. When two player records
    share a name, the most recently updated one wins; ordering follows first
    appearance (newest match first).
    """
    current = get_match_or_404(session, match_id)

    past_matches = session.exec(
        select(Match)
        .where(Match.date < current.date, Match.status == MATCH_COMPLETED)
        .order_by(Match.date.desc(), Match.id.desc())
        .limit(PAST_MATCHES_LOOKBACK)
    ).all()

    by_name: Dict[str, Player] = {}
    for past in past_matches:
        for entry in past.players:
            player = entry.player
            key = player_name_key(player.name)
            existing = by_name.get(key)
            if existing is None or existing.updated_at < player.updated_at:
                by_name[key] = player

    return list(by_name.values())
