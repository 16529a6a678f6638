from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from clubhouse.config import utc_now

if TYPE_CHECKING:
    from clubhouse.models.match import Match
    from clubhouse.models.player import Player


class MatchPlayer(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("match_id", "player_id", name="uq_match_player"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    payment_status: str = Field(default="BELUM_SETOR")  # "BELUM_SETOR" (unpaid) | "SUDAH_SETOR" (paid)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    # Relationships
    match: "Match" = Relationship(back_populates="players")
    player: "Player" = Relationship(back_populates="match_entries")
