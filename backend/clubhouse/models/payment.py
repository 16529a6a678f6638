from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel

from clubhouse.config import utc_now

if TYPE_CHECKING:
    from clubhouse.models.match import Match
    from clubhouse.models.player import Player


class Payment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    amount: int  # smallest currency unit
    status: str = Field(default="PENDING")  # "PENDING" | "PAID" | "CANCELLED"
    method: Optional[str] = Field(default=None)  # e.g. "CASH", "TRANSFER"
    notes: Optional[str] = Field(default=None)
    paid_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))  # set on transition to PAID
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now})

    # Relationships
    match: "Match" = Relationship(back_populates="payments")
    player: "Player" = Relationship(back_populates="payments")
