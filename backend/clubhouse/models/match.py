from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime
from sqlalchemy import Index as SAIndex
from sqlmodel import Field, Relationship, SQLModel

from clubhouse.config import utc_now

if TYPE_CHECKING:
    from clubhouse.models.match_player import MatchPlayer
    from clubhouse.models.payment import Payment


class Match(SQLModel, table=True):
    __table_args__ = (SAIndex("ix_match_date", "date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    location: str
    court_number: Optional[str] = Field(default=None)
    date: date  # calendar date, no time component
    time: str  # "HH:MM-HH:MM", may cross midnight
    fee: int = Field(default=0)  # smallest currency unit
    status: str = Field(default="UPCOMING", index=True)  # "UPCOMING" | "COMPLETED"
    description: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now})

    # Relationships (owned rows go with the match)
    players: List["MatchPlayer"] = Relationship(
        back_populates="match",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "MatchPlayer.id"},
    )
    payments: List["Payment"] = Relationship(
        back_populates="match",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Payment.id"},
    )
