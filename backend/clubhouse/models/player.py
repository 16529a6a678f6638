from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from clubhouse.config import utc_now

if TYPE_CHECKING:
    from clubhouse.models.match_player import MatchPlayer
    from clubhouse.models.payment import Payment


class Player(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("name_key", name="uq_player_name_key"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str  # trimmed display name
    name_key: str = Field(index=True)  # case-folded, whitespace-collapsed name
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    status: str = Field(default="ACTIVE")  # "ACTIVE" | "INACTIVE" | "TENTATIVE"
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now})

    # Relationships
    match_entries: List["MatchPlayer"] = Relationship(
        back_populates="player", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    payments: List["Payment"] = Relationship(
        back_populates="player", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
