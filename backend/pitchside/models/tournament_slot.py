from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from pitchside.models.player import Player
    from pitchside.models.tournament import Tournament


class SlotStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    waitlist = "waitlist"
    rejected = "rejected"


class TournamentSlot(SQLModel, table=True):
    """
    One registrant's place in a tournament.

    Main vs waitlist is never stored: it is derived from slot_number against
    Tournament.total_slots on every read (see services.capacity_classifier).
    """

    __tablename__ = "tournament_slots"
    __table_args__ = (
        SAUniqueConstraint("tournament_id", "slot_number", name="unique_tournament_slot"),
        SAUniqueConstraint("tournament_id", "player_id", name="unique_tournament_player"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournaments.id", index=True)
    slot_number: int
    player_id: Optional[int] = Field(default=None, foreign_key="players.id")
    status: str = Field(default=SlotStatus.pending.value, max_length=20)  # SlotStatus
    requested_at: datetime = Field(default_factory=datetime.utcnow)  # FIFO key for the waitlist
    approved_at: Optional[datetime] = None
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="slots")
    player: Optional["Player"] = Relationship(back_populates="slots")
