from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from pitchside.models.tournament_slot import TournamentSlot


class TournamentStatus(str, Enum):
    draft = "draft"
    registration_open = "registration_open"
    registration_closed = "registration_closed"
    in_progress = "in_progress"
    completed = "completed"


class Tournament(SQLModel, table=True):
    __tablename__ = "tournaments"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    host_id: int = Field(foreign_key="users.id", index=True)
    total_slots: int  # Main-roster capacity; slot numbers above it are waitlist
    status: str = Field(default=TournamentStatus.draft.value, max_length=30)  # TournamentStatus
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})

    # Relationships
    slots: List["TournamentSlot"] = Relationship(back_populates="tournament")
