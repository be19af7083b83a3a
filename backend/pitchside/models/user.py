from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from pitchside.models.player import Player

ROLE_ADMIN = "admin"
ROLE_HOST = "host"
ROLE_PLAYER = "player"


class User(SQLModel, table=True):
    """Account row. Only `role` is read here; auth and profile management live elsewhere."""

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True)
    username: Optional[str] = None
    role: str = Field(default=ROLE_PLAYER, max_length=20)  # admin|host|player
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    player: Optional["Player"] = Relationship(
        back_populates="user", sa_relationship_kwargs={"uselist": False}
    )
