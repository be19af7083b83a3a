"""Notification model: durable in-app messages addressed to a user."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, SQLModel

NOTIFICATION_WAITLIST_PROMOTION = "waitlist_promotion"
NOTIFICATION_TOURNAMENT_ASSIGNMENT = "tournament_assignment"


class Notification(SQLModel, table=True):
    """Append-only record; only is_read ever changes after insert."""

    __tablename__ = "notifications"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    type: str  # waitlist_promotion|tournament_assignment
    title: str
    message: str
    data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    is_read: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
