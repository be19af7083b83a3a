from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session

from pitchside.database import get_session
from pitchside.services.notification_service import (
    list_user_notifications,
    mark_all_read,
    mark_notification_read,
)
from pitchside.utils.actor import Actor, get_current_actor

router = APIRouter()


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: str
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: datetime


class MarkAllReadResponse(BaseModel):
    updated: int


@router.get("/notifications", response_model=List[NotificationResponse])
def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(100, ge=1, le=500),
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """The caller's notifications, newest first"""
    return list_user_notifications(session, actor.id, unread_only=unread_only, limit=limit)


@router.patch("/notifications/{notification_id}/read", response_model=NotificationResponse)
def read_notification(
    notification_id: int,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    return mark_notification_read(session, notification_id, actor.id)


@router.post("/notifications/read-all", response_model=MarkAllReadResponse)
def read_all_notifications(
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    return MarkAllReadResponse(updated=mark_all_read(session, actor.id))
