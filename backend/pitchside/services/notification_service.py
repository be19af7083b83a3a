"""Notifier: durable in-app notifications.

Writing a notification is a side effect of the slot change it reports, never
part of that change's correctness: failures are logged and swallowed here.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from pitchside.models.notification import (
    NOTIFICATION_TOURNAMENT_ASSIGNMENT,
    NOTIFICATION_WAITLIST_PROMOTION,
    Notification,
)

logger = logging.getLogger(__name__)

PROMOTION_TITLE = "You have been promoted from the waitlist!"
ASSIGNMENT_TITLE = "Tournament Assignment"


def promotion_message(new_slot_number: int) -> str:
    return (
        f"You have been promoted to position {new_slot_number} in the tournament. "
        "Please wait for host approval."
    )


def notify_waitlist_promotion(
    session: Session, user_id: int, tournament_id: int, new_slot_number: int
) -> Optional[Notification]:
    """
    Record a waitlist-promotion notification for the promoted user.

    Best-effort: returns None (after rolling back the notification insert)
    if the write fails. The promotion itself is already committed.
    """
    notification = Notification(
        user_id=user_id,
        type=NOTIFICATION_WAITLIST_PROMOTION,
        title=PROMOTION_TITLE,
        message=promotion_message(new_slot_number),
        data={
            "tournament_id": tournament_id,
            "new_slot_number": new_slot_number,
            "promoted_at": datetime.now(timezone.utc).isoformat(),
        },
    )
    try:
        session.add(notification)
        session.commit()
        session.refresh(notification)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Promotion notification failed: tournament_id=%s user_id=%s new_slot=%s",
            tournament_id, user_id, new_slot_number,
        )
        return None

    logger.info(
        "Promotion notification created: id=%s tournament_id=%s user_id=%s new_slot=%s",
        notification.id, tournament_id, user_id, new_slot_number,
    )
    return notification


def notify_tournament_assignment(
    session: Session, user_id: int, tournament_id: int, tournament_name: str, slot_id: int, status: str
) -> Optional[Notification]:
    """Tell a player the host put them in a tournament. Best-effort like the promotion notice."""
    verb = "confirmed" if status == "approved" else "assigned"
    notification = Notification(
        user_id=user_id,
        type=NOTIFICATION_TOURNAMENT_ASSIGNMENT,
        title=ASSIGNMENT_TITLE,
        message=f'You have been {verb} to tournament "{tournament_name}" by the host.',
        data={
            "tournament_id": tournament_id,
            "slot_id": slot_id,
            "status": status,
            "assigned_by_host": True,
        },
    )
    try:
        session.add(notification)
        session.commit()
        session.refresh(notification)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Assignment notification failed: tournament_id=%s user_id=%s slot_id=%s",
            tournament_id, user_id, slot_id,
        )
        return None

    logger.info(
        "Assignment notification created: id=%s tournament_id=%s user_id=%s slot_id=%s",
        notification.id, tournament_id, user_id, slot_id,
    )
    return notification


def list_user_notifications(
    session: Session, user_id: int, unread_only: bool = False, limit: int = 100
) -> List[Notification]:
    query = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        query = query.where(Notification.is_read == False)  # noqa: E712
    query = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    return list(session.exec(query).all())


def mark_notification_read(session: Session, notification_id: int, user_id: int) -> Notification:
    notification = session.get(Notification, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    if notification.user_id != user_id:
        raise HTTPException(status_code=403, detail="Not authorized to mark this notification as read")

    if not notification.is_read:  # Avoid an unnecessary write
        notification.is_read = True
        session.add(notification)
        session.commit()
        session.refresh(notification)
    return notification


def mark_all_read(session: Session, user_id: int) -> int:
    """Mark every unread notification of a user as read. Returns how many changed."""
    unread = session.exec(
        select(Notification).where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
    ).all()
    for notification in unread:
        notification.is_read = True
        session.add(notification)
    if unread:
        session.commit()
    return len(unread)
