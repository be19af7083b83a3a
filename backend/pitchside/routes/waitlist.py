"""Waitlist routes: host-triggered promotion and queue status.

"Nothing to promote" is a normal state and answers 200 with success=false,
so clients never see an error banner (or retry) for an empty queue.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from pitchside.database import get_session
from pitchside.services.capacity_classifier import waitlist_position
from pitchside.services.waitlist_promotion import PromotionStoreError, promote_next
from pitchside.services.waitlist_status import get_waitlist_status
from pitchside.utils.access_guards import get_tournament_or_404, require_host_or_admin
from pitchside.utils.actor import Actor, get_current_actor

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class PlayerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    display_name: str


class WaitlistEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    slot_number: int
    player_id: int
    status: str
    requested_at: datetime
    waitlist_position: Optional[int] = None
    player: Optional[PlayerSummary] = None


class WaitlistStatusBody(BaseModel):
    players: List[WaitlistEntry]
    total_count: int
    user_position: int
    tournament_total_slots: int


class WaitlistStatusResponse(BaseModel):
    success: bool = True
    waitlist: WaitlistStatusBody


class PromotedPlayer(BaseModel):
    id: int
    new_slot: int


class PromotionResponse(BaseModel):
    success: bool
    message: str
    promoted_player: Optional[PromotedPlayer] = None


def store_error_response(error: str, details: Optional[str], code: Optional[str]) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": error, "details": details, "code": code})


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/tournaments/{tournament_id}/promote-waitlist", response_model=PromotionResponse)
def promote_waitlist(
    tournament_id: int,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """Promote the longest-waiting registrant into the lowest free main slot (host/admin only)"""
    tournament = get_tournament_or_404(session, tournament_id)
    require_host_or_admin(tournament, actor)

    try:
        result = promote_next(session, tournament)
    except PromotionStoreError as e:
        return store_error_response(e.message, e.details, e.code)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Promotion failed: tournament_id=%s", tournament_id)
        return store_error_response("Failed to promote waitlist player", str(e), type(e).__name__)

    if not result.promoted:
        return PromotionResponse(success=False, message=result.message)

    return PromotionResponse(
        success=True,
        message=result.message,
        promoted_player=PromotedPlayer(
            id=result.decision.candidate_player_id,
            new_slot=result.decision.to_slot_number,
        ),
    )


@router.get("/tournaments/{tournament_id}/promote-waitlist", response_model=WaitlistStatusResponse)
def waitlist_status(
    tournament_id: int,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """Queue status and the caller's position (any authenticated caller)"""
    tournament = get_tournament_or_404(session, tournament_id)
    status = get_waitlist_status(session, tournament, actor.id)

    entries = []
    for row in status.players:
        entry = WaitlistEntry.model_validate(row)
        entry.waitlist_position = waitlist_position(row.slot_number, status.tournament_total_slots)
        entries.append(entry)

    return WaitlistStatusResponse(
        waitlist=WaitlistStatusBody(
            players=entries,
            total_count=status.total_count,
            user_position=status.user_position,
            tournament_total_slots=status.tournament_total_slots,
        )
    )
