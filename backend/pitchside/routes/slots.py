"""
Host roster management: list, approve/reject, remove.

Host or admin only. Reject and remove free a slot number and immediately
try to promote the next queued registrant into it.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from pitchside.database import get_session
from pitchside.routes.registrations import PromotionSummary, SlotResponse, promotion_summary
from pitchside.services.registration_service import (
    RegistrationError,
    list_tournament_slots,
    remove_slot,
    review_slot,
)
from pitchside.utils.access_guards import get_slot_or_404, get_tournament_or_404, require_host_or_admin
from pitchside.utils.actor import Actor, get_current_actor

router = APIRouter()


class SlotReviewRequest(BaseModel):
    action: str  # approve|reject


class SlotReviewResponse(BaseModel):
    success: bool
    message: str
    slot: Optional[SlotResponse] = None
    promotion: Optional[PromotionSummary] = None


class SlotRemovalResponse(BaseModel):
    success: bool
    message: str
    promotion: Optional[PromotionSummary] = None


class RosterResponse(BaseModel):
    success: bool = True
    tournament_id: int
    slots: List[Dict[str, Any]]
    stats: Dict[str, int]


@router.get("/tournaments/{tournament_id}/slots", response_model=RosterResponse)
def get_slots(
    tournament_id: int,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """Full roster with empty main placeholders and stats"""
    tournament = get_tournament_or_404(session, tournament_id)
    require_host_or_admin(tournament, actor)
    roster = list_tournament_slots(session, tournament)
    return RosterResponse(tournament_id=tournament_id, slots=roster["slots"], stats=roster["stats"])


@router.put("/tournaments/{tournament_id}/slots/{slot_id}", response_model=SlotReviewResponse)
def update_slot(
    tournament_id: int,
    slot_id: int,
    body: SlotReviewRequest,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """Approve or reject a pending registration"""
    tournament = get_tournament_or_404(session, tournament_id)
    require_host_or_admin(tournament, actor)
    slot = get_slot_or_404(session, tournament_id, slot_id)

    try:
        updated, promotion = review_slot(session, tournament, slot, body.action)
    except RegistrationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if updated is not None:
        return SlotReviewResponse(
            success=True,
            message="Slot approved successfully",
            slot=SlotResponse.model_validate(updated),
        )
    return SlotReviewResponse(
        success=True,
        message="Slot rejected successfully",
        promotion=promotion_summary(promotion),
    )


@router.delete("/tournaments/{tournament_id}/slots/{slot_id}", response_model=SlotRemovalResponse)
def delete_slot(
    tournament_id: int,
    slot_id: int,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """Remove a registration outright and refill its number from the waitlist"""
    tournament = get_tournament_or_404(session, tournament_id)
    require_host_or_admin(tournament, actor)
    slot = get_slot_or_404(session, tournament_id, slot_id)

    promotion = remove_slot(session, tournament, slot)
    return SlotRemovalResponse(
        success=True,
        message="Slot removed successfully",
        promotion=promotion_summary(promotion),
    )
