import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session

from pitchside.database import get_session
from pitchside.services.registration_service import (
    RegistrationError,
    assign_player,
    get_user_registration,
    register_player,
    withdraw_player,
)
from pitchside.services.slot_store import get_player_for_user
from pitchside.utils.access_guards import get_tournament_or_404, require_host_or_admin
from pitchside.utils.actor import Actor, get_current_actor

logger = logging.getLogger(__name__)

router = APIRouter()


class SlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    slot_number: int
    player_id: Optional[int] = None
    status: str
    requested_at: datetime
    approved_at: Optional[datetime] = None


class RegistrationResponse(BaseModel):
    success: bool
    message: str
    slot: SlotResponse


class PromotionSummary(BaseModel):
    success: bool
    message: str
    promoted_player_id: Optional[int] = None
    new_slot: Optional[int] = None


class WithdrawalResponse(BaseModel):
    success: bool
    message: str
    promotion: Optional[PromotionSummary] = None


class UserRegistrationBody(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slot_number: int
    status: str
    requested_at: datetime
    approved_at: Optional[datetime] = None
    position: int
    is_main_slot: bool
    waitlist_position: Optional[int] = None


class UserRegistrationResponse(BaseModel):
    success: bool = True
    registration: Optional[UserRegistrationBody] = None


class AssignPlayerRequest(BaseModel):
    player_id: int
    status: str = "pending"  # pending|approved


def promotion_summary(result) -> Optional[PromotionSummary]:
    if result is None:
        return None
    if not result.promoted:
        return PromotionSummary(success=False, message=result.message)
    return PromotionSummary(
        success=True,
        message=result.message,
        promoted_player_id=result.decision.candidate_player_id,
        new_slot=result.decision.to_slot_number,
    )


def _get_actor_player_or_400(session: Session, actor: Actor):
    player = get_player_for_user(session, actor.id)
    if not player:
        raise HTTPException(
            status_code=400, detail="Player profile not found. Please create a player profile first."
        )
    return player


@router.post("/tournaments/{tournament_id}/register", response_model=RegistrationResponse)
def register(
    tournament_id: int,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """Register the caller's player profile: a main slot when free, otherwise the waitlist"""
    tournament = get_tournament_or_404(session, tournament_id)
    player = _get_actor_player_or_400(session, actor)
    try:
        slot, message = register_player(session, tournament, player)
    except RegistrationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return RegistrationResponse(success=True, message=message, slot=SlotResponse.model_validate(slot))


@router.delete("/tournaments/{tournament_id}/register", response_model=WithdrawalResponse)
def withdraw(
    tournament_id: int,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """Withdraw the caller's registration and promote the next queued player"""
    tournament = get_tournament_or_404(session, tournament_id)
    player = _get_actor_player_or_400(session, actor)
    try:
        promotion = withdraw_player(session, tournament, player)
    except RegistrationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return WithdrawalResponse(
        success=True,
        message="Registration cancelled successfully",
        promotion=promotion_summary(promotion),
    )


@router.get("/tournaments/{tournament_id}/user-registration", response_model=UserRegistrationResponse)
def user_registration(
    tournament_id: int,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """The caller's own registration, or registration=null when not registered"""
    tournament = get_tournament_or_404(session, tournament_id)
    player = get_player_for_user(session, actor.id)
    if not player:
        raise HTTPException(
            status_code=404, detail="Player profile not found. Please create a player profile first."
        )

    registration = get_user_registration(session, tournament, player)
    if registration is None:
        return UserRegistrationResponse(registration=None)
    return UserRegistrationResponse(registration=UserRegistrationBody.model_validate(registration))


@router.post("/tournaments/{tournament_id}/assign-player", response_model=RegistrationResponse)
def assign_player_to_tournament(
    tournament_id: int,
    body: AssignPlayerRequest,
    actor: Actor = Depends(get_current_actor),
    session: Session = Depends(get_session),
):
    """Host/admin adds a player directly; main slot if free, otherwise the waitlist"""
    tournament = get_tournament_or_404(session, tournament_id)
    require_host_or_admin(tournament, actor)
    try:
        slot, message = assign_player(session, tournament, body.player_id, body.status)
    except RegistrationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return RegistrationResponse(success=True, message=message, slot=SlotResponse.model_validate(slot))
