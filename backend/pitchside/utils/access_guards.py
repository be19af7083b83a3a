"""
Access Guards

Reusable lookups and checks for tournament-scoped operations:
- Tournament existence (404)
- Host-or-admin authorization (403)
- Slot ownership within a tournament (404)
"""

import logging

from fastapi import HTTPException
from sqlmodel import Session

from pitchside.models.tournament import Tournament
from pitchside.models.tournament_slot import TournamentSlot
from pitchside.services.slot_store import get_slot
from pitchside.utils.actor import Actor

logger = logging.getLogger(__name__)


def get_tournament_or_404(session: Session, tournament_id: int) -> Tournament:
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return tournament


def is_host_or_admin(tournament: Tournament, actor: Actor) -> bool:
    """Allowed iff the actor hosts this tournament or is an administrator."""
    return actor.id == tournament.host_id or actor.is_admin


def require_host_or_admin(tournament: Tournament, actor: Actor) -> None:
    """
    Require that the actor may run host operations on the tournament.

    Raises:
        HTTPException 403: Actor is neither the host nor an admin
    """
    if not is_host_or_admin(tournament, actor):
        logger.info("Access denied: tournament_id=%s actor_id=%s role=%s", tournament.id, actor.id, actor.role)
        raise HTTPException(status_code=403, detail="Access denied")


def get_slot_or_404(session: Session, tournament_id: int, slot_id: int) -> TournamentSlot:
    slot = get_slot(session, tournament_id, slot_id)
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")
    return slot
