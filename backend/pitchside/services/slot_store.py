"""
Slot Store queries.

All reads of tournament_slots go through here so FIFO ordering
(requested_at, then insertion id) is applied the same way everywhere.
"""
from typing import List, Optional

from sqlmodel import Session, select

from pitchside.models.player import Player
from pitchside.models.tournament_slot import SlotStatus, TournamentSlot


def fifo_order():
    """ORDER BY for the waitlist: requested_at ascending, ties by insertion order."""
    return (TournamentSlot.requested_at, TournamentSlot.id)


def get_tournament_slots(session: Session, tournament_id: int) -> List[TournamentSlot]:
    """All slot rows of a tournament, by slot number."""
    return list(
        session.exec(
            select(TournamentSlot)
            .where(TournamentSlot.tournament_id == tournament_id)
            .order_by(TournamentSlot.slot_number)
        ).all()
    )


def get_waitlist_rows(session: Session, tournament_id: int, total_slots: int) -> List[TournamentSlot]:
    """Queued registrants beyond capacity, FIFO ordered."""
    return list(
        session.exec(
            select(TournamentSlot)
            .where(
                TournamentSlot.tournament_id == tournament_id,
                TournamentSlot.slot_number > total_slots,
                TournamentSlot.player_id.is_not(None),
                TournamentSlot.status == SlotStatus.waitlist.value,
            )
            .order_by(*fifo_order())
        ).all()
    )


def get_slot(session: Session, tournament_id: int, slot_id: int) -> Optional[TournamentSlot]:
    slot = session.get(TournamentSlot, slot_id)
    if slot is None or slot.tournament_id != tournament_id:
        return None
    return slot


def get_player_slot(session: Session, tournament_id: int, player_id: int) -> Optional[TournamentSlot]:
    return session.exec(
        select(TournamentSlot).where(
            TournamentSlot.tournament_id == tournament_id,
            TournamentSlot.player_id == player_id,
        )
    ).first()


def get_player_for_user(session: Session, user_id: int) -> Optional[Player]:
    return session.exec(select(Player).where(Player.user_id == user_id)).first()


def lowest_free_main_slot(used_numbers, total_slots: int) -> Optional[int]:
    """Lowest number in [1, total_slots] not present in used_numbers, or None when full."""
    used = set(used_numbers)
    for n in range(1, total_slots + 1):
        if n not in used:
            return n
    return None
