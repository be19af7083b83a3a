"""
Waitlist status projection (read-only).

Players are the queued rows beyond capacity in FIFO order; user_position is
the requesting user's 1-based rank among them, 0 when not queued.
"""
from dataclasses import dataclass
from typing import List, Optional

from sqlmodel import Session

from pitchside.models.tournament import Tournament
from pitchside.models.tournament_slot import TournamentSlot
from pitchside.services.slot_store import get_player_for_user, get_waitlist_rows


@dataclass
class WaitlistStatus:
    players: List[TournamentSlot]
    total_count: int
    user_position: int
    tournament_total_slots: int


def queue_position(rows: List[TournamentSlot], player_id: Optional[int]) -> int:
    if player_id is None:
        return 0
    for index, row in enumerate(rows):
        if row.player_id == player_id:
            return index + 1
    return 0


def get_waitlist_status(session: Session, tournament: Tournament, requesting_user_id: int) -> WaitlistStatus:
    rows = get_waitlist_rows(session, tournament.id, tournament.total_slots)
    player = get_player_for_user(session, requesting_user_id)
    return WaitlistStatus(
        players=rows,
        total_count=len(rows),
        user_position=queue_position(rows, player.id if player else None),
        tournament_total_slots=tournament.total_slots,
    )
