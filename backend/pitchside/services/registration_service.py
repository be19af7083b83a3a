"""
Registration lifecycle around the slot table.

- register / host assign: pick a slot number (main if free and nobody is
  queued, otherwise the back of the waitlist) and insert the row
- withdraw / reject / remove: delete the row, then try to promote the next
  queued registrant into the freed number
- approve: pending -> approved

Rows exist only for registrants; freeing capacity always means deleting the row.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from pitchside.config import REGISTRATION_MAX_ATTEMPTS, REGISTRATION_RETRY_DELAY_MS
from pitchside.models.player import Player
from pitchside.models.tournament import Tournament, TournamentStatus
from pitchside.models.tournament_slot import SlotStatus, TournamentSlot
from pitchside.services.capacity_classifier import is_main_slot, waitlist_position
from pitchside.services.notification_service import notify_tournament_assignment
from pitchside.services.slot_store import get_player_slot, get_tournament_slots, lowest_free_main_slot
from pitchside.services.waitlist_promotion import PromotionResult, PromotionStoreError, promote_next
from pitchside.utils.retry import RetriesExhausted, WriteConflict, retry_on_conflict

logger = logging.getLogger(__name__)

ACTION_APPROVE = "approve"
ACTION_REJECT = "reject"

ASSIGNABLE_STATUSES = (SlotStatus.pending.value, SlotStatus.approved.value)


class RegistrationError(Exception):
    """Registration rule violated; carries the HTTP status to report."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def next_registration_slot_number(rows: List[TournamentSlot], total_slots: int) -> int:
    """
    Slot number for a new registrant.

    With nobody queued, the lowest free main number. Otherwise (or when main
    is full) one past the highest number in use, never below total_slots + 1,
    so a newcomer cannot overtake the waitlist.
    """
    queued = any(
        r.slot_number > total_slots and r.status == SlotStatus.waitlist.value and r.player_id is not None
        for r in rows
    )
    if not queued:
        free = lowest_free_main_slot((r.slot_number for r in rows), total_slots)
        if free is not None:
            return free
    highest = max((r.slot_number for r in rows), default=0)
    return max(highest, total_slots) + 1


def _insert_slot(
    session: Session, tournament_id: int, total_slots: int, player_id: int, main_status: str
) -> TournamentSlot:
    """
    Insert a row for player_id at the next registration number.

    main_status applies on a main number; a waitlist number is always status
    waitlist. Unique-slot conflicts are retried from a fresh read.
    """

    def attempt(n: int) -> TournamentSlot:
        rows = get_tournament_slots(session, tournament_id)
        slot_number = next_registration_slot_number(rows, total_slots)
        main = is_main_slot(slot_number, total_slots)
        now = datetime.utcnow()
        slot = TournamentSlot(
            tournament_id=tournament_id,
            slot_number=slot_number,
            player_id=player_id,
            status=main_status if main else SlotStatus.waitlist.value,
            requested_at=now,
            approved_at=now if main and main_status == SlotStatus.approved.value else None,
        )
        try:
            session.add(slot)
            session.commit()
        except IntegrityError as e:
            session.rollback()
            if get_player_slot(session, tournament_id, player_id):
                raise RegistrationError(400, "Player already registered for this tournament") from e
            raise WriteConflict(f"slot number {slot_number} taken") from e
        session.refresh(slot)
        return slot

    try:
        return retry_on_conflict(
            attempt,
            max_attempts=REGISTRATION_MAX_ATTEMPTS,
            delay_ms=REGISTRATION_RETRY_DELAY_MS,
            label=f"registration tournament_id={tournament_id} player_id={player_id}",
        )
    except RetriesExhausted as e:
        raise RegistrationError(400, "Slot number already taken. Please try again.") from e


def register_player(session: Session, tournament: Tournament, player: Player) -> Tuple[TournamentSlot, str]:
    """Create the player's slot row. Returns (slot, user-facing message)."""
    tournament_id = tournament.id
    total_slots = tournament.total_slots
    player_id = player.id

    if tournament.status != TournamentStatus.registration_open.value:
        raise RegistrationError(400, "Tournament registration is not open")
    if get_player_slot(session, tournament_id, player_id):
        raise RegistrationError(400, "Player already registered for this tournament")

    slot = _insert_slot(session, tournament_id, total_slots, player_id, SlotStatus.pending.value)

    position = waitlist_position(slot.slot_number, total_slots)
    logger.info(
        "Registered: tournament_id=%s player_id=%s slot=%s status=%s",
        tournament_id, player_id, slot.slot_number, slot.status,
    )
    if position is None:
        return slot, f"Registered for slot {slot.slot_number}"
    return slot, f"Registered for waitlist position {position}"


def assign_player(
    session: Session, tournament: Tournament, player_id: int, status: str = SlotStatus.pending.value
) -> Tuple[TournamentSlot, str]:
    """
    Host puts a player into the tournament directly.

    Ignores the registration window. status (pending|approved) applies when
    the player lands on a main number; otherwise they join the waitlist.
    The player gets a tournament_assignment notification.
    """
    if status not in ASSIGNABLE_STATUSES:
        raise RegistrationError(400, 'Status must be either "pending" or "approved"')

    player = session.get(Player, player_id)
    if not player:
        raise RegistrationError(404, "Player not found")
    if get_player_slot(session, tournament.id, player_id):
        raise RegistrationError(400, "Player is already registered for this tournament")

    tournament_id = tournament.id
    tournament_name = tournament.name
    user_id = player.user_id
    slot = _insert_slot(session, tournament_id, tournament.total_slots, player_id, status)
    logger.info(
        "Host assigned player: tournament_id=%s player_id=%s slot=%s status=%s",
        tournament_id, player_id, slot.slot_number, slot.status,
    )

    notify_tournament_assignment(session, user_id, tournament_id, tournament_name, slot.id, slot.status)
    session.refresh(slot)

    verb = "confirmed" if slot.status == SlotStatus.approved.value else "assigned"
    return slot, f"Player successfully {verb} to tournament"


@dataclass
class UserRegistration:
    id: int
    slot_number: int
    status: str
    requested_at: datetime
    approved_at: Optional[datetime]
    position: int  # 1-based first-come rank among all registrants
    is_main_slot: bool
    waitlist_position: Optional[int]


def get_user_registration(session: Session, tournament: Tournament, player: Player) -> Optional[UserRegistration]:
    """The player's own registration in the tournament, or None."""
    slot = get_player_slot(session, tournament.id, player.id)
    if not slot:
        return None

    ranked = sorted(
        (r for r in get_tournament_slots(session, tournament.id) if r.player_id is not None),
        key=lambda r: (r.requested_at, r.id),
    )
    position = next(i for i, r in enumerate(ranked, start=1) if r.id == slot.id)
    return UserRegistration(
        id=slot.id,
        slot_number=slot.slot_number,
        status=slot.status,
        requested_at=slot.requested_at,
        approved_at=slot.approved_at,
        position=position,
        is_main_slot=is_main_slot(slot.slot_number, tournament.total_slots),
        waitlist_position=waitlist_position(slot.slot_number, tournament.total_slots),
    )


def _promote_after_release(session: Session, tournament: Tournament, reason: str) -> Optional[PromotionResult]:
    """A main number may have been freed: try to fill it. Never fails the caller."""
    try:
        return promote_next(session, tournament)
    except PromotionStoreError as e:
        logger.error(
            "Promotion after %s failed: tournament_id=%s code=%s details=%s",
            reason, tournament.id, e.code, e.details,
        )
        return None


def _delete_slot(session: Session, slot: TournamentSlot) -> None:
    session.delete(slot)
    session.commit()


def withdraw_player(session: Session, tournament: Tournament, player: Player) -> Optional[PromotionResult]:
    slot = get_player_slot(session, tournament.id, player.id)
    if not slot:
        raise RegistrationError(404, "Registration not found")

    logger.info(
        "Withdrawal: tournament_id=%s player_id=%s slot=%s", tournament.id, player.id, slot.slot_number
    )
    _delete_slot(session, slot)
    return _promote_after_release(session, tournament, "withdrawal")


def review_slot(
    session: Session, tournament: Tournament, slot: TournamentSlot, action: str
) -> Tuple[Optional[TournamentSlot], Optional[PromotionResult]]:
    """
    Host decision on a pending registration.

    approve -> status approved, returns (slot, None)
    reject  -> row deleted, promotion attempted, returns (None, promotion)
    """
    if action not in (ACTION_APPROVE, ACTION_REJECT):
        raise RegistrationError(400, "Invalid action")
    if slot.status != SlotStatus.pending.value:
        raise RegistrationError(400, "Slot is not in pending status")

    if action == ACTION_APPROVE:
        slot.status = SlotStatus.approved.value
        slot.approved_at = datetime.utcnow()
        session.add(slot)
        session.commit()
        session.refresh(slot)
        logger.info("Slot approved: tournament_id=%s slot_id=%s", tournament.id, slot.id)
        return slot, None

    logger.info(
        "Slot rejected: tournament_id=%s slot_id=%s slot=%s", tournament.id, slot.id, slot.slot_number
    )
    _delete_slot(session, slot)
    return None, _promote_after_release(session, tournament, "rejection")


def remove_slot(session: Session, tournament: Tournament, slot: TournamentSlot) -> Optional[PromotionResult]:
    logger.info(
        "Slot removed: tournament_id=%s slot_id=%s slot=%s", tournament.id, slot.id, slot.slot_number
    )
    _delete_slot(session, slot)
    return _promote_after_release(session, tournament, "slot removal")


def list_tournament_slots(session: Session, tournament: Tournament) -> Dict[str, Any]:
    """Host roster: every main number (empty ones as placeholders), then occupied waitlist rows."""
    total_slots = tournament.total_slots
    rows = get_tournament_slots(session, tournament.id)
    by_number = {r.slot_number: r for r in rows}

    entries: List[Dict[str, Any]] = []
    for n in range(1, total_slots + 1):
        row = by_number.get(n)
        entries.append(_roster_entry(row, n, total_slots))
    for row in rows:
        if not is_main_slot(row.slot_number, total_slots):
            entries.append(_roster_entry(row, row.slot_number, total_slots))

    main_rows = [r for r in rows if is_main_slot(r.slot_number, total_slots)]
    waitlist_rows = [r for r in rows if not is_main_slot(r.slot_number, total_slots)]
    return {
        "slots": entries,
        "stats": {
            "total_slots": total_slots,
            "filled_main_slots": len(main_rows),
            "filled_waitlist_slots": len(waitlist_rows),
            "pending_approvals": sum(1 for r in rows if r.status == SlotStatus.pending.value),
            "waitlist_count": sum(1 for r in waitlist_rows if r.status == SlotStatus.waitlist.value),
        },
    }


def _roster_entry(row: Optional[TournamentSlot], slot_number: int, total_slots: int) -> Dict[str, Any]:
    return {
        "id": row.id if row else None,
        "slot_number": slot_number,
        "player_id": row.player_id if row else None,
        "status": row.status if row else "empty",
        "requested_at": row.requested_at if row else None,
        "approved_at": row.approved_at if row else None,
        "is_main_slot": is_main_slot(slot_number, total_slots),
        "waitlist_position": waitlist_position(slot_number, total_slots),
    }
