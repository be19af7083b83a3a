"""
Waitlist promotion: decide and apply the next main-slot promotion.

Decision (pure, compute_promotion):
1. Available main slot = lowest number in [1, total_slots] with NO row
   (rows exist only for registrants, so "no row" is "free").
2. Candidate = earliest (requested_at, then id) row beyond capacity with
   status=waitlist and a player.
3. Either missing -> no promotion, reported as an outcome, not an error.

Execution (promote_next):
- PRIMARY: the manual_promote_waitlist() database procedure does the decision
  and the update in one transaction (see pitchside.db_functions).
- FALLBACK: used only when the procedure is missing. Re-reads rows, decides in
  Python, then moves the candidate with an update conditioned on its expected
  prior state. Lost races (zero rows updated or a unique-slot violation) are
  retried from a fresh read a bounded number of times.

Both paths yield the same PromotionResult. A successful promotion notifies the
promoted user exactly once; notification failure never undoes the promotion.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import text, update
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlmodel import Session

from pitchside.config import PROMOTION_MAX_ATTEMPTS, PROMOTION_RETRY_DELAY_MS
from pitchside.models.player import Player
from pitchside.models.tournament import Tournament
from pitchside.models.tournament_slot import SlotStatus, TournamentSlot
from pitchside.services.notification_service import notify_waitlist_promotion
from pitchside.services.slot_store import get_tournament_slots, lowest_free_main_slot
from pitchside.utils.retry import RetriesExhausted, WriteConflict, retry_on_conflict

logger = logging.getLogger(__name__)

PROMOTION_PROCEDURE = "manual_promote_waitlist"

PATH_PRIMARY = "primary"
PATH_FALLBACK = "fallback"

# PostgreSQL SQLSTATE for undefined_function
_UNDEFINED_FUNCTION_SQLSTATE = "42883"
_MISSING_PROCEDURE_SIGNATURES = (
    "does not exist",
    "no such function",
    "no such table",
    "undefined function",
)


class PromotionOutcome(str, Enum):
    PROMOTED = "promoted"
    NO_SLOT_AVAILABLE = "no_slot_available"
    NO_CANDIDATE = "no_candidate"


OUTCOME_MESSAGES = {
    PromotionOutcome.PROMOTED: "Waitlist player promoted successfully",
    PromotionOutcome.NO_SLOT_AVAILABLE: "No available main slots",
    PromotionOutcome.NO_CANDIDATE: "No waitlist players to promote",
}


@dataclass(frozen=True)
class PromotionDecision:
    candidate_slot_id: int
    candidate_player_id: int
    from_slot_number: int
    to_slot_number: int


@dataclass
class PromotionResult:
    outcome: PromotionOutcome
    decision: Optional[PromotionDecision] = None
    path: Optional[str] = None  # primary|fallback, diagnostics only

    @property
    def promoted(self) -> bool:
        return self.outcome is PromotionOutcome.PROMOTED

    @property
    def message(self) -> str:
        return OUTCOME_MESSAGES[self.outcome]


class PromotionStoreError(Exception):
    """Unexpected database failure while promoting."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details

    @classmethod
    def from_db_error(cls, message: str, exc: SQLAlchemyError) -> "PromotionStoreError":
        orig = getattr(exc, "orig", None)
        code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None) or type(exc).__name__
        details = str(orig) if orig is not None else str(exc)
        return cls(message, code=code, details=details)


class PromotionConflictError(PromotionStoreError):
    """Fallback promotion kept losing races and gave up."""
    pass


# ---------------------------------------------------------------------------
# Decision
# ---------------------------------------------------------------------------


def compute_promotion(rows: Iterable[Any], total_slots: int) -> PromotionResult:
    """
    Decide the next promotion from a tournament's slot rows.

    rows need slot_number, status, player_id, requested_at and id.
    Returns a PromotionResult with no path set; nothing is mutated.
    """
    rows = list(rows)

    occupied_main = [r.slot_number for r in rows if r.slot_number <= total_slots]
    available = lowest_free_main_slot(occupied_main, total_slots)
    if available is None:
        return PromotionResult(outcome=PromotionOutcome.NO_SLOT_AVAILABLE)

    candidates = [
        r for r in rows
        if r.slot_number > total_slots and r.status == SlotStatus.waitlist.value and r.player_id is not None
    ]
    if not candidates:
        return PromotionResult(outcome=PromotionOutcome.NO_CANDIDATE)

    candidate = min(candidates, key=lambda r: (r.requested_at, r.id))
    return PromotionResult(
        outcome=PromotionOutcome.PROMOTED,
        decision=PromotionDecision(
            candidate_slot_id=candidate.id,
            candidate_player_id=candidate.player_id,
            from_slot_number=candidate.slot_number,
            to_slot_number=available,
        ),
    )


# ---------------------------------------------------------------------------
# Primary path
# ---------------------------------------------------------------------------


def is_missing_procedure_error(exc: DBAPIError) -> bool:
    """True when the error means the promotion procedure is not installed."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == _UNDEFINED_FUNCTION_SQLSTATE:
        return True
    message = str(orig if orig is not None else exc).lower()
    return any(sig in message for sig in _MISSING_PROCEDURE_SIGNATURES)


def _call_promotion_procedure(session: Session, tournament_id: int) -> Optional[Mapping[str, Any]]:
    """Run the procedure and commit its transaction. Returns its single result row."""
    row = session.execute(
        text(f"SELECT * FROM {PROMOTION_PROCEDURE}(:p_tournament_id)"),
        {"p_tournament_id": tournament_id},
    ).mappings().first()
    session.commit()
    return row


def _result_from_procedure_row(row: Optional[Mapping[str, Any]]) -> PromotionResult:
    if row and row.get("success"):
        return PromotionResult(
            outcome=PromotionOutcome.PROMOTED,
            decision=PromotionDecision(
                candidate_slot_id=row["promoted_slot_id"],
                candidate_player_id=row["promoted_player_id"],
                from_slot_number=row["from_slot_number"],
                to_slot_number=row["new_slot_number"],
            ),
            path=PATH_PRIMARY,
        )

    message = (row or {}).get("message") or ""
    if message == OUTCOME_MESSAGES[PromotionOutcome.NO_SLOT_AVAILABLE]:
        outcome = PromotionOutcome.NO_SLOT_AVAILABLE
    else:
        if message != OUTCOME_MESSAGES[PromotionOutcome.NO_CANDIDATE]:
            logger.warning("Unrecognized promotion procedure result: %r", message)
        outcome = PromotionOutcome.NO_CANDIDATE
    return PromotionResult(outcome=outcome, path=PATH_PRIMARY)


# ---------------------------------------------------------------------------
# Fallback path
# ---------------------------------------------------------------------------


def _apply_decision(session: Session, tournament_id: int, decision: PromotionDecision) -> None:
    """Move the candidate row, only if it is still where the decision saw it."""
    try:
        result = session.execute(
            update(TournamentSlot)
            .where(
                TournamentSlot.id == decision.candidate_slot_id,
                TournamentSlot.tournament_id == tournament_id,
                TournamentSlot.slot_number == decision.from_slot_number,
                TournamentSlot.status == SlotStatus.waitlist.value,
            )
            .values(
                slot_number=decision.to_slot_number,
                status=SlotStatus.pending.value,
                updated_at=datetime.utcnow(),
            )
        )
        if result.rowcount != 1:
            session.rollback()
            raise WriteConflict(
                f"slot {decision.candidate_slot_id} no longer waitlisted at {decision.from_slot_number}"
            )
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise WriteConflict(f"slot number {decision.to_slot_number} already taken") from e


def _promote_fallback(session: Session, tournament_id: int, total_slots: int) -> PromotionResult:
    def attempt(n: int) -> PromotionResult:
        rows = get_tournament_slots(session, tournament_id)
        result = compute_promotion(rows, total_slots)
        if result.promoted:
            _apply_decision(session, tournament_id, result.decision)
        result.path = PATH_FALLBACK
        return result

    try:
        return retry_on_conflict(
            attempt,
            max_attempts=PROMOTION_MAX_ATTEMPTS,
            delay_ms=PROMOTION_RETRY_DELAY_MS,
            label=f"fallback promotion tournament_id={tournament_id}",
        )
    except RetriesExhausted as e:
        raise PromotionConflictError(
            "Failed to promote waitlist player after multiple attempts",
            code="PROMOTION_CONFLICT",
            details=str(e.last_conflict),
        ) from e
    except SQLAlchemyError as e:
        session.rollback()
        raise PromotionStoreError.from_db_error("Failed to promote waitlist player", e) from e


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _notify_promoted(session: Session, tournament_id: int, decision: PromotionDecision) -> None:
    try:
        player = session.get(Player, decision.candidate_player_id)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Could not load promoted player %s for notification", decision.candidate_player_id)
        return
    if player is None:
        logger.warning(
            "Promoted player %s has no profile; notification skipped (tournament_id=%s)",
            decision.candidate_player_id, tournament_id,
        )
        return
    notify_waitlist_promotion(session, player.user_id, tournament_id, decision.to_slot_number)


def promote_next(session: Session, tournament: Tournament) -> PromotionResult:
    """
    Promote the longest-waiting registrant into the lowest free main slot.

    Authorization is the caller's job. Raises PromotionStoreError on database
    failure; "nothing to promote" comes back as a non-promoted result.
    """
    tournament_id = tournament.id
    total_slots = tournament.total_slots

    try:
        result = _result_from_procedure_row(_call_promotion_procedure(session, tournament_id))
    except DBAPIError as exc:
        session.rollback()
        if not is_missing_procedure_error(exc):
            logger.error("Promotion procedure failed: tournament_id=%s error=%s", tournament_id, exc.orig)
            raise PromotionStoreError.from_db_error("Failed to promote waitlist player", exc) from exc
        logger.warning(
            "Promotion procedure unavailable, using fallback: tournament_id=%s error=%s",
            tournament_id, exc.orig,
        )
        result = _promote_fallback(session, tournament_id, total_slots)

    if not result.promoted:
        logger.info(
            "No promotion: tournament_id=%s outcome=%s path=%s",
            tournament_id, result.outcome.value, result.path,
        )
        return result

    decision = result.decision
    logger.info(
        "Promoted waitlist player: tournament_id=%s slot_id=%s player_id=%s from_slot=%s to_slot=%s path=%s",
        tournament_id, decision.candidate_slot_id, decision.candidate_player_id,
        decision.from_slot_number, decision.to_slot_number, result.path,
    )
    _notify_promoted(session, tournament_id, decision)
    return result
