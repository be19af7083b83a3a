"""Tests for the pure promotion decision (no database)."""

from datetime import datetime, timedelta
from types import SimpleNamespace

from pitchside.services.waitlist_promotion import (
    OUTCOME_MESSAGES,
    PromotionOutcome,
    compute_promotion,
)

T0 = datetime(2026, 3, 1, 9, 0, 0)


def row(id, slot_number, status="approved", player_id=None, minutes=0):
    """Minimal stand-in for a tournament_slots row."""
    return SimpleNamespace(
        id=id,
        slot_number=slot_number,
        status=status,
        player_id=player_id if player_id is not None else id * 100,
        requested_at=T0 + timedelta(minutes=minutes),
    )


class TestComputePromotion:
    def test_waitlist_head_fills_free_main_slot(self):
        """total=2, slot 2 free, two queued: the earlier request moves into slot 2."""
        rows = [
            row(1, 1),
            row(3, 3, status="waitlist", player_id=300, minutes=10),
            row(4, 4, status="waitlist", player_id=400, minutes=20),
        ]

        result = compute_promotion(rows, total_slots=2)

        assert result.promoted
        assert result.outcome is PromotionOutcome.PROMOTED
        assert result.decision.candidate_slot_id == 3
        assert result.decision.candidate_player_id == 300
        assert result.decision.from_slot_number == 3
        assert result.decision.to_slot_number == 2
        assert result.path is None

    def test_lowest_free_main_slot_wins(self):
        rows = [
            row(2, 2),
            row(5, 5),
            row(7, 7, status="waitlist", player_id=700),
        ]

        result = compute_promotion(rows, total_slots=5)

        assert result.decision.to_slot_number == 1

    def test_gap_inside_main_beats_next_number_above_highest(self):
        """Occupied {1,3} with three main slots: the gap at 2 is used, not 4."""
        rows = [
            row(1, 1),
            row(3, 3),
            row(5, 5, status="waitlist", player_id=500),
        ]

        result = compute_promotion(rows, total_slots=3)

        assert result.decision.to_slot_number == 2

    def test_waitlist_row_inside_raised_capacity_not_moved(self):
        """Capacity raised 2 -> 4 leaves a waitlist row at 3; only rows beyond 4 queue."""
        rows = [
            row(1, 1),
            row(2, 2),
            row(3, 3, status="waitlist", player_id=300, minutes=0),
        ]

        result = compute_promotion(rows, total_slots=4)

        assert result.outcome is PromotionOutcome.NO_CANDIDATE

    def test_raised_capacity_promotes_from_beyond_new_limit(self):
        rows = [
            row(1, 1),
            row(3, 3, status="waitlist", player_id=300, minutes=0),
            row(6, 6, status="waitlist", player_id=600, minutes=10),
        ]

        result = compute_promotion(rows, total_slots=4)

        assert result.decision.candidate_player_id == 600
        assert result.decision.to_slot_number == 2

    def test_fifo_uses_request_time_not_slot_number(self):
        """A higher waitlist number requested earlier still goes first."""
        rows = [
            row(3, 3, status="waitlist", player_id=300, minutes=30),
            row(4, 4, status="waitlist", player_id=400, minutes=5),
        ]

        result = compute_promotion(rows, total_slots=2)

        assert result.decision.candidate_player_id == 400
        assert result.decision.to_slot_number == 1

    def test_equal_request_times_break_ties_by_id(self):
        rows = [
            row(9, 4, status="waitlist", player_id=900, minutes=0),
            row(8, 3, status="waitlist", player_id=800, minutes=0),
        ]

        result = compute_promotion(rows, total_slots=2)

        assert result.decision.candidate_slot_id == 8

    def test_full_main_reports_no_slot(self):
        rows = [
            row(1, 1),
            row(2, 2),
            row(3, 3, status="waitlist", player_id=300),
        ]

        result = compute_promotion(rows, total_slots=2)

        assert not result.promoted
        assert result.outcome is PromotionOutcome.NO_SLOT_AVAILABLE
        assert result.message == "No available main slots"
        assert result.decision is None

    def test_empty_queue_reports_no_candidate(self):
        rows = [row(1, 1), row(2, 2)]

        result = compute_promotion(rows, total_slots=5)

        assert result.outcome is PromotionOutcome.NO_CANDIDATE
        assert result.message == "No waitlist players to promote"

    def test_no_rows_at_all(self):
        result = compute_promotion([], total_slots=3)

        assert result.outcome is PromotionOutcome.NO_CANDIDATE

    def test_free_slot_checked_before_queue(self):
        """With main full and nobody queued the answer is still 'no slot'."""
        result = compute_promotion([row(1, 1)], total_slots=1)

        assert result.outcome is PromotionOutcome.NO_SLOT_AVAILABLE

    def test_waitlist_row_without_player_is_skipped(self):
        rows = [
            SimpleNamespace(id=3, slot_number=3, status="waitlist", player_id=None, requested_at=T0),
            row(4, 4, status="waitlist", player_id=400, minutes=10),
        ]

        result = compute_promotion(rows, total_slots=2)

        assert result.decision.candidate_slot_id == 4

    def test_pending_or_approved_beyond_capacity_not_candidates(self):
        """Only status=waitlist rows are queued, whatever their number."""
        rows = [
            row(3, 3, status="pending", player_id=300),
            row(4, 4, status="approved", player_id=400),
        ]

        result = compute_promotion(rows, total_slots=2)

        assert result.outcome is PromotionOutcome.NO_CANDIDATE

    def test_input_rows_not_mutated(self):
        rows = [row(3, 3, status="waitlist", player_id=300)]

        compute_promotion(rows, total_slots=2)

        assert rows[0].slot_number == 3
        assert rows[0].status == "waitlist"


def test_outcome_messages_cover_every_outcome():
    assert set(OUTCOME_MESSAGES) == set(PromotionOutcome)
