"""Tests for main/waitlist classification of slot numbers."""

import pytest

from pitchside.services.capacity_classifier import (
    SlotKind,
    classify_slot,
    is_main_slot,
    waitlist_position,
)


class TestClassifySlot:
    def test_within_capacity_is_main(self):
        assert classify_slot(1, 10) is SlotKind.MAIN
        assert classify_slot(5, 10) is SlotKind.MAIN

    def test_boundary_is_main(self):
        """The last main number is still main."""
        assert classify_slot(10, 10) is SlotKind.MAIN

    def test_beyond_capacity_is_waitlist(self):
        assert classify_slot(11, 10) is SlotKind.WAITLIST
        assert classify_slot(250, 10) is SlotKind.WAITLIST

    def test_capacity_change_reclassifies(self):
        """Nothing is stored: the same number flips when capacity changes."""
        assert classify_slot(12, 10) is SlotKind.WAITLIST
        assert classify_slot(12, 12) is SlotKind.MAIN

    def test_non_positive_slot_number(self):
        with pytest.raises(ValueError, match="slot_number"):
            classify_slot(0, 10)

    def test_non_positive_capacity(self):
        with pytest.raises(ValueError, match="total_slots"):
            classify_slot(1, 0)


class TestWaitlistPosition:
    def test_main_slot_has_no_position(self):
        assert waitlist_position(3, 10) is None
        assert is_main_slot(3, 10) is True

    def test_positions_are_one_based(self):
        assert waitlist_position(11, 10) == 1
        assert waitlist_position(13, 10) == 3
        assert is_main_slot(11, 10) is False
