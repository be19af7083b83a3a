"""
Main vs waitlist classification of a slot number.

Purely arithmetic and re-evaluated on every read:
- slot_number <= total_slots  -> MAIN
- slot_number >  total_slots  -> WAITLIST
"""
from enum import Enum
from typing import Optional


class SlotKind(str, Enum):
    MAIN = "main"
    WAITLIST = "waitlist"


def classify_slot(slot_number: int, total_slots: int) -> SlotKind:
    if slot_number <= 0:
        raise ValueError(f"slot_number must be positive, got {slot_number}")
    if total_slots <= 0:
        raise ValueError(f"total_slots must be positive, got {total_slots}")
    return SlotKind.MAIN if slot_number <= total_slots else SlotKind.WAITLIST


def is_main_slot(slot_number: int, total_slots: int) -> bool:
    return classify_slot(slot_number, total_slots) is SlotKind.MAIN


def waitlist_position(slot_number: int, total_slots: int) -> Optional[int]:
    """1-based display position of a waitlist slot number; None for main slots."""
    if is_main_slot(slot_number, total_slots):
        return None
    return slot_number - total_slots
