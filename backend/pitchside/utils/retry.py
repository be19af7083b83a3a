"""
Bounded retry for read-then-conditional-write operations.

The callable re-reads the latest state on every attempt and raises
WriteConflict when its conditional write lost a race. Conflicts are retried
after a fixed delay; anything else propagates immediately.
"""
import logging
import time
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WriteConflict(Exception):
    """A conditional write matched no row or hit a unique constraint."""
    pass


class RetriesExhausted(Exception):
    """Every attempt ended in a WriteConflict."""

    def __init__(self, attempts: int, last_conflict: WriteConflict):
        super().__init__(f"Failed after {attempts} attempts: {last_conflict}")
        self.attempts = attempts
        self.last_conflict = last_conflict


def retry_on_conflict(
    fn: Callable[[int], T],
    max_attempts: int = 3,
    delay_ms: int = 200,
    label: str = "write",
) -> T:
    """Call fn(attempt) until it returns without a WriteConflict.

    Args:
        fn: Callable taking the 1-based attempt number.
        max_attempts: Maximum number of attempts (at least one is made).
        delay_ms: Fixed sleep between attempts.
        label: Name used in log lines.

    Returns:
        The return value of fn.

    Raises:
        RetriesExhausted: If all attempts conflict.
    """
    attempts = max(1, max_attempts)
    last_conflict: Optional[WriteConflict] = None

    for attempt in range(1, attempts + 1):
        try:
            return fn(attempt)
        except WriteConflict as e:
            last_conflict = e
            logger.warning("%s conflict (attempt %d/%d): %s", label, attempt, attempts, e)
            if attempt < attempts and delay_ms > 0:
                time.sleep(delay_ms / 1000.0)

    logger.error("%s failed after %d attempts: %s", label, attempts, last_conflict)
    raise RetriesExhausted(attempts, last_conflict)
