"""Tests for bounded retry on write conflicts."""

import pytest

from pitchside.utils.retry import RetriesExhausted, WriteConflict, retry_on_conflict


def test_returns_first_success():
    assert retry_on_conflict(lambda attempt: "ok", delay_ms=0) == "ok"


def test_retries_conflicts_until_success():
    seen = []

    def fn(attempt):
        seen.append(attempt)
        if attempt < 3:
            raise WriteConflict("taken")
        return attempt

    assert retry_on_conflict(fn, max_attempts=3, delay_ms=0) == 3
    assert seen == [1, 2, 3]


def test_exhausted_keeps_last_conflict():
    def fn(attempt):
        raise WriteConflict(f"conflict {attempt}")

    with pytest.raises(RetriesExhausted) as exc_info:
        retry_on_conflict(fn, max_attempts=2, delay_ms=0)

    assert exc_info.value.attempts == 2
    assert str(exc_info.value.last_conflict) == "conflict 2"


def test_other_errors_not_retried():
    seen = []

    def fn(attempt):
        seen.append(attempt)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        retry_on_conflict(fn, max_attempts=5, delay_ms=0)

    assert seen == [1]


def test_at_least_one_attempt():
    seen = []
    retry_on_conflict(lambda attempt: seen.append(attempt), max_attempts=0, delay_ms=0)
    assert seen == [1]


def test_sleeps_between_attempts_only(monkeypatch):
    sleeps = []
    monkeypatch.setattr("pitchside.utils.retry.time.sleep", lambda s: sleeps.append(s))

    def fn(attempt):
        raise WriteConflict("taken")

    with pytest.raises(RetriesExhausted):
        retry_on_conflict(fn, max_attempts=3, delay_ms=200)

    assert sleeps == [0.2, 0.2]
