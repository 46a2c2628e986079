"""Tests for the processing tracker and content fingerprints."""

import threading

import pytest

from jsonmend import Failed, Parsed, fingerprint
from jsonmend.config import Settings
from jsonmend.core.tracker import ProcessingTracker, get_default_tracker


def test_fingerprint_is_stable():
    assert fingerprint('{"a": 1}') == fingerprint('{"a": 1}')
    assert fingerprint('{"a": 1}') != fingerprint('{"a": 2}')
    assert len(fingerprint("")) == 64


def test_fingerprint_accepts_lone_surrogates():
    assert len(fingerprint("\ud800")) == 64


def test_first_attempt_is_allowed(tracker):
    assert tracker.mark_in_flight("k") is True
    assert tracker.is_in_flight("k")
    assert tracker.get_record("k").attempts == 1


def test_second_caller_is_refused_while_in_flight(tracker):
    tracker.mark_in_flight("k")
    assert tracker.mark_in_flight("k") is False


def test_success_is_memoized(tracker):
    outcome = Parsed(value={"a": 1})
    tracker.mark_in_flight("k")
    tracker.store("k", outcome)
    assert tracker.get_cached("k") == outcome
    assert not tracker.is_in_flight("k")
    assert tracker.mark_in_flight("k") is False


def test_failure_is_not_memoized(tracker):
    tracker.mark_in_flight("k")
    tracker.store("k", Failed())
    assert tracker.get_cached("k") is None
    assert tracker.mark_in_flight("k") is True


def test_attempts_are_capped(tracker):
    for _ in range(tracker.max_attempts):
        assert tracker.mark_in_flight("k") is True
        tracker.store("k", Failed())
    assert tracker.attempts_exhausted("k")
    assert tracker.mark_in_flight("k") is False


def test_records_expire(tracker, clock):
    for _ in range(tracker.max_attempts):
        tracker.mark_in_flight("k")
        tracker.store("k", Failed())
    clock.advance(tracker.ttl_seconds + 1)
    assert not tracker.attempts_exhausted("k")
    assert tracker.get_record("k") is None
    assert tracker.mark_in_flight("k") is True


def test_least_recently_used_is_evicted(clock):
    tracker = ProcessingTracker(max_entries=2, clock=clock)
    tracker.mark_in_flight("a")
    tracker.mark_in_flight("b")
    tracker.get_cached("a")
    tracker.mark_in_flight("c")
    assert len(tracker) == 2
    assert tracker.get_record("b") is None
    assert tracker.get_record("a") is not None
    assert tracker.get_record("c") is not None


def test_record_snapshot_is_a_copy(tracker):
    tracker.mark_in_flight("k")
    tracker.get_record("k").attempts = 99
    assert tracker.get_record("k").attempts == 1


def test_only_one_concurrent_caller_wins(tracker):
    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(tracker.mark_in_flight("shared"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1


def test_clear(tracker):
    tracker.mark_in_flight("k")
    tracker.clear()
    assert len(tracker) == 0


@pytest.mark.parametrize(
    "kwargs",
    [{"max_attempts": 0}, {"max_entries": 0}, {"ttl_seconds": 0}],
)
def test_invalid_limits(kwargs):
    with pytest.raises(ValueError):
        ProcessingTracker(**kwargs)


def test_from_settings():
    tracker = ProcessingTracker.from_settings(Settings(max_attempts=5, tracker_max_entries=7, tracker_ttl_seconds=3))
    assert (tracker.max_attempts, tracker.max_entries, tracker.ttl_seconds) == (5, 7, 3)


def test_default_tracker_is_shared():
    assert get_default_tracker() is get_default_tracker()
