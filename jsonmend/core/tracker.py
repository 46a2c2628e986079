"""Processing tracker: memoization and attempt limiting per fingerprint.

Shared mutable state, so every operation takes the tracker's lock. Records
are kept in LRU order, bounded by max_entries, and expire ttl_seconds after
their last update.
"""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from functools import lru_cache

from jsonmend.config import Settings, get_settings
from jsonmend.models import ProcessingRecord, RecoveryOutcome, is_success

logger = logging.getLogger(__name__)


class ProcessingTracker:
    """Per-fingerprint attempt counter and outcome cache."""

    def __init__(
        self,
        max_attempts: int = 2,
        max_entries: int = 100,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty tracker.

        Args:
            max_attempts: Recovery runs allowed per fingerprint without a success
            max_entries: Records kept before the least recently used is evicted
            ttl_seconds: Seconds a record stays valid after its last update
            clock: Monotonic time source
        """
        if max_attempts < 1 or max_entries < 1 or ttl_seconds <= 0:
            raise ValueError("max_attempts, max_entries and ttl_seconds must be positive")
        self.max_attempts = max_attempts
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._records: OrderedDict[str, ProcessingRecord] = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ProcessingTracker":
        """Build a tracker from configuration."""
        settings = settings or get_settings()
        return cls(
            max_attempts=settings.max_attempts,
            max_entries=settings.tracker_max_entries,
            ttl_seconds=settings.tracker_ttl_seconds,
        )

    def _live_record(self, key: str) -> ProcessingRecord | None:
        """Get a non-expired record and mark it recently used. Caller holds the lock."""
        record = self._records.get(key)
        if record is None:
            return None
        if self._clock() - record.updated_at > self.ttl_seconds:
            del self._records[key]
            return None
        self._records.move_to_end(key)
        return record

    def _put(self, key: str, record: ProcessingRecord) -> None:
        """Insert or refresh a record, evicting the oldest beyond max_entries. Caller holds the lock."""
        record.updated_at = self._clock()
        self._records[key] = record
        self._records.move_to_end(key)
        while len(self._records) > self.max_entries:
            evicted, _ = self._records.popitem(last=False)
            logger.info(f"Evicted tracker record {evicted[:16]}")

    def get_record(self, key: str) -> ProcessingRecord | None:
        """Get a snapshot of the record for a fingerprint."""
        with self._lock:
            record = self._live_record(key)
            return record.model_copy() if record is not None else None

    def get_cached(self, key: str) -> RecoveryOutcome | None:
        """Get the memoized outcome for a fingerprint, if any."""
        with self._lock:
            record = self._live_record(key)
            return record.cached_outcome if record is not None else None

    def is_in_flight(self, key: str) -> bool:
        """Check if a recovery run is in progress for a fingerprint."""
        with self._lock:
            record = self._live_record(key)
            return record is not None and record.in_flight

    def attempts_exhausted(self, key: str) -> bool:
        """Check if a fingerprint used all its attempts without a success."""
        with self._lock:
            record = self._live_record(key)
            return record is not None and record.cached_outcome is None and record.attempts >= self.max_attempts

    def mark_in_flight(self, key: str) -> bool:
        """Start a recovery attempt.

        Atomically counts the attempt and marks the fingerprint in flight.

        Returns:
            True if the caller should run recovery, False if another run is in
            flight, an outcome is already cached, or attempts are exhausted
        """
        with self._lock:
            record = self._live_record(key) or ProcessingRecord()
            if record.in_flight or record.cached_outcome is not None or record.attempts >= self.max_attempts:
                return False
            record.attempts += 1
            record.in_flight = True
            self._put(key, record)
            return True

    def store(self, key: str, outcome: RecoveryOutcome) -> None:
        """Record the outcome of an attempt.

        Successful outcomes are memoized. A failure only ends the attempt, so
        the fingerprint can be retried until max_attempts is reached.
        """
        with self._lock:
            record = self._live_record(key) or ProcessingRecord()
            record.in_flight = False
            if is_success(outcome):
                record.cached_outcome = outcome
            elif record.attempts >= self.max_attempts:
                logger.info(f"Attempts exhausted for {key[:16]} after {record.attempts} tries")
            self._put(key, record)

    def clear(self) -> None:
        """Forget every record."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


@lru_cache()
def get_default_tracker() -> ProcessingTracker:
    """Get the process-wide tracker built from settings (lazy init)."""
    return ProcessingTracker.from_settings()
