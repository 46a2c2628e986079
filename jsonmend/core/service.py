"""Tracker-aware recovery: memoized, attempt-limited calls to the pipeline.

Callers that render the same content repeatedly (every UI pass over one
message) go through RecoveryService so identical input is recovered once and
pathological input is retried at most max_attempts times.
"""

import logging
from collections.abc import Callable
from functools import lru_cache

from jsonmend.core.fingerprint import fingerprint
from jsonmend.core.recovery import recover
from jsonmend.core.tracker import ProcessingTracker, get_default_tracker
from jsonmend.models import Failed, FailureReason, RecoveryOutcome

logger = logging.getLogger(__name__)


class RecoveryService:
    """Recovery entry point backed by an explicit ProcessingTracker."""

    def __init__(
        self,
        tracker: ProcessingTracker | None = None,
        recover_fn: Callable[[str], RecoveryOutcome] = recover,
    ) -> None:
        """Initialize the service.

        Args:
            tracker: Tracker to use; a fresh one from settings if omitted
            recover_fn: Pipeline to run on a cache miss
        """
        self.tracker = tracker if tracker is not None else ProcessingTracker.from_settings()
        self._recover_fn = recover_fn

    def recover(self, text: str, key: str | None = None) -> RecoveryOutcome:
        """Recover text, consulting the tracker first.

        Cache hit → memoized outcome. Attempts exhausted → Failed(attempts_exhausted).
        Another caller mid-run → Failed(in_flight). Otherwise the pipeline runs
        and its outcome is stored.

        Args:
            text: Raw input text
            key: Caller cache key; the content fingerprint if omitted

        Returns:
            RecoveryOutcome; never raises for pipeline failures
        """
        key = key if key is not None else fingerprint(text if isinstance(text, str) else "")

        cached = self.tracker.get_cached(key)
        if cached is not None:
            return cached

        if not self.tracker.mark_in_flight(key):
            # Lost a race, exhausted, or finished between the checks above
            cached = self.tracker.get_cached(key)
            if cached is not None:
                return cached
            if self.tracker.attempts_exhausted(key):
                logger.info(f"Skipping recovery for {key[:16]}: attempts exhausted")
                return Failed(reason=FailureReason.ATTEMPTS_EXHAUSTED)
            return Failed(reason=FailureReason.IN_FLIGHT)

        outcome: RecoveryOutcome = Failed(reason=FailureReason.UNRECOVERABLE)
        try:
            outcome = self._recover_fn(text)
        finally:
            self.tracker.store(key, outcome)
        return outcome


@lru_cache()
def get_recovery_service() -> RecoveryService:
    """Get the process-wide recovery service (lazy init)."""
    return RecoveryService(get_default_tracker())
