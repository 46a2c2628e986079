"""Shared fixtures: fresh settings and singletons for every test."""

import pytest

from jsonmend.config import get_settings
from jsonmend.core.service import get_recovery_service
from jsonmend.core.tracker import ProcessingTracker, get_default_tracker


def _clear_singletons() -> None:
    get_settings.cache_clear()
    get_default_tracker.cache_clear()
    get_recovery_service.cache_clear()


@pytest.fixture(autouse=True)
def fresh_singletons(monkeypatch):
    """Drop cached settings/tracker/service and any JSONMEND_ env overrides."""
    for name in ("MAX_ATTEMPTS", "TRACKER_MAX_ENTRIES", "TRACKER_TTL_SECONDS", "MAX_INPUT_CHARS", "LOG_LEVEL"):
        monkeypatch.delenv(f"JSONMEND_{name}", raising=False)
    _clear_singletons()
    yield
    _clear_singletons()


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(clock):
    return ProcessingTracker(max_attempts=2, max_entries=100, ttl_seconds=60.0, clock=clock)
