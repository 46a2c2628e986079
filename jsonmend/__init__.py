"""Resilient recovery of JSON values from model output and other broken text."""

from jsonmend.config import Settings, configure_logging, get_settings
from jsonmend.core.decoding import is_valid
from jsonmend.core.fingerprint import fingerprint
from jsonmend.core.recovery import recover
from jsonmend.core.service import RecoveryService, get_recovery_service
from jsonmend.core.tracker import ProcessingTracker, get_default_tracker
from jsonmend.models import (
    Failed,
    FailureReason,
    Parsed,
    PartialSections,
    ProcessingRecord,
    RecoveryOutcome,
    RecoveryStrategy,
    is_success,
)

__all__ = [
    "recover",
    "is_valid",
    "fingerprint",
    "ProcessingTracker",
    "get_default_tracker",
    "RecoveryService",
    "get_recovery_service",
    "Failed",
    "FailureReason",
    "Parsed",
    "PartialSections",
    "ProcessingRecord",
    "RecoveryOutcome",
    "RecoveryStrategy",
    "is_success",
    "Settings",
    "configure_logging",
    "get_settings",
]
