"""Pydantic v2 models for recovery outcomes and tracker state.

A RecoveryOutcome is a tagged union: exactly one of Parsed, PartialSections
or Failed, discriminated by ``kind``.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class FailureReason(str, Enum):
    """Why a recovery produced no value."""

    UNRECOVERABLE = "unrecoverable"
    EMPTY_INPUT = "empty_input"
    INPUT_TOO_LARGE = "input_too_large"
    IN_FLIGHT = "in_flight"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"


class RecoveryStrategy(str, Enum):
    """Pipeline stage that produced a value."""

    DIRECT = "direct"
    COMMENTS_STRIPPED = "comments_stripped"
    SYNTAX_REPAIRED = "syntax_repaired"
    ESCAPES_NORMALIZED = "escapes_normalized"
    BALANCED = "balanced"
    SYNTAX_BALANCED = "syntax_balanced"
    FALLBACK_EXTRACTED = "fallback_extracted"
    FIELDS_SALVAGED = "fields_salvaged"
    SECTIONS_EXTRACTED = "sections_extracted"


class Parsed(BaseModel):
    """A fully decoded JSON value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["parsed"] = "parsed"
    value: Any = Field(..., description="Decoded JSON value (dict, list, str, number, bool or None)")


class PartialSections(BaseModel):
    """Structure assembled from markdown sections when no JSON decoded."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["partial_sections"] = "partial_sections"
    sections: dict[str, Any] = Field(..., description="Section name → recovered text or value")


class Failed(BaseModel):
    """No value could be recovered."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failed"] = "failed"
    reason: FailureReason = Field(default=FailureReason.UNRECOVERABLE, description="Failure cause")


RecoveryOutcome = Annotated[Union[Parsed, PartialSections, Failed], Field(discriminator="kind")]


def is_success(outcome: Parsed | PartialSections | Failed) -> bool:
    """Check whether an outcome carries recovered data."""
    return not isinstance(outcome, Failed)


class ProcessingRecord(BaseModel):
    """Tracker state for one content fingerprint."""

    attempts: int = Field(default=0, description="Recovery runs started for this fingerprint")
    in_flight: bool = Field(default=False, description="A recovery run is currently in progress")
    cached_outcome: RecoveryOutcome | None = Field(default=None, description="Memoized successful outcome")
    updated_at: float = Field(default=0.0, description="Monotonic time of the last update")
