"""Strict JSON decoding and the single-candidate repair sequence."""

import json
import logging
from collections.abc import Callable
from typing import Any

from jsonmend.models import RecoveryStrategy
from jsonmend.repair.balancer import balance_brackets
from jsonmend.repair.escapes import normalize_escapes
from jsonmend.repair.scanner import strip_comments
from jsonmend.repair.syntax import repair_syntax

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def decode(text: str) -> Any:
    """Decode standard JSON.

    Duplicate keys resolve last-write-wins. NaN and Infinity are rejected.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON
        ValueError: If the text uses a non-standard constant
        RecursionError: If nesting exceeds the interpreter limit
    """
    return json.loads(text, parse_constant=_reject_constant)


def try_decode(text: str) -> tuple[bool, Any]:
    """Decode without raising.

    Returns:
        Tuple of (ok, value); value is None when ok is False
    """
    try:
        return True, decode(text)
    except (json.JSONDecodeError, ValueError, RecursionError) as e:
        logger.debug(f"Decode failed: {e}")
        return False, None


def is_valid(text: str) -> bool:
    """Check whether the trimmed text decodes directly, with no repair."""
    if not isinstance(text, str):
        return False
    ok, _ = try_decode(text.strip())
    return ok


def _repair_chain(text: str) -> str:
    return normalize_escapes(repair_syntax(text))


def _balance_repaired(text: str) -> str:
    return balance_brackets(repair_syntax(text))


# Each stage starts from the same candidate, in order of increasing aggressiveness
REPAIR_STAGES: tuple[tuple[RecoveryStrategy, Callable[[str], str]], ...] = (
    (RecoveryStrategy.COMMENTS_STRIPPED, strip_comments),
    (RecoveryStrategy.SYNTAX_REPAIRED, _repair_chain),
    (RecoveryStrategy.ESCAPES_NORMALIZED, normalize_escapes),
    (RecoveryStrategy.BALANCED, balance_brackets),
    (RecoveryStrategy.SYNTAX_BALANCED, _balance_repaired),
)


def repair_stages(candidate: str) -> tuple[RecoveryStrategy, Any] | None:
    """Try every repair stage on a candidate, short-circuiting on the first decode.

    Args:
        candidate: Candidate text

    Returns:
        Tuple of (strategy, value) or None if no stage produced valid JSON
    """
    for strategy, transform in REPAIR_STAGES:
        ok, value = try_decode(transform(candidate))
        if ok:
            logger.debug(f"Candidate recovered by {strategy.value}")
            return strategy, value
    return None


def repair_and_decode(candidate: str) -> tuple[RecoveryStrategy, Any] | None:
    """Decode a candidate directly, then through every repair stage.

    Args:
        candidate: Candidate text

    Returns:
        Tuple of (strategy, value) or None if nothing decoded
    """
    ok, value = try_decode(candidate.strip())
    if ok:
        return RecoveryStrategy.DIRECT, value
    return repair_stages(candidate)
