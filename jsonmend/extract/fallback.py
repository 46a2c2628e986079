"""Fallback extraction of object literals buried in surrounding prose."""

import logging
import re
from typing import Any

from jsonmend.core.decoding import repair_and_decode

logger = logging.getLogger(__name__)

# Upper bound on candidates tried per input
MAX_CANDIDATES = 50

_OBJECT_SPAN_RE = re.compile(r"\{[\s\S]*?\}")


def find_object_candidates(text: str) -> list[str]:
    """Collect substrings that may hold an object literal.

    The outermost span (first { to last }) comes first, then every non-nested
    {...} match in the order found. Duplicates are skipped.

    Args:
        text: Raw input text

    Returns:
        Candidate substrings, at most MAX_CANDIDATES
    """
    candidates: list[str] = []
    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        candidates.append(text[first : last + 1])

    for match in _OBJECT_SPAN_RE.finditer(text):
        if len(candidates) >= MAX_CANDIDATES:
            break
        if match.group(0) not in candidates:
            candidates.append(match.group(0))
    return candidates


def extract_from_text(text: str) -> Any | None:
    """Recover the first candidate object that survives the repair stages.

    Args:
        text: Raw input text

    Returns:
        Decoded object, or None if no candidate decodes
    """
    for index, candidate in enumerate(find_object_candidates(text)):
        result = repair_and_decode(candidate)
        if result is not None:
            strategy, value = result
            logger.debug(f"Fallback candidate {index} recovered by {strategy.value}")
            return value
    return None
