"""Salvage of known top-level fields from an object that will not repair.

Model replies usually carry response, intent_analysis and execution_plan
members. Damage late in the text (a truncated plan, say) should not throw
away members that arrived intact.
"""

import logging
import re
from typing import Any

from jsonmend.core.decoding import repair_and_decode, try_decode
from jsonmend.extract.sections import ANALYSIS, PLAN, RESPONSE
from jsonmend.repair.scanner import StringScanner

logger = logging.getLogger(__name__)

_RESPONSE_RE = re.compile(r'"response"\s*:\s*"((?:[^"\\]|\\.)*)"', re.DOTALL)
_OBJECT_FIELD_RES = {
    ANALYSIS: re.compile(r'"intent_analysis"\s*:\s*(?=\{)'),
    PLAN: re.compile(r'"execution_plan"\s*:\s*(?=[{\[])'),
}


def _container_span(text: str, start: int) -> str:
    """Return the container opening at start, up to its matching closer or the end of text."""
    scanner = StringScanner()
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        structural = not scanner.in_string
        scanner.feed(char)
        if not structural:
            continue
        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return text[start:]


def salvage_response(text: str) -> str | None:
    """Extract the response string member, unescaped when possible."""
    match = _RESPONSE_RE.search(text)
    if match is None:
        return None
    raw = match.group(1)
    ok, value = try_decode(f'"{raw}"')
    return value if ok else raw


def salvage_fields(text: str) -> dict[str, Any] | None:
    """Recover whichever known members survive on their own.

    Step 1: response string via pattern match
    Step 2: intent_analysis / execution_plan containers, each through the repair stages

    Args:
        text: Raw input text

    Returns:
        Section name → recovered value, or None if no member was recovered
    """
    fields: dict[str, Any] = {}

    for section, pattern in _OBJECT_FIELD_RES.items():
        match = pattern.search(text)
        if match is None:
            continue
        result = repair_and_decode(_container_span(text, match.end()))
        if result is not None and isinstance(result[1], (dict, list)):
            fields[section] = result[1]

    response = salvage_response(text)
    if response is not None:
        fields[RESPONSE] = response

    if fields:
        logger.debug(f"Salvaged fields: {sorted(fields)}")
    return fields or None
