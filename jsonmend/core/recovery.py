"""Recovery orchestrator: the public entry point of the engine.

Never crash on bad model output. Strategies run in order of increasing
aggressiveness and the first one that yields a value wins:

1. Direct decode of the trimmed input
2. Comment stripping
3. Syntax repair + escape normalization
4. Escape normalization alone
5. Bracket/quote balancing alone
6. Balancing over the syntax-repaired text
7. Fallback extraction of object literals from the raw input
8. Salvage of known members (response, intent_analysis, execution_plan)
9. Markdown-section extraction
10. Fallback to Failed

Stages 2-6 each start from the fence-normalized candidate, never from
another stage's output. When the prose outside fenced blocks carries section
markers (**Analysis:**, **Response:** ...) the input is a multi-section
narrative: stages 2-8 would recover only one fragment of it, so stage 9 runs
right after the direct decode. Marker text inside a string literal is
payload, not a section header.
"""

import logging
from typing import Any

from jsonmend.config import get_settings
from jsonmend.core.decoding import repair_stages, try_decode
from jsonmend.extract.fallback import extract_from_text
from jsonmend.extract.fields import salvage_fields
from jsonmend.extract.sections import extract_sections, has_section_markers
from jsonmend.models import Failed, FailureReason, Parsed, PartialSections, RecoveryOutcome, RecoveryStrategy
from jsonmend.repair.fences import normalize_fences, strip_fenced_blocks
from jsonmend.repair.scanner import strip_string_literals

logger = logging.getLogger(__name__)


def _has_prose_markers(text: str) -> bool:
    """Check for section markers outside fenced blocks and string literals."""
    return has_section_markers(strip_string_literals(strip_fenced_blocks(text)))


def _covers(value: Any, salvaged: dict[str, Any]) -> bool:
    return isinstance(value, dict) and salvaged.keys() <= value.keys()


def _run_pipeline(text: str) -> RecoveryOutcome:
    # Step 1: Direct decode
    ok, value = try_decode(text.strip())
    if ok:
        logger.debug(f"Recovered by {RecoveryStrategy.DIRECT.value}")
        return Parsed(value=value)

    if not _has_prose_markers(text):
        # Steps 2-6: Repairs on the fence-normalized candidate
        result = repair_stages(normalize_fences(text))
        if result is not None:
            strategy, value = result
            logger.debug(f"Recovered by {strategy.value}")
            return Parsed(value=value)

        # Step 7: Object literals anywhere in the raw input, unless the winner drops salvageable members
        value = extract_from_text(text)
        salvaged = salvage_fields(text)
        if value is not None and (salvaged is None or _covers(value, salvaged)):
            logger.debug(f"Recovered by {RecoveryStrategy.FALLBACK_EXTRACTED.value}")
            return Parsed(value=value)

        # Step 8: Known members that survived on their own
        if salvaged:
            logger.debug(f"Recovered by {RecoveryStrategy.FIELDS_SALVAGED.value}: {sorted(salvaged)}")
            return PartialSections(sections=salvaged)
    else:
        # Step 9: Markdown sections
        sections = extract_sections(text)
        if sections:
            logger.debug(f"Recovered by {RecoveryStrategy.SECTIONS_EXTRACTED.value}: {sorted(sections)}")
            return PartialSections(sections=sections)

    # Step 10: Fallback to Failed (never crash)
    logger.warning(f"Recovery failed for input of {len(text)} chars")
    return Failed(reason=FailureReason.UNRECOVERABLE)


def recover(text: str) -> RecoveryOutcome:
    """Recover a structured value from text that should contain JSON.

    Args:
        text: Raw input (model output, possibly fenced, commented or broken)

    Returns:
        Parsed, PartialSections or Failed; never raises
    """
    if not isinstance(text, str) or not text.strip():
        return Failed(reason=FailureReason.EMPTY_INPUT)

    max_chars = get_settings().max_input_chars
    if len(text) > max_chars:
        logger.warning(f"Rejecting input of {len(text)} chars (limit {max_chars})")
        return Failed(reason=FailureReason.INPUT_TOO_LARGE)

    try:
        return _run_pipeline(text)
    except Exception:
        logger.exception(f"Unexpected error recovering input of {len(text)} chars")
        return Failed(reason=FailureReason.UNRECOVERABLE)
