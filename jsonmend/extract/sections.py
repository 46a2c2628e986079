"""Markdown-section extraction from narrative model output.

Recovers structure from prose such as::

    **Analysis:** {"primary_goal": "summarize"}
    **Execution Plan:**
    1. Fetch the document
    2. Summarize it
    **Response:** Here is the summary.

even when no valid JSON exists anywhere in the text.
"""

import re
from typing import Any

from jsonmend.core.decoding import repair_and_decode
from jsonmend.extract.fallback import extract_from_text
from jsonmend.repair.fences import normalize_fences

ANALYSIS = "intent_analysis"
PLAN = "execution_plan"
RESPONSE = "response"

# Exact marker text per section
SECTION_MARKERS: dict[str, tuple[str, ...]] = {
    ANALYSIS: ("**Intent Analysis:**", "**Analysis:**", "Intent Analysis:"),
    PLAN: ("**Execution Plan:**", "**Plan:**", "Execution Steps:"),
    RESPONSE: ("**Final Answer:**", "**Response:**"),
}

_NUMBERED_LINE_RE = re.compile(r"^\s*\d+\.\s+(.+?)\s*$", re.MULTILINE)


def _marker_positions(text: str) -> list[tuple[int, int, str]]:
    """Non-overlapping (start, end, section) marker hits, in text order."""
    hits: list[tuple[int, int, str]] = []
    for section, markers in SECTION_MARKERS.items():
        for marker in markers:
            start = text.find(marker)
            while start != -1:
                hits.append((start, start + len(marker), section))
                start = text.find(marker, start + 1)

    # Longest marker wins where markers overlap ("Intent Analysis:" inside "**Intent Analysis:**")
    hits.sort(key=lambda hit: (hit[0], hit[0] - hit[1]))
    accepted: list[tuple[int, int, str]] = []
    for hit in hits:
        if accepted and hit[0] < accepted[-1][1]:
            continue
        accepted.append(hit)
    return accepted


def has_section_markers(text: str) -> bool:
    """Check if the text contains any recognized section marker."""
    return any(marker in text for markers in SECTION_MARKERS.values() for marker in markers)


def find_sections(text: str) -> dict[str, str]:
    """Split text into raw section bodies.

    A body runs from its marker to the next recognized marker or the end of the
    text. When a section appears more than once, its first occurrence is used.

    Args:
        text: Narrative text

    Returns:
        Section name → raw body, in order of appearance
    """
    hits = _marker_positions(text)
    sections: dict[str, str] = {}
    for index, (_, end, section) in enumerate(hits):
        if section in sections:
            continue
        body_end = hits[index + 1][0] if index + 1 < len(hits) else len(text)
        sections[section] = text[end:body_end]
    return sections


def structure_body(body: str) -> dict[str, Any] | list[Any]:
    """Recover an analysis or plan body.

    Step 1: The whole body (or its fenced block) as an object or array, through the repair stages
    Step 2: Embedded JSON object inside prose
    Step 3: Numbered list lines → {"steps": [{"description": ...}, ...]}
    Step 4: Fallback to {"text_representation": <trimmed body>}
    """
    result = repair_and_decode(normalize_fences(body))
    if result is not None and isinstance(result[1], (dict, list)):
        return result[1]

    value = extract_from_text(body)
    if isinstance(value, dict):
        return value

    steps = _NUMBERED_LINE_RE.findall(body)
    if steps:
        return {"steps": [{"description": step} for step in steps]}

    return {"text_representation": body.strip()}


def clean_response(body: str) -> str:
    """Trim a final-answer body, dropping a trailing fence and one pair of quotes."""
    text = body.strip()
    if text.endswith("```"):
        text = text[:-3].rstrip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1].strip()
    return text


def extract_sections(text: str) -> dict[str, Any] | None:
    """Assemble a composite result from recognized section markers.

    Args:
        text: Raw narrative text

    Returns:
        Section name → recovered value (dict or list for analysis/plan, str
        for the response), or None if no marker is present
    """
    raw_sections = find_sections(text)
    if not raw_sections:
        return None

    result: dict[str, Any] = {}
    for section, body in raw_sections.items():
        if section == RESPONSE:
            result[section] = clean_response(body)
        else:
            result[section] = structure_body(body)
    return result
