"""Markdown code fence normalization.

Model output often wraps JSON in ```json ... ``` blocks, sometimes several of
them, sometimes with the closing fence cut off.
"""

import re

# ```json ... ```  /  ``` ... ```  /  ```json{...}```
_FENCE_BLOCK_RE = re.compile(r"```[ \t]*[\w+.-]*[ \t]*\n?(.*?)```", re.DOTALL)
_OPEN_FENCE_RE = re.compile(r"```[ \t]*[\w+.-]*[ \t]*\n?")


def _looks_like_json(text: str) -> bool:
    return text.startswith("{") or text.startswith("[")


def fenced_blocks(text: str) -> list[str]:
    """Return the trimmed contents of every complete fenced block, in order."""
    return [match.group(1).strip() for match in _FENCE_BLOCK_RE.finditer(text)]


def normalize_fences(text: str) -> str:
    """Isolate the best JSON candidate from fenced text.

    Step 1: Complete fenced blocks: first block starting with { or [, else the first block
    Step 2: Unclosed opening fence (truncated output): text after the marker line
    Step 3: No fence: the input trimmed

    Args:
        text: Raw input text

    Returns:
        Candidate text (never fails; worst case the input trimmed)
    """
    if "```" not in text:
        return text.strip()

    blocks = fenced_blocks(text)
    if blocks:
        for block in blocks:
            if _looks_like_json(block):
                return block
        return blocks[0]

    match = _OPEN_FENCE_RE.search(text)
    if match is None:
        return text.strip()
    after = text[match.end():].strip()
    if after:
        return after
    # A lone closing fence: the content sits before it
    return text[: match.start()].strip()


def strip_fenced_blocks(text: str) -> str:
    """Remove every complete fenced block, keeping the surrounding prose."""
    return _FENCE_BLOCK_RE.sub("", text)
