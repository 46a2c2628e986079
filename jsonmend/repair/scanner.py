"""String-aware scanning primitives.

Walks text one character at a time tracking whether the cursor is inside a
double-quoted string and whether the previous character was an escaping
backslash. Comment stripping, string masking and bracket balancing all build
on this so that lookalike tokens inside string literals are never touched.
"""

import re

# Placeholder delimiters for masked string literals (Unicode private use area)
MASK_OPEN = "\ue000"
MASK_CLOSE = "\ue001"

_PLACEHOLDER_RE = re.compile(f'"{MASK_OPEN}(\\d+){MASK_CLOSE}("?)')


class StringScanner:
    """Quote/escape state machine shared by every string-aware pass."""

    def __init__(self) -> None:
        """Start outside any string, with no pending escape."""
        self.in_string = False
        self.escaped = False

    def feed(self, char: str) -> None:
        """Advance the state by one character.

        The character following a backslash is consumed as part of the escape
        and never toggles string state.
        """
        if self.escaped:
            self.escaped = False
            return
        if char == "\\":
            self.escaped = True
        elif char == '"':
            self.in_string = not self.in_string


def string_spans(text: str) -> list[tuple[int, int, bool]]:
    """Locate double-quoted string literals.

    Args:
        text: Text to scan

    Returns:
        List of (start, end, terminated) tuples, end exclusive. An unterminated
        trailing string runs to the end of the text with terminated=False.
    """
    scanner = StringScanner()
    spans: list[tuple[int, int, bool]] = []
    start = 0
    for index, char in enumerate(text):
        was_in_string = scanner.in_string
        scanner.feed(char)
        if not was_in_string and scanner.in_string:
            start = index
        elif was_in_string and not scanner.in_string:
            spans.append((start, index + 1, True))
    if scanner.in_string:
        spans.append((start, len(text), False))
    return spans


def mask_strings(text: str) -> tuple[str, list[tuple[str, bool]]] | None:
    """Replace every string literal with an opaque numbered placeholder.

    Terminated literals become ``"<open>N<close>"``; an unterminated trailing
    literal becomes ``"<open>N<close>`` (no closing quote).

    Args:
        text: Text to mask

    Returns:
        Tuple of (masked_text, literals) where literals holds (original, terminated)
        pairs by placeholder number, or None if the text already contains the
        placeholder delimiters and cannot be masked safely.
    """
    if MASK_OPEN in text or MASK_CLOSE in text:
        return None

    parts: list[str] = []
    literals: list[tuple[str, bool]] = []
    cursor = 0
    for start, end, terminated in string_spans(text):
        parts.append(text[cursor:start])
        number = len(literals)
        literals.append((text[start:end], terminated))
        parts.append(f'"{MASK_OPEN}{number}{MASK_CLOSE}' + ('"' if terminated else ""))
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts), literals


def unmask_strings(masked: str, literals: list[tuple[str, bool]]) -> str:
    """Restore string literals hidden by mask_strings."""

    def restore(match: re.Match[str]) -> str:
        number = int(match.group(1))
        if number >= len(literals):
            return match.group(0)
        original, terminated = literals[number]
        # An unterminated literal has no quote of its own; keep any that a rule appended
        return original if terminated else original + match.group(2)

    return _PLACEHOLDER_RE.sub(restore, masked)


def strip_comments(text: str) -> str:
    """Remove // line comments and /* */ block comments outside strings.

    Each comment is replaced by a single space so adjacent tokens never merge.
    The newline ending a line comment is kept. Comment syntax inside a string
    literal is copied through unchanged.

    Args:
        text: Candidate text

    Returns:
        Text without comments
    """
    scanner = StringScanner()
    out: list[str] = []
    length = len(text)
    index = 0
    while index < length:
        char = text[index]
        if char == "/" and index + 1 < length and not scanner.in_string and not scanner.escaped:
            following = text[index + 1]
            if following == "/":
                end = text.find("\n", index + 2)
                index = length if end == -1 else end
                out.append(" ")
                continue
            if following == "*":
                end = text.find("*/", index + 2)
                index = length if end == -1 else end + 2
                out.append(" ")
                continue
        scanner.feed(char)
        out.append(char)
        index += 1
    return "".join(out)


def strip_string_literals(text: str) -> str:
    """Replace every string literal with an empty one ("")."""
    parts: list[str] = []
    cursor = 0
    for start, end, _ in string_spans(text):
        parts.append(text[cursor:start])
        parts.append('""')
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)
