"""Escape/backslash normalization.

Pass A rewrites known-bad escape patterns; pass B re-scans character by
character so that every backslash in the output starts a legal JSON escape.
"""

import re

from jsonmend.repair.scanner import StringScanner, string_spans

ESCAPE_TARGETS = frozenset('"\\/bfnrtu')

# "intent\": \"value"  → "intent": "value"
_ESCAPED_PAIR_RE = re.compile(r'"([^"\\]+)\\": \\"([^"\\]*)"')
# "intent\": "value"   → "intent": "value"
_ESCAPED_KEY_RE = re.compile(r'("[\w\s-]+)\\(":\s*")')
_STRAY_BACKSLASH_RE = re.compile(r'(?<!\\)\\(?!["\\/bfnrtu])')
_SHORT_UNICODE_RE = re.compile(r"(?<!\\)\\u[0-9a-fA-F]{0,3}(?![0-9a-fA-F])")
_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def escape_control_characters(text: str) -> str:
    """Escape raw newline, carriage return and tab inside string literals.

    Outside strings these characters are insignificant whitespace and are kept.
    """
    parts: list[str] = []
    cursor = 0
    for start, end, _ in string_spans(text):
        parts.append(text[cursor:start])
        literal = text[start:end]
        for raw, escaped in _CONTROL_ESCAPES.items():
            literal = literal.replace(raw, escaped)
        parts.append(literal)
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)


def rewrite_escapes(text: str) -> str:
    """Pass A: targeted escape rewrites.

    1. Unescape quotes escaped at the structural level ("key\\": \\"value")
    2. Double backslashes that do not start a recognized escape
    3. Replace short or malformed \\u escapes with \\u0000
    4. Escape raw control characters inside strings
    """
    text = _ESCAPED_PAIR_RE.sub(r'"\1": "\2"', text)
    text = _ESCAPED_KEY_RE.sub(r"\1\2", text)
    text = _STRAY_BACKSLASH_RE.sub(r"\\\\", text)
    text = _SHORT_UNICODE_RE.sub(r"\\u0000", text)
    return escape_control_characters(text)


def rescan_escapes(text: str) -> str:
    """Pass B: make every escape sequence structurally legal.

    A backslash followed by a recognized escape target is kept as a pair; any
    other backslash is doubled before the following character. A dangling
    backslash at the end of the text is emitted doubled.
    """
    scanner = StringScanner()
    out: list[str] = []
    for char in text:
        if scanner.escaped:
            out.append("\\" + char if char in ESCAPE_TARGETS else "\\\\" + char)
        elif char != "\\":
            out.append(char)
        scanner.feed(char)
    if scanner.escaped:
        out.append("\\\\")
    return "".join(out)


def normalize_escapes(text: str) -> str:
    """Run pass A then pass B."""
    return rescan_escapes(rewrite_escapes(text))
