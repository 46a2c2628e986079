"""Syntax repair transformer: ordered, targeted text rewrites.

Rules run in a fixed order because later rules assume earlier ones already
normalized structure (keys are quoted before colons are inserted, colons
before commas, and so on). Every rule is a total function from str to str.

Rules see string-masked text: string literal contents are swapped for
numbered placeholders before the rewrite and restored after it, so a rule can
never alter what is inside a string.
"""

import functools
import re
from collections.abc import Callable

from jsonmend.repair.scanner import MASK_CLOSE, MASK_OPEN, StringScanner, mask_strings, strip_comments, unmask_strings

# Masked string literal; the closing quote is optional for an unterminated trailing one
_STRING = f'"{MASK_OPEN}\\d+{MASK_CLOSE}"'
_OPEN_STRING = f'"{MASK_OPEN}\\d+{MASK_CLOSE}"?'

_LITERALS = frozenset({"true", "false", "null"})
_PYTHON_LITERALS = {"True": "true", "False": "false", "None": "null"}
# Characters that may follow the real end of a value string
_VALUE_END_FOLLOWERS = frozenset(",}]:\"")
_VALUE_START = f'(?=[{{\\[]|"{MASK_OPEN}|-?\\d|true\\b|false\\b|null\\b)'
_BARE_WORD = r"[A-Za-z_][\w$.-]*"

_BARE_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z0-9_$][\w$-]*)(\s*:)")
_BARE_OBJECT_VALUE_RE = re.compile(f"(:\\s*)({_BARE_WORD})(?=\\s*(?:[,}}\\]]|$))")
_BARE_ARRAY_VALUE_RE = re.compile(f"([\\[,]\\s*)({_BARE_WORD})(?=\\s*(?:[,\\]]|$))")
_MISSING_COLON_RE = re.compile(f"([{{,]\\s*{_STRING})(\\s*){_VALUE_START}")
_KEY_AHEAD_RE = re.compile(f"{_STRING}\\s*:")
# Container or string end, optional whitespace, container or string start
_ADJACENT_CONTAINERS_RE = re.compile(f'(?:(?<=[}}\\]])|(?<={MASK_CLOSE}"))(\\s*)(?=[{{\\[]|"{MASK_OPEN})')
# Any value end, required whitespace, any value start
_ADJACENT_VALUES_RE = re.compile(
    f'(?:(?<=[}}\\]])|(?<={MASK_CLOSE}")|(?<=\\d)|(?<=true)|(?<=false)|(?<=null))(\\s+){_VALUE_START}'
)
_COLON_ARRAY_OBJECT_RE = re.compile(r"\[\s*:\s*\{")
_REPEATED_COMMA_RE = re.compile(r",(?:\s*,)+")
_LEADING_COMMA_RE = re.compile(r"([\[{])\s*,")
_MISSING_VALUE_RE = re.compile(r":(\s*)(?=[,}\]]|$)")
_DANGLING_KEY_RE = re.compile(f",\\s*{_OPEN_STRING}\\s*(?=}}|$)")
_TRAILING_COMMA_RE = re.compile(r",(\s*(?:[}\]]|$))")


def _owners(masked: str) -> list[str]:
    """Innermost open container ('{', '[' or '') after each character."""
    stack: list[str] = []
    owners: list[str] = []
    for char in masked:
        if char in "{[":
            stack.append(char)
        elif char in "}]" and stack:
            stack.pop()
        owners.append(stack[-1] if stack else "")
    return owners


def _closes_value(text: str, index: int) -> bool:
    """Check if the quote just before index ends a value string.

    It does when the next non-space character can follow a value, when only
    whitespace remains, or when a line break comes first (a member on the
    next line with a missing comma).
    """
    for char in text[index:]:
        if char == "\n":
            return True
        if not char.isspace():
            return char in _VALUE_END_FOLLOWERS
    return True


def _string_safe(rule: Callable[[str], str]) -> Callable[[str], str]:
    """Run a rule on string-masked text and restore the literals afterwards."""

    @functools.wraps(rule)
    def wrapper(text: str) -> str:
        masked = mask_strings(text)
        if masked is None:
            return text
        masked_text, literals = masked
        return unmask_strings(rule(masked_text), literals)

    return wrapper


def escape_inner_quotes(text: str) -> str:
    """Escape stray quotes inside object values ("He said "hi"" → "He said \\"hi\\"").

    Only strings opened right after a colon are considered. A quote inside such
    a string ends it only if what follows can follow a value; any other quote is
    escaped and the string continues.
    """
    scanner = StringScanner()
    out: list[str] = []
    previous = ""
    value_string = False
    for index, char in enumerate(text):
        if char == '"' and not scanner.escaped:
            if not scanner.in_string:
                value_string = previous == ":"
            elif value_string and not _closes_value(text, index + 1):
                out.append('\\"')
                continue
        was_in_string = scanner.in_string
        scanner.feed(char)
        out.append(char)
        if not was_in_string and not scanner.in_string and not char.isspace():
            previous = char
    return "".join(out)


@_string_safe
def quote_bare_keys(text: str) -> str:
    """Quote unquoted object keys following { or , ({key: 1} → {"key": 1})."""
    return _BARE_KEY_RE.sub(r'\1"\2"\3', text)


@_string_safe
def quote_bare_values(text: str) -> str:
    """Quote bare word values after a colon or inside an array.

    true, false and null are kept as literals and True, False and None become
    them; numbers never match.
    """
    owners = _owners(text)

    def quote_object_value(match: re.Match[str]) -> str:
        word = match.group(2)
        if word in _LITERALS:
            return match.group(0)
        if word in _PYTHON_LITERALS:
            return f"{match.group(1)}{_PYTHON_LITERALS[word]}"
        return f'{match.group(1)}"{word}"'

    def quote_array_value(match: re.Match[str]) -> str:
        word = match.group(2)
        if word in _LITERALS or owners[match.start()] != "[":
            return match.group(0)
        if word in _PYTHON_LITERALS:
            return f"{match.group(1)}{_PYTHON_LITERALS[word]}"
        return f'{match.group(1)}"{word}"'

    text = _BARE_ARRAY_VALUE_RE.sub(quote_array_value, text)
    return _BARE_OBJECT_VALUE_RE.sub(quote_object_value, text)


@_string_safe
def insert_missing_colons(text: str) -> str:
    """Insert a colon between an object key and the value that follows it.

    When the would-be value is itself a key ("a" "b": 1), the first key gets
    a null value instead: "a": null, "b": 1.
    """
    owners = _owners(text)

    def insert(match: re.Match[str]) -> str:
        if owners[match.start()] != "{":
            return match.group(0)
        key, whitespace = match.group(1), match.group(2) or " "
        if _KEY_AHEAD_RE.match(text, match.end()):
            return f"{key}: null,{whitespace}"
        return f"{key}:{whitespace}"

    return _MISSING_COLON_RE.sub(insert, text)


@_string_safe
def insert_missing_commas(text: str) -> str:
    """Insert a comma between adjacent values or members ([1 2] → [1, 2])."""
    text = _ADJACENT_CONTAINERS_RE.sub(r",\1", text)
    return _ADJACENT_VALUES_RE.sub(r",\1", text)


@_string_safe
def fix_array_patterns(text: str) -> str:
    """Normalize degenerate array/object punctuation.

    [ : {  → [{
    , ,    → ,
    [ ,    → [
    """
    text = _COLON_ARRAY_OBJECT_RE.sub("[{", text)
    text = _REPEATED_COMMA_RE.sub(",", text)
    return _LEADING_COMMA_RE.sub(r"\1", text)


@_string_safe
def complete_dangling_members(text: str) -> str:
    """Repair members cut off before their value.

    A key with a colon but no value gets null; a trailing object key with no
    colon after another member is dropped. A lone key ({"a"}) is left alone.
    """
    text = _MISSING_VALUE_RE.sub(r": null\1", text)
    owners = _owners(text)

    def drop(match: re.Match[str]) -> str:
        if owners[match.start()] != "{":
            return match.group(0)
        return ""

    return _DANGLING_KEY_RE.sub(drop, text)


@_string_safe
def strip_trailing_commas(text: str) -> str:
    """Remove commas directly before a closing brace/bracket or the end of text."""
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def close_unbalanced(text: str) -> str:
    """Append missing closers by aggregate count.

    An unterminated trailing string is closed first. Missing braces are then
    appended, followed by missing brackets. Only counts are matched, not nesting
    order; balance_brackets is the stack-based alternative.
    """
    scanner = StringScanner()
    counts = {"{": 0, "}": 0, "[": 0, "]": 0}
    for char in text:
        if char == "\\" and not scanner.in_string:
            # A backslash outside a string escapes nothing
            continue
        structural = not scanner.in_string and not scanner.escaped
        scanner.feed(char)
        if structural and char in counts:
            counts[char] += 1

    closers = ""
    if scanner.in_string:
        if scanner.escaped:
            closers += "\\"
        closers += '"'
    closers += "}" * max(0, counts["{"] - counts["}"])
    closers += "]" * max(0, counts["["] - counts["]"])
    return text + closers


RULES: tuple[Callable[[str], str], ...] = (
    escape_inner_quotes,
    quote_bare_keys,
    quote_bare_values,
    insert_missing_colons,
    insert_missing_commas,
    fix_array_patterns,
    complete_dangling_members,
    strip_trailing_commas,
    close_unbalanced,
)


def repair_syntax(text: str) -> str:
    """Strip comments, then apply every repair rule in order.

    The result is always a string; whether the repair worked is decided by the
    decode that follows.

    Args:
        text: Candidate text

    Returns:
        Repaired candidate text
    """
    text = strip_comments(text)
    for rule in RULES:
        text = rule(text)
    return text
