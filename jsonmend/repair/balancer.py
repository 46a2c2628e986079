"""Stack-based bracket and quote balancer.

The principled counterpart to the count-based closer in the syntax repair
chain: closers are matched against the actual nesting order, so mismatched
closers are rewritten in place and unclosed constructs are closed innermost
first.
"""

import logging
from typing import NamedTuple

from jsonmend.repair.scanner import StringScanner

logger = logging.getLogger(__name__)

_CLOSERS = {"{": "}", "[": "]", '"': '"'}


class Frame(NamedTuple):
    """An open quote, brace or bracket and where it was opened."""

    char: str
    position: int


def balance_brackets(text: str) -> str:
    """Balance quotes, braces and brackets.

    Pushes a frame for every string, brace and bracket opened outside a string.
    On a closer the top frame is popped:
    - mismatched closer → rewritten to the closer the frame demands
    - closer with an empty stack → deleted
    Frames left at the end are closed in LIFO order.

    Args:
        text: Candidate text

    Returns:
        Balanced candidate text
    """
    scanner = StringScanner()
    stack: list[Frame] = []
    out: list[str] = []

    for position, char in enumerate(text):
        if char == "\\" and not scanner.in_string:
            # A backslash outside a string escapes nothing
            out.append(char)
            continue
        structural = not scanner.in_string and not scanner.escaped
        was_in_string = scanner.in_string
        scanner.feed(char)

        if char == '"' and was_in_string != scanner.in_string:
            if scanner.in_string:
                stack.append(Frame(char, position))
            elif stack and stack[-1].char == '"':
                stack.pop()
            out.append(char)
            continue

        if not structural:
            out.append(char)
            continue

        if char in "{[":
            stack.append(Frame(char, position))
            out.append(char)
        elif char in "}]":
            if not stack:
                logger.debug(f"Dropping unmatched {char!r} at position {position}")
                continue
            frame = stack.pop()
            expected = _CLOSERS[frame.char]
            if char != expected:
                logger.debug(f"Rewriting {char!r} at position {position} to {expected!r} (opened at {frame.position})")
            out.append(expected)
        else:
            out.append(char)

    while stack:
        frame = stack.pop()
        if frame.char == '"' and scanner.escaped:
            # A dangling backslash would escape the closing quote
            out.append("\\")
            scanner.escaped = False
        out.append(_CLOSERS[frame.char])

    return "".join(out)
