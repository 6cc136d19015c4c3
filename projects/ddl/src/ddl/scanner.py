"""Quote- and parenthesis-aware scanning of SQL fragments.

The scanner is the single primitive behind comma splitting and body
extraction. It tracks parenthesis depth and whether the current character
sits inside a single- or double-quoted span; a quote toggles its mode
unless the preceding character is a backslash.
"""

from collections.abc import Iterator
from typing import NamedTuple


class ScanState(NamedTuple):
    """State after consuming the character at ``index``."""

    index: int
    char: str
    depth: int
    quoted: bool


def scan(text: str) -> Iterator[ScanState]:
    """Walk ``text`` one character at a time, yielding the running state."""
    depth = 0
    in_single = False
    in_double = False
    previous = ""

    for index, char in enumerate(text):
        if char == "'" and not in_double and previous != "\\":
            in_single = not in_single
        elif char == '"' and not in_single and previous != "\\":
            in_double = not in_double

        quoted = in_single or in_double
        if not quoted:
            if char == "(":
                depth += 1
            elif char == ")":
                depth = max(0, depth - 1)

        yield ScanState(index, char, depth, quoted)
        previous = char


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split on ``separator`` at depth zero and outside quotes.

    Parts are trimmed and empty parts are dropped.
    """
    parts: list[str] = []
    start = 0

    for state in scan(text):
        if state.char == separator and state.depth == 0 and not state.quoted:
            parts.append(text[start : state.index])
            start = state.index + 1
    parts.append(text[start:])

    return [part.strip() for part in parts if part.strip()]


def find_closing_paren(text: str, open_index: int) -> int | None:
    """Index of the parenthesis closing the one at ``open_index``."""
    for state in scan(text[open_index:]):
        if state.char == ")" and state.depth == 0 and not state.quoted:
            return open_index + state.index
    return None
