"""Offset-based text surgery.

Positions handed to these helpers must come from a single resolver call on
the exact string being edited. Batches are applied from the highest start
offset down, so an edit only ever shifts text to its own right and the
offsets still waiting to be visited stay valid.
"""

import re
from typing import Callable, Iterable

from .model import Position


def splice(text: str, position: Position, replacement: str) -> str:
    """Replace ``text[start:end]`` with ``replacement``."""
    return text[: position.start.offset] + replacement + text[position.end.offset :]


def splice_all(
    text: str,
    positions: Iterable[Position],
    replacement_for: Callable[[str], str],
) -> str:
    """Splice every position, highest start offset first.

    ``replacement_for`` receives the original substring of each position and
    returns what goes in its place.
    """
    ordered = sorted(positions, key=lambda p: p.start.offset, reverse=True)
    for position in ordered:
        text = splice(text, position, replacement_for(position.slice(text)))
    return text


def replace_first(text: str, target: str, replacement: str, ignore_case: bool = False) -> str:
    """Replace the first occurrence of the literal ``target``.

    The replacement is inserted verbatim; nothing in it is treated as a
    group reference.
    """
    if ignore_case:
        m = re.search(re.escape(target), text, re.IGNORECASE)
        if not m:
            return text
        return text[: m.start()] + replacement + text[m.end() :]

    idx = text.find(target)
    if idx == -1:
        return text
    return text[:idx] + replacement + text[idx + len(target) :]


def insert(text: str, index: int, value: str) -> str:
    """Insert ``value`` at ``index``."""
    return text[:index] + value + text[index:]
