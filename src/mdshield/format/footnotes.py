"""Footnote definition relocation."""

from ..adapters.markdown_parser import get_positions
from ..core.model import FOOTNOTE_DEFINITION
from ..core.splice import splice


def move_footnotes_to_end(text: str) -> str:
    """Move every footnote definition to the end of the document.

    Definitions keep their relative order. The blank line each one leaves
    behind is collapsed, and text without definitions is returned as is.
    Appended lines use the document's own line ending.
    """
    positions = get_positions(FOOTNOTE_DEFINITION, text)
    footnotes: list[str] = []
    eol = "\r\n" if "\r\n" in text else "\n"

    for position in positions:
        start, end = position.start.offset, position.end.offset
        footnotes.append(text[start:end])

        # Drop up to two line endings following the definition
        for _ in range(2):
            if text.startswith("\r\n", end):
                text = text[:end] + text[end + 2 :]
            elif text.startswith("\n", end):
                text = text[:end] + text[end + 1 :]

        text = splice(text, position, "")

    if not footnotes:
        return text

    footnotes.reverse()
    text = text.rstrip() + eol
    for footnote in footnotes:
        text += eol + footnote

    return text
