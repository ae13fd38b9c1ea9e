"""Emphasis and strong delimiter normalization."""

from ..adapters.markdown_parser import get_positions
from ..core.model import STRONG
from ..core.splice import splice

UNDERSCORE = "underscore"
ASTERISK = "asterisk"
CONSISTENT = "consistent"

STYLES = (UNDERSCORE, ASTERISK, CONSISTENT)


def make_emphasis_or_bold_consistent(text: str, style: str, kind: str) -> str:
    """Rewrite the delimiters of every ``kind`` span to a single style.

    Args:
        text: Markdown text
        style: "underscore", "asterisk", or "consistent" (reuse whatever the
            first span in the document uses)
        kind: "emphasis" or "strong"

    Returns:
        Text with the same spans, delimited uniformly
    """
    positions = get_positions(kind, text)
    if not positions:
        return text

    if style == UNDERSCORE:
        indicator = "_"
    elif style == ASTERISK:
        indicator = "*"
    else:
        # Positions are last-first, so the final entry is the first span
        first = positions[-1]
        indicator = text[first.start.offset]

    if kind == STRONG:
        indicator *= 2

    size = len(indicator)
    for position in positions:
        inner = text[position.start.offset + size : position.end.offset - size]
        text = splice(text, position, indicator + inner + indicator)

    return text
