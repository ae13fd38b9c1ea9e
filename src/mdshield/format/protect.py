"""Run text rules over prose while code, front matter and links stay untouched."""

import logging

from ..adapters.markdown_parser import get_positions
from ..core.model import CODE, INLINE_CODE
from ..core.patterns import LINK_RE, YAML_RE
from ..core.ports import Transform
from ..core.splice import replace_first, splice

logger = logging.getLogger(__name__)

# Sentinels are single all-caps words: no markdown syntax, nothing a prose
# rule would split, reflow or escape.
CODE_PLACEHOLDER = "MDSHIELDCODE7F3A9C21"
LINK_PLACEHOLDER = "MDSHIELDLINK5E8B0D43"
# An empty front-matter block, so front-matter aware rules still see one
YAML_PLACEHOLDER = "---\n---"


def replace_code_blocks(text: str, placeholder: str) -> tuple[str, list[str]]:
    """Swap every code block and inline code span for ``placeholder``.

    Returns the new text and the removed code, in document order.
    """
    positions = get_positions(CODE, text) + get_positions(INLINE_CODE, text)
    positions.sort(key=lambda p: p.start.offset, reverse=True)

    replaced: list[str] = []
    for position in positions:
        replaced.append(position.slice(text))
        text = splice(text, position, placeholder)

    # Collected last-first; flip back to document order
    replaced.reverse()
    return text, replaced


def ignore_code_blocks_yaml_and_links(text: str, func: Transform) -> str:
    """Apply ``func`` to ``text`` with code, front matter and links masked.

    Code is masked first and restored last so front-matter and link
    detection never look inside it. ``func`` must leave the sentinels in
    place and in order; changing their letter case is tolerated.
    """
    text, code_blocks = replace_code_blocks(text, CODE_PLACEHOLDER)

    yaml_match = YAML_RE.match(text)
    yaml_block = None
    if yaml_match:
        yaml_block = yaml_match.group(0)
        text = YAML_PLACEHOLDER + text[yaml_match.end() :]

    links = [m.group(0) for m in LINK_RE.finditer(text)]
    text = LINK_RE.sub(LINK_PLACEHOLDER, text)

    logger.debug(
        "Masked %d code region(s), %d front matter block(s), %d link(s)",
        len(code_blocks),
        1 if yaml_block is not None else 0,
        len(links),
    )

    text = func(text)

    # Rules such as capitalisation may have changed the sentinel's case
    for link in links:
        text = replace_first(text, LINK_PLACEHOLDER, link, ignore_case=True)

    if yaml_block is not None:
        text = replace_first(text, YAML_PLACEHOLDER, yaml_block)

    # Code sentinels are matched the same way
    for code in code_blocks:
        text = replace_first(text, CODE_PLACEHOLDER, code, ignore_case=True)

    return text


protect = ignore_code_blocks_yaml_and_links
