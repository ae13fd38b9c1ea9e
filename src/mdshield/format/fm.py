"""Front matter helpers for markdown documents."""

from typing import Any

from ..adapters.yaml_codec import YamlFrontmatter, escape_yaml_string, load_yaml
from ..core.model import Position
from ..core.patterns import YAML_RE
from ..core.ports import Transform
from ..core.splice import insert, splice_all

EMPTY_FRONT_MATTER = "---\n---\n"

_codec = YamlFrontmatter()

__all__ = [
    "dump_front_matter",
    "ensure_front_matter",
    "escape_yaml_string",
    "format_front_matter",
    "order_front_matter_keys",
    "parse_front_matter",
]


def format_front_matter(text: str, func: Transform) -> str:
    """Replace the leading front matter block with ``func(block)``.

    The block handed to ``func`` includes its ``---`` delimiters. Text
    without front matter is returned unchanged.
    """
    m = YAML_RE.match(text)
    if not m:
        return text
    return splice_all(text, [Position.span(0, m.end())], func)


def ensure_front_matter(text: str) -> str:
    """Prepend an empty front matter block unless one is already there."""
    if YAML_RE.match(text) is None:
        text = insert(text, 0, EMPTY_FRONT_MATTER)
    return text


def parse_front_matter(yaml_text: str) -> dict[str, Any]:
    """Decode front matter YAML into a mapping (``{}`` when empty).

    Lines indented with tabs are read as two-space indented.
    """
    return load_yaml(yaml_text)


def dump_front_matter(meta: dict[str, Any]) -> str:
    """Encode ``meta`` as a ``---`` delimited block (no trailing newline)."""
    return _codec.encode(meta)


def order_front_matter_keys(
    text: str,
    key_order: list[str] | None = None,
    sort_keys: bool = True,
) -> str:
    """Reorder front matter keys.

    Args:
        text: Full document text
        key_order: Keys to place first, in this order. Default: ["title", "aliases", "tags"]
        sort_keys: Sort remaining keys alphabetically

    Returns:
        Document text with the front matter re-encoded, or unchanged when
        there is no front matter or the keys are already in order
    """
    if key_order is None:
        key_order = ["title", "aliases", "tags"]

    def reorder(block: str) -> str:
        meta = parse_front_matter(block)
        if not isinstance(meta, dict):
            return block

        ordered: dict[str, Any] = {}
        for key in key_order:
            if key in meta:
                ordered[key] = meta[key]

        remaining = [k for k in meta if k not in key_order]
        if sort_keys:
            remaining = sorted(remaining, key=str)
        for key in remaining:
            ordered[key] = meta[key]

        # Leave formatting alone when nothing moves
        if list(ordered) == list(meta):
            return block
        return dump_front_matter(ordered)

    return format_front_matter(text, reorder)
