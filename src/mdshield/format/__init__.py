"""Formatting passes for markdown documents."""

from .emphasis import make_emphasis_or_bold_consistent
from .fm import (
    ensure_front_matter,
    format_front_matter,
    order_front_matter_keys,
    parse_front_matter,
)
from .footnotes import move_footnotes_to_end
from .formatter import FormatOptions, FormatResult, format_file, format_note
from .protect import ignore_code_blocks_yaml_and_links, protect
from .text import normalize_text

__all__ = [
    "ensure_front_matter",
    "format_front_matter",
    "order_front_matter_keys",
    "parse_front_matter",
    "make_emphasis_or_bold_consistent",
    "move_footnotes_to_end",
    "ignore_code_blocks_yaml_and_links",
    "protect",
    "normalize_text",
    "format_note",
    "format_file",
    "FormatOptions",
    "FormatResult",
]
