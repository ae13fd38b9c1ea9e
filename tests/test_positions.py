"""Tests for structural position resolution."""

from mdshield.adapters.markdown_parser import MarkdownParser, get_positions
from mdshield.core.model import Position


def _slices(kind, text):
    return [p.slice(text) for p in get_positions(kind, text)]


def test_positions_sorted_last_first():
    """Test that positions come back highest start offset first."""
    positions = get_positions("emphasis", "*a* and _b_")

    assert positions == [Position.span(8, 11), Position.span(0, 3)]


def test_unknown_kind_is_empty():
    """Test that unsupported kinds yield no positions instead of an error."""
    assert get_positions("table", "| a | b |\n| - | - |\n") == []
    assert MarkdownParser().resolve_positions("*a*", "nonsense") == []


def test_fenced_code_block():
    """Test fenced code block range covers both fences."""
    text = "Text\n\n```python\nx = 1\n```\n\nMore"
    positions = get_positions("code", text)

    assert positions == [Position.span(6, 25)]
    assert positions[0].slice(text) == "```python\nx = 1\n```"


def test_tilde_fence_needs_matching_length():
    """Test that a shorter closing fence does not end the block."""
    text = "~~~~\n~~~\nstill code\n~~~~\nafter"
    assert _slices("code", text) == ["~~~~\n~~~\nstill code\n~~~~"]


def test_unclosed_fence_runs_to_end():
    """Test that an unclosed fence swallows the rest of the document."""
    text = "Intro\n\n```\ncode\nmore code\n"
    assert _slices("code", text) == ["```\ncode\nmore code"]


def test_indented_code_block():
    """Test indented code after a blank line."""
    text = "Para\n\n    code line\n\n    more\n\nAfter"
    assert _slices("code", text) == ["    code line\n\n    more"]


def test_indented_line_continues_paragraph():
    """Test that an indented line inside a paragraph is not code."""
    assert get_positions("code", "Para\n    still para\n") == []


def test_indented_list_continuation_is_not_code():
    """Test that indented content under a list item is not code."""
    text = "- item\n\n    continued item\n"
    assert get_positions("code", text) == []


def test_inline_code():
    """Test inline code spans, and that emphasis inside them is ignored."""
    text = "Use `x*y*z` and ``a ` b`` here"

    assert _slices("inline_code", text) == ["``a ` b``", "`x*y*z`"]
    assert get_positions("emphasis", text) == []


def test_unmatched_backtick_is_literal():
    """Test that a lone backtick does not open a code span."""
    text = "a ` b *c*"
    assert get_positions("inline_code", text) == []
    assert _slices("emphasis", text) == ["*c*"]


def test_footnote_definitions():
    """Test footnote definitions are found with their exact extent."""
    text = "A[^1]\n\n[^1]: one\n\nB[^2]\n\n[^2]: two\n\nC"
    assert _slices("footnote_definition", text) == ["[^2]: two", "[^1]: one"]


def test_footnote_definition_continuation():
    """Test lazy and indented continuation lines belong to the definition."""
    text = "[^n]: first\nlazy line\n\n    indented para\n\nTail\n"
    assert _slices("footnote_definition", text) == [
        "[^n]: first\nlazy line\n\n    indented para"
    ]


def test_strong_inside_emphasis():
    """Test triple delimiters split into emphasis around strong."""
    text = "***a***"

    assert get_positions("strong", text) == [Position.span(1, 6)]
    assert get_positions("emphasis", text) == [Position.span(0, 7)]


def test_strong_and_emphasis_mixed():
    """Test strong and emphasis spans side by side."""
    text = "**a** *b* __c__"

    assert _slices("strong", text) == ["__c__", "**a**"]
    assert _slices("emphasis", text) == ["*b*"]


def test_intraword_underscore_is_not_emphasis():
    """Test snake_case identifiers are left alone."""
    assert get_positions("emphasis", "snake_case_name and more") == []


def test_intraword_asterisk_is_emphasis():
    """Test asterisks may emphasize part of a word."""
    assert _slices("emphasis", "un*frigging*believable") == ["*frigging*"]


def test_escaped_delimiters():
    """Test backslash-escaped delimiters do not form emphasis."""
    assert get_positions("emphasis", r"\*not emphasis\*") == []


def test_emphasis_ignores_code_blocks():
    """Test emphasis markers inside fences are not reported."""
    text = "```\n*a*\n```\n\n*b*\n"
    assert _slices("emphasis", text) == ["*b*"]


def test_emphasis_skips_link_destination():
    """Test delimiters inside a link destination are inert."""
    text = "[x](http://a*b*c) and *d*"
    assert _slices("emphasis", text) == ["*d*"]


def test_emphasis_does_not_cross_paragraphs():
    """Test that a blank line ends the inline run."""
    assert get_positions("emphasis", "*a\n\nb*") == []


def test_emphasis_in_heading():
    """Test headings are scanned for inline content."""
    text = "# A *title*\n\nBody"
    assert _slices("emphasis", text) == ["*title*"]
    assert _slices("heading", text) == ["# A *title*"]


def test_front_matter_position():
    """Test the front matter block is reported and not scanned for emphasis."""
    text = "---\ntitle: *x*\n---\n*y*\n"

    assert _slices("yaml", text) == ["---\ntitle: *x*\n---"]
    assert _slices("emphasis", text) == ["*y*"]


def test_thematic_break_is_not_emphasis():
    """Test that *** on its own line is a rule, not delimiters."""
    assert get_positions("emphasis", "a\n\n***\n\nb") == []
    assert get_positions("strong", "a\n\n***\n\nb") == []


def test_fence_in_nested_list_item():
    """Test a fence at list content indent is code, blank lines included."""
    text = "- a\n  - b\n    ```py\n    x = 1\n\n    def f(**kw): return __name__\n    ```\n"

    assert _slices("code", text) == [
        "```py\n    x = 1\n\n    def f(**kw): return __name__\n    ```"
    ]
    assert get_positions("strong", text) == []


def test_fence_in_tab_indented_list_item():
    """Test a tab counts towards the list item's content indent."""
    text = "- a\n\t```\n\tx = 1\n\n\t*x*\n\t```\n"

    assert _slices("code", text) == ["```\n\tx = 1\n\n\t*x*\n\t```"]
    assert get_positions("emphasis", text) == []


def test_indented_code_in_list_item():
    """Test indented code is measured from the list item's content."""
    text = "- a\n\n      code *x*\n"
    assert _slices("code", text) == ["    code *x*"]
    assert get_positions("emphasis", text) == []


def test_list_item_ends_at_dedent():
    """Test an unindented paragraph after a blank line leaves the list."""
    text = "- a\n\n```\n*c*\n```\n\n*d*\n"
    assert _slices("code", text) == ["```\n*c*\n```"]
    assert _slices("emphasis", text) == ["*d*"]


def test_fence_in_blockquote():
    """Test quote markers are stripped before looking for fences."""
    text = "> ```\n> *a*\n> ```\n\n> *b*\n"

    assert _slices("code", text) == ["```\n> *a*\n> ```"]
    assert _slices("emphasis", text) == ["*b*"]


def test_html_block_is_not_prose():
    """Test raw HTML blocks are not scanned for emphasis."""
    text = "<div>\n*a* _b_\n</div>\n\n_c_\n"
    assert _slices("emphasis", text) == ["_c_"]


def test_html_comment_block():
    """Test a comment runs to its closing marker."""
    text = "<!--\n*a*\n-->\n*b*\n"
    assert _slices("emphasis", text) == ["*b*"]


def test_inline_html_is_prose():
    """Test a line that merely starts with an inline tag stays a paragraph."""
    assert _slices("emphasis", "<span>*a*</span>\n") == ["*a*"]
