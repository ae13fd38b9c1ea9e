"""Tests for offset-based splicing."""

from mdshield.core.model import Position
from mdshield.core.splice import insert, replace_first, splice, splice_all


def test_splice_replaces_range():
    """Test that the half-open range is replaced."""
    assert splice("hello world", Position.span(6, 11), "there") == "hello there"


def test_splice_empty_range_inserts():
    """Test that an empty range acts as an insertion point."""
    assert splice("ab", Position.span(1, 1), "-") == "a-b"


def test_splice_all_uses_original_offsets():
    """Test that a batch resolves against the original text regardless of input order."""
    text = "a *b* c *d* e"
    positions = [Position.span(2, 5), Position.span(8, 11)]

    result = splice_all(text, positions, lambda s: f"[{s.upper()}]")

    assert result == "a [*B*] c [*D*] e"


def test_replace_first_is_literal():
    """Test that group references in the replacement are not expanded."""
    text = "X and X"
    result = replace_first(text, "X", r"$1 \1 \g<0>")
    assert result == r"$1 \1 \g<0> and X"


def test_replace_first_ignore_case():
    """Test case-insensitive matching of the target."""
    assert replace_first("a token b", "TOKEN", "[x](y)", ignore_case=True) == "a [x](y) b"


def test_replace_first_missing_target():
    """Test that a missing target leaves the text alone."""
    assert replace_first("abc", "zzz", "y") == "abc"


def test_insert():
    """Test insertion at an index."""
    assert insert("body", 0, "---\n---\n") == "---\n---\nbody"
