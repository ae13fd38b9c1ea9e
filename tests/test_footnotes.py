"""Tests for footnote relocation."""

from mdshield.format.footnotes import move_footnotes_to_end


def test_move_footnotes_to_end():
    """Test definitions are appended in their original order."""
    text = "A[^1]\n\n[^1]: one\n\nB[^2]\n\n[^2]: two\n\nC"
    result = move_footnotes_to_end(text)

    assert result == "A[^1]\n\nB[^2]\n\nC\n\n[^1]: one\n[^2]: two"


def test_no_footnotes_is_exact_noop():
    """Test text without definitions is not even trimmed."""
    text = "Text with a ref[^1] but no definition  \n\n\n"
    assert move_footnotes_to_end(text) == text


def test_footnote_already_at_end():
    """Test a trailing definition is normalised to sit after a blank line."""
    text = "Body[^a]\n\n[^a]: note\n"
    assert move_footnotes_to_end(text) == "Body[^a]\n\n[^a]: note"


def test_multiline_footnote_moves_whole():
    """Test indented continuation lines travel with their definition."""
    text = "[^n]: first\n    second\n\nTail\n"
    assert move_footnotes_to_end(text) == "Tail\n\n[^n]: first\n    second"


def test_footnote_in_code_block_stays():
    """Test definitions inside code fences are not moved."""
    text = "```\n[^x]: not a footnote\n```\n\n[^y]: real\n\nEnd\n"
    assert move_footnotes_to_end(text) == "```\n[^x]: not a footnote\n```\n\nEnd\n\n[^y]: real"


def test_move_footnotes_crlf():
    """Test CRLF documents keep their line endings."""
    text = "A[^1]\r\n\r\n[^1]: one\r\n\r\nB\r\n"
    assert move_footnotes_to_end(text) == "A[^1]\r\n\r\nB\r\n\r\n[^1]: one"
