"""Tests for text hygiene."""

from mdshield.format.text import (
    normalize_eol,
    normalize_text,
    space_after_heading_hashes,
    strip_trailing_whitespace,
)


def test_normalize_text_strip_trailing():
    """Test trailing whitespace removal."""
    text = "Line 1  \nLine 2\t\nLine 3   \n"
    result = normalize_text(text, strip_trailing=True)
    assert result == "Line 1\nLine 2\nLine 3\n"


def test_normalize_text_ensure_final_eol():
    """Test ensuring final newline."""
    text = "Line 1\nLine 2"
    result = normalize_text(text, ensure_final_eol=True)
    assert result.endswith("\n")


def test_normalize_text_empty_stays_empty():
    """Test that empty text does not gain a newline."""
    assert normalize_text("", ensure_final_eol=True) == ""


def test_normalize_text_eol_lf():
    """Test LF normalization."""
    text = "Line 1\r\nLine 2\rLine 3\n"
    result = normalize_text(text, eol="lf")
    assert "\r" not in result
    assert "Line 1\nLine 2\nLine 3\n" == result


def test_normalize_text_eol_crlf():
    """Test CRLF normalization."""
    text = "Line 1\nLine 2\n"
    result = normalize_text(text, eol="crlf")
    assert result == "Line 1\r\nLine 2\r\n"


def test_normalize_eol_crlf_idempotent():
    """Test converting CRLF text to CRLF does not double carriage returns."""
    assert normalize_eol("a\r\nb\r\n", "crlf") == "a\r\nb\r\n"


def test_strip_trailing_keeps_crlf():
    """Test line endings survive trailing whitespace removal."""
    assert strip_trailing_whitespace("a \r\nb\t\r\n") == "a\r\nb\r\n"


def test_normalize_text_combined():
    """Test combining multiple transformations."""
    text = "Line 1  \r\nLine 2\t\r\nLine 3"
    result = normalize_text(
        text,
        eol="lf",
        strip_trailing=True,
        ensure_final_eol=True,
    )

    assert result == "Line 1\nLine 2\nLine 3\n"


def test_space_after_heading_hashes():
    """Test the gap after heading hashes is one space."""
    text = "#   Title\n##\tSub\n### Fine\nNot #  a heading\n"
    assert space_after_heading_hashes(text) == "# Title\n## Sub\n### Fine\nNot #  a heading\n"


def test_space_after_heading_hashes_needs_whitespace():
    """Test hashtags are not mistaken for headings."""
    text = "#tag and more\n"
    assert space_after_heading_hashes(text) == text


def test_space_after_heading_hashes_crlf():
    """Test carriage returns are kept on heading lines."""
    text = "#  Title\r\n#\r\nBody\r\n"
    assert space_after_heading_hashes(text) == "# Title\r\n#\r\nBody\r\n"


def test_normalize_text_final_eol_follows_document():
    """Test the added newline matches the document's line endings."""
    assert normalize_text("a\r\nb", ensure_final_eol=True) == "a\r\nb\r\n"
    assert normalize_text("a\nb", ensure_final_eol=True) == "a\nb\n"
