"""Text hygiene rules for markdown documents."""

import os

from ..core.patterns import HEADER_RE


def normalize_text(
    text: str,
    eol: str | None = None,
    strip_trailing: bool = False,
    ensure_final_eol: bool = False,
) -> str:
    """Apply text hygiene transformations.

    Args:
        text: Input text
        eol: Line ending style ('lf', 'crlf', 'native', or None to preserve)
        strip_trailing: Remove trailing whitespace from lines
        ensure_final_eol: Ensure text ends with newline

    Returns:
        Normalized text
    """
    result = text

    if eol:
        result = normalize_eol(result, eol)

    if strip_trailing:
        result = strip_trailing_whitespace(result)

    if ensure_final_eol and result and not result.endswith(('\n', '\r\n')):
        # Without an explicit style, follow the document's own line endings
        crlf = _resolve_eol(eol) == 'crlf' if eol else '\r\n' in result
        result += '\r\n' if crlf else '\n'

    return result


def _resolve_eol(eol: str | None) -> str | None:
    if eol == 'native':
        return 'crlf' if os.name == 'nt' else 'lf'
    return eol


def normalize_eol(text: str, eol: str) -> str:
    """Convert every line ending to ``eol`` ('lf', 'crlf' or 'native')."""
    result = text.replace('\r\n', '\n').replace('\r', '\n')
    if _resolve_eol(eol) == 'crlf':
        result = result.replace('\n', '\r\n')
    return result


def strip_trailing_whitespace(text: str) -> str:
    """Remove trailing spaces and tabs from every line, keeping line endings."""
    lines = text.splitlines(keepends=True)
    stripped_lines = []
    for line in lines:
        line_content = line.rstrip('\r\n')
        line_ending = line[len(line_content):]
        stripped_lines.append(line_content.rstrip(' \t') + line_ending)
    return ''.join(stripped_lines)


def space_after_heading_hashes(text: str) -> str:
    """Collapse the whitespace between heading hashes and title to one space."""
    lines = text.split('\n')
    for i, line in enumerate(lines):
        m = HEADER_RE.match(line)
        if m and m.group(3) != ' ':
            lines[i] = f"{m.group(1)}{m.group(2)} {m.group(4)}"
    return '\n'.join(lines)

