import re
import unicodedata
from dataclasses import dataclass, field

from ..core.model import (
    CODE,
    ELEMENT_KINDS,
    EMPHASIS,
    FOOTNOTE_DEFINITION,
    HEADING,
    INLINE_CODE,
    STRONG,
    YAML,
    Position,
)
from ..core.patterns import YAML_RE
from ..core.ports import PositionResolver

# Block patterns match a line with its indentation and container prefixes removed
FENCE_RE = re.compile(r"(`{3,}|~{3,})(.*)$")
ATX_HEADING_RE = re.compile(r"#{1,6}(?:[ \t]|$)")
THEMATIC_BREAK_RE = re.compile(r"([-*_])(?:[ \t]*\1){2,}[ \t]*$")
LIST_MARKER_RE = re.compile(r"(?:[-+*]|\d{1,9}[.)])(?=[ \t]|$)")
FOOTNOTE_DEF_RE = re.compile(r"\[\^[^\]\s]+\]:")
AUTOLINK_RE = re.compile(r"<[A-Za-z][A-Za-z0-9.+-]{1,31}:[^<>\s]*>|<[^<>\s@]+@[^<>\s@]+>")

_HTML_BLOCK_TAGS = (
    "address|article|aside|base|basefont|blockquote|body|caption|center|col|"
    "colgroup|dd|details|dialog|dir|div|dl|dt|fieldset|figcaption|figure|"
    "footer|form|frame|frameset|h[1-6]|head|header|hr|html|iframe|legend|li|"
    "link|main|menu|menuitem|nav|noframes|ol|optgroup|option|p|param|search|"
    "section|summary|table|tbody|td|tfoot|th|thead|title|tr|track|ul"
)
# (start, end) pairs; an end of None means the block runs to a blank line
HTML_BLOCK_STARTS = [
    (re.compile(r"<(?:script|pre|style|textarea)(?:\s|>|$)", re.I),
     re.compile(r"</(?:script|pre|style|textarea)>", re.I)),
    (re.compile(r"<!--"), re.compile(r"-->")),
    (re.compile(r"<\?"), re.compile(r"\?>")),
    (re.compile(r"<![A-Za-z]"), re.compile(r">")),
    (re.compile(r"<!\[CDATA\["), re.compile(r"\]\]>")),
    (re.compile(rf"</?(?:{_HTML_BLOCK_TAGS})(?:\s|/?>|$)", re.I), None),
]
# Any other complete tag alone on its line, which cannot interrupt a paragraph
HTML_TAG_LINE_RE = re.compile(
    r"(?:<[A-Za-z][A-Za-z0-9-]*"
    r"(?:\s+[A-Za-z_:][\w.:-]*(?:\s*=\s*(?:[^\s\"'=<>`]+|'[^']*'|\"[^\"]*\"))?)*"
    r"\s*/?>|</[A-Za-z][A-Za-z0-9-]*\s*>)[ \t]*$"
)

BLOCK_KINDS = (CODE, FOOTNOTE_DEFINITION, HEADING, YAML)
INLINE_KINDS = (INLINE_CODE, EMPHASIS, STRONG)


@dataclass
class Layout:
    """Block-level view of a document."""
    blocks: dict[str, list[tuple[int, int]]] = field(
        default_factory=lambda: {kind: [] for kind in BLOCK_KINDS}
    )
    # Runs of inline content (paragraphs, headings, footnote bodies)
    chunks: list[tuple[int, int]] = field(default_factory=list)


@dataclass
class _Container:
    """An open blockquote, or a list item whose content sits ``width`` columns in."""
    quote: bool
    width: int = 0


@dataclass
class _Delimiter:
    char: str
    pos: int  # offset of the first delimiter character still unmatched
    length: int
    orig: int
    can_open: bool
    can_close: bool


def _split_lines(text: str) -> list[tuple[int, str]]:
    """Split on LF, returning (offset, line) with any CR dropped from the line."""
    out = []
    offset = 0
    for line in text.split("\n"):
        out.append((offset, line.rstrip("\r")))
        offset += len(line) + 1
    return out


# A line is read through a cursor of (pos, col, extra): the character index,
# the visual column, and the columns still owed by a partly consumed tab.

def _indent(line: str, pos: int, col: int, extra: int) -> tuple[int, int]:
    """Return the width in columns of the whitespace at the cursor, and where it ends."""
    width = extra
    col += extra
    while pos < len(line) and line[pos] in " \t":
        step = 1 if line[pos] == " " else 4 - col % 4
        width += step
        col += step
        pos += 1
    return width, pos


def _eat(line: str, pos: int, col: int, extra: int, want: int) -> tuple[int, int, int]:
    """Consume up to ``want`` columns of whitespace."""
    while want:
        if extra:
            take = min(extra, want)
            extra -= take
            col += take
            want -= take
        elif pos < len(line) and line[pos] == " ":
            pos += 1
            col += 1
            want -= 1
        elif pos < len(line) and line[pos] == "\t":
            extra = 4 - col % 4
            pos += 1
        else:
            break
    return pos, col, extra


def _match(line: str, containers: list[_Container]) -> tuple[int, int, int, int]:
    """Walk the container prefixes of ``line``.

    Returns how many of ``containers`` the line continues, and the cursor
    after their prefixes.
    """
    pos = col = extra = 0
    for n, container in enumerate(containers):
        width, first = _indent(line, pos, col, extra)
        if container.quote:
            if width >= 4 or not line.startswith(">", first):
                return n, pos, col, extra
            pos, col, extra = _eat(line, first + 1, col + width + 1, 0, 1)
        elif first < len(line):
            if width < container.width:
                return n, pos, col, extra
            pos, col, extra = _eat(line, pos, col, extra, container.width)
        # A blank line continues a list item
    return len(containers), pos, col, extra


def _html_start(body: str, in_paragraph: bool):
    """Return ``(opener end, end pattern)`` when ``body`` opens an HTML block."""
    for start_re, end_re in HTML_BLOCK_STARTS:
        m = start_re.match(body)
        if m:
            return m.end(), end_re
    if not in_paragraph and HTML_TAG_LINE_RE.match(body):
        return len(body), None
    return None


def _starts_block(width: int, body: str) -> bool:
    if width >= 4:
        return False
    return bool(
        FOOTNOTE_DEF_RE.match(body)
        or FENCE_RE.match(body)
        or ATX_HEADING_RE.match(body)
        or THEMATIC_BREAK_RE.match(body)
        or LIST_MARKER_RE.match(body)
        or body.startswith(">")
        or _html_start(body, in_paragraph=True)
    )


class _BlockScanner:
    def __init__(self, text: str):
        self.text = text
        self.lines = _split_lines(text)
        self.layout = Layout()
        self._chunk: list[int] | None = None
        self._containers: list[_Container] = []

    def scan(self) -> Layout:
        lines = self.lines
        containers = self._containers
        i = 0

        m = YAML_RE.match(self.text)
        if m:
            self.layout.blocks[YAML].append((0, m.end()))
            while i < len(lines) and lines[i][0] < m.end():
                i += 1

        prev_blank = True
        while i < len(lines):
            offset, line = lines[i]
            matched, pos, col, extra = _match(line, containers)

            if not line[pos:].strip():
                # Quotes end at a line without a marker, list items do not
                del containers[matched:]
                self._flush()
                prev_blank = True
                i += 1
                continue

            width, first = _indent(line, pos, col, extra)
            if matched < len(containers):
                lazy = not prev_blank and self._chunk is not None
                if lazy and not _starts_block(width, line[first:]):
                    self._extend(offset + first, offset + len(line))
                    i += 1
                    continue
                self._flush()
                del containers[matched:]
            prev_blank = False

            # Open the blockquotes and list items that start on this line
            while width < 4:
                body = line[first:]
                item = None if THEMATIC_BREAK_RE.match(body) else LIST_MARKER_RE.match(body)
                if body.startswith(">"):
                    containers.append(_Container(quote=True))
                    pos, col, extra = _eat(line, first + 1, col + width + 1, 0, 1)
                elif item:
                    marker_end, marker_col = first + item.end(), col + width + item.end()
                    spaces, content = _indent(line, marker_end, marker_col, 0)
                    if content == len(line) or spaces > 4:
                        spaces = 1
                    containers.append(_Container(quote=False, width=width + item.end() + spaces))
                    pos, col, extra = _eat(line, marker_end, marker_col, 0, spaces)
                else:
                    break
                # Each item is its own inline run
                self._flush()
                width, first = _indent(line, pos, col, extra)

            i = self._leaf(i, pos, width, first)

        self._flush()
        return self.layout

    def _leaf(self, i: int, pos: int, width: int, first: int) -> int:
        offset, line = self.lines[i]
        body = line[first:]
        start, end = offset + first, offset + len(line)
        if not body:
            return i + 1

        if width >= 4:
            if self._chunk is None:
                return self._indented(i, offset + pos)
            self._extend(start, end)
            return i + 1

        fence = FENCE_RE.match(body)
        # Backtick fences may not carry backticks in their info string
        if fence and not (fence.group(1)[0] == "`" and "`" in fence.group(2)):
            self._flush()
            return self._fenced(i, start, fence.group(1))

        html = _html_start(body, self._chunk is not None)
        if html:
            self._flush()
            return self._html(i, first + html[0], html[1])

        if FOOTNOTE_DEF_RE.match(body) and not self._containers:
            self._flush()
            return self._footnote(i, start)

        if ATX_HEADING_RE.match(body):
            self._flush()
            self.layout.blocks[HEADING].append((start, end))
            self.layout.chunks.append((start, end))
            return i + 1

        if THEMATIC_BREAK_RE.match(body):
            self._flush()
            return i + 1

        self._extend(start, end)
        return i + 1

    def _extend(self, start: int, end: int) -> None:
        if self._chunk is None:
            self._chunk = [start, end]
        else:
            self._chunk[1] = end

    def _flush(self) -> None:
        if self._chunk is not None:
            self.layout.chunks.append((self._chunk[0], self._chunk[1]))
            self._chunk = None

    def _continued(self, j: int) -> tuple[int, int] | None:
        """Return ``(indent width, first char)`` of line ``j`` inside the open
        containers, ``(0, -1)`` for a blank line, or None once they end."""
        line = self.lines[j][1]
        matched, pos, col, extra = _match(line, self._containers)
        if matched < len(self._containers):
            return None
        if not line[pos:].strip():
            return 0, -1
        return _indent(line, pos, col, extra)

    def _fenced(self, i: int, start: int, marker: str) -> int:
        offset, line = self.lines[i]
        end = offset + len(line)
        close_re = re.compile(rf"{re.escape(marker[0])}{{{len(marker)},}}[ \t]*$")

        # An unclosed fence runs until its container ends, or the document does
        for j in range(i + 1, len(self.lines)):
            inner = self._continued(j)
            if inner is None:
                self.layout.blocks[CODE].append((start, end))
                return j
            width, first = inner
            if first < 0:
                continue
            offset, line = self.lines[j]
            end = offset + len(line)
            if width < 4 and close_re.match(line, first):
                self.layout.blocks[CODE].append((start, end))
                return j + 1

        self.layout.blocks[CODE].append((start, end))
        return len(self.lines)

    def _indented(self, i: int, start: int) -> int:
        offset, line = self.lines[i]
        end = offset + len(line)
        last = i
        for j in range(i + 1, len(self.lines)):
            inner = self._continued(j)
            if inner is None:
                break
            width, first = inner
            if first < 0:
                continue
            if width < 4:
                break
            offset, line = self.lines[j]
            end = offset + len(line)
            last = j
        self.layout.blocks[CODE].append((start, end))
        return last + 1

    def _html(self, i: int, opened: int, end_re: re.Pattern | None) -> int:
        # Raw HTML is neither code nor prose: it yields no chunk
        if end_re is not None and end_re.search(self.lines[i][1], opened):
            return i + 1
        for j in range(i + 1, len(self.lines)):
            inner = self._continued(j)
            if inner is None:
                return j
            if end_re is None:
                if inner[1] < 0:
                    return j
            elif end_re.search(self.lines[j][1]):
                return j + 1
        return len(self.lines)

    def _footnote(self, i: int, start: int) -> int:
        offset, line = self.lines[i]
        end = offset + len(line)
        last = i
        for j in range(i + 1, len(self.lines)):
            offset, line = self.lines[j]
            if not line.strip():
                continue
            width, first = _indent(line, 0, 0, 0)
            after_blank = j > last + 1
            # Indented paragraphs always continue; lazy lines only directly
            # after content and only when they do not open a new block
            if width >= 4 or (not after_blank and not _starts_block(width, line[first:])):
                end = offset + len(line)
                last = j
                continue
            break
        self.layout.blocks[FOOTNOTE_DEFINITION].append((start, end))
        self.layout.chunks.append((start, end))
        return last + 1


def _is_punct(ch: str) -> bool:
    return unicodedata.category(ch)[0] in "PS"


def _run_end(text: str, i: int, end: int, ch: str) -> int:
    while i < end and text[i] == ch:
        i += 1
    return i


def _code_span_close(text: str, i: int, end: int, size: int) -> int | None:
    """Return the end of the backtick run of exactly ``size`` closing a code span."""
    while i < end:
        k = text.find("`", i, end)
        if k == -1:
            return None
        j = _run_end(text, k, end, "`")
        if j - k == size:
            return j
        i = j
    return None


def _delimiter(text: str, i: int, j: int, start: int, end: int) -> _Delimiter:
    ch = text[i]
    before = text[i - 1] if i > start else "\n"
    after = text[j] if j < end else "\n"

    left = not after.isspace() and (
        not _is_punct(after) or before.isspace() or _is_punct(before)
    )
    right = not before.isspace() and (
        not _is_punct(before) or after.isspace() or _is_punct(after)
    )

    if ch == "*":
        can_open, can_close = left, right
    else:
        # Underscores never open or close inside a word
        can_open = left and (not right or _is_punct(before))
        can_close = right and (not left or _is_punct(after))

    return _Delimiter(ch, i, j - i, j - i, can_open, can_close)


def _find_opener(stack: list[_Delimiter], closer: _Delimiter) -> int | None:
    for idx in range(len(stack) - 1, -1, -1):
        opener = stack[idx]
        if opener.char != closer.char:
            continue
        # "Rule of three" for delimiters that can both open and close
        if (opener.can_close or closer.can_open) and (
            (opener.orig + closer.orig) % 3 == 0
            and not (opener.orig % 3 == 0 and closer.orig % 3 == 0)
        ):
            continue
        return idx
    return None


def _match_delimiters(
    delimiters: list[_Delimiter], found: dict[str, list[tuple[int, int]]]
) -> None:
    stack: list[_Delimiter] = []
    for closer in delimiters:
        if closer.can_close:
            while closer.length:
                idx = _find_opener(stack, closer)
                if idx is None:
                    break
                opener = stack[idx]
                use = 2 if opener.length >= 2 and closer.length >= 2 else 1

                # Openers give up their innermost characters, closers their outermost-left
                opener.length -= use
                found[STRONG if use == 2 else EMPHASIS].append(
                    (opener.pos + opener.length, closer.pos + use)
                )
                closer.pos += use
                closer.length -= use

                del stack[idx + 1 :]
                if not opener.length:
                    del stack[idx]
        if closer.length and closer.can_open:
            stack.append(closer)


def _scan_inline(text: str, start: int, end: int) -> dict[str, list[tuple[int, int]]]:
    found: dict[str, list[tuple[int, int]]] = {kind: [] for kind in INLINE_KINDS}
    delimiters: list[_Delimiter] = []

    i = start
    while i < end:
        ch = text[i]

        if ch == "\\":
            i += 2
            continue

        if ch == "`":
            j = _run_end(text, i, end, "`")
            close = _code_span_close(text, j, end, j - i)
            if close is None:
                i = j
            else:
                found[INLINE_CODE].append((i, close))
                i = close
            continue

        if ch == "<":
            m = AUTOLINK_RE.match(text, i, end)
            if m:
                i = m.end()
                continue

        # Skip link destinations so underscores in URLs stay inert
        if ch == "]" and text.startswith("](", i):
            close = text.find(")", i + 2, end)
            if close != -1:
                i = close + 1
                continue

        if ch in "*_":
            j = _run_end(text, i, end, ch)
            delim = _delimiter(text, i, j, start, end)
            if delim.can_open or delim.can_close:
                delimiters.append(delim)
            i = j
            continue

        i += 1

    _match_delimiters(delimiters, found)
    return found


def scan_blocks(text: str) -> Layout:
    return _BlockScanner(text).scan()


class MarkdownParser(PositionResolver):
    def resolve_positions(self, text: str, kind: str) -> list[Position]:
        if kind not in ELEMENT_KINDS:
            return []

        layout = scan_blocks(text)
        if kind in layout.blocks:
            spans = list(layout.blocks[kind])
        else:
            spans = []
            for start, end in layout.chunks:
                spans.extend(_scan_inline(text, start, end)[kind])

        positions = [Position.span(start, end) for start, end in spans]
        # Highest start offset first so callers can splice without re-resolving
        positions.sort(key=lambda p: p.start.offset, reverse=True)
        return positions


_parser = MarkdownParser()


def get_positions(kind: str, text: str) -> list[Position]:
    """Positions of every ``kind`` element in ``text``, last one first."""
    return _parser.resolve_positions(text, kind)
