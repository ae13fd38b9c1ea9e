from __future__ import annotations
from dataclasses import dataclass

# Element kinds understood by the position resolver
CODE = "code"  # fenced or indented code block
INLINE_CODE = "inline_code"
FOOTNOTE_DEFINITION = "footnote_definition"
EMPHASIS = "emphasis"
STRONG = "strong"
HEADING = "heading"
YAML = "yaml"

ELEMENT_KINDS = frozenset(
    {CODE, INLINE_CODE, FOOTNOTE_DEFINITION, EMPHASIS, STRONG, HEADING, YAML}
)


@dataclass(frozen=True)
class Point:
    offset: int  # character offset into the raw text


@dataclass(frozen=True)
class Position:
    start: Point
    end: Point  # exclusive

    @classmethod
    def span(cls, start: int, end: int) -> "Position":
        return cls(Point(start), Point(end))

    def slice(self, text: str) -> str:
        return text[self.start.offset : self.end.offset]
