from typing import Any, Callable, Protocol

from .model import Position

Transform = Callable[[str], str]


class PositionResolver(Protocol):
    """
    Structural parse of a document, queried one element kind at a time.
    Unknown kinds yield an empty list, never an error.
    """

    def resolve_positions(self, text: str, kind: str) -> list[Position]:
        pass


class FrontmatterCodec(Protocol):
    """
    Decode/encode the YAML mapping held in a front-matter block.
    """

    def decode(self, text: str) -> dict[str, Any]:
        pass

    def encode(self, meta: dict[str, Any]) -> str:
        pass
