import io
import re
from typing import Any

import yaml

from ..core.patterns import YAML_RE
from ..core.ports import FrontmatterCodec

# Tabs are not legal YAML indentation but show up in hand-edited front matter
_TAB_INDENT = re.compile(r"\n\t+")
_UNLIMITED = float("inf")


def load_yaml(text: str) -> dict[str, Any]:
    """Decode a YAML mapping, tolerating tab-indented lines.

    ``text`` may be the bare YAML body or a whole ``---`` delimited block.
    An empty document decodes to ``{}``. Malformed YAML raises
    ``yaml.YAMLError``.
    """
    m = YAML_RE.match(text)
    if m:
        text = m.group(1) or ""
    parsed = yaml.safe_load(io.StringIO(_TAB_INDENT.sub("\n  ", text)))
    if not parsed:
        return {}
    return parsed


def dump_yaml(meta: dict[str, Any]) -> str:
    """Encode a mapping without line folding, keeping key order."""
    if not meta:
        return ""
    buf = io.StringIO()
    yaml.safe_dump(meta, buf, sort_keys=False, allow_unicode=True, width=_UNLIMITED)
    return buf.getvalue()


def escape_yaml_string(value: str) -> str:
    """Render ``value`` as a single YAML scalar, quoted when it has to be."""
    out = yaml.safe_dump(value, allow_unicode=True, width=_UNLIMITED)
    # Plain scalars come back with an explicit document end marker
    if out.endswith("\n...\n"):
        out = out[: -len("...\n")]
    return out[:-1] if out.endswith("\n") else out


class YamlFrontmatter(FrontmatterCodec):
    def decode(self, text: str) -> dict[str, Any]:
        return load_yaml(text)

    def encode(self, meta: dict[str, Any]) -> str:
        return f"---\n{dump_yaml(meta)}---"
