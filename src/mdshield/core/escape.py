"""Escaping helpers for literal insertion into substitution and pattern engines."""

import re

_PATTERN_META = re.compile(r"[.*+?^${}()|[\]\\]")


def escape_for_substitution(text: str) -> str:
    """Double every ``$`` so a ``$``-substitution engine emits it literally.

    Use this for user-derived text that becomes part of a
    ``string.Template`` (or any other ``$``-placeholder syntax).

        >>> from string import Template
        >>> Template(escape_for_substitution("$5 and $$")).substitute()
        '$5 and $$'
    """
    return text.replace("$", "$$")


def escape_for_pattern(text: str) -> str:
    """Backslash-escape regular-expression metacharacters in ``text``."""
    return _PATTERN_META.sub(lambda m: "\\" + m.group(0), text)
