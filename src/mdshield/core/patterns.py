"""Shared regular expressions for markdown documents."""

import re

# ATX heading: leading space, hashes, separating whitespace, title
HEADER_RE = re.compile(r"^([ \t]*)(#+)([ \t]+)(.*)$")

# Front matter is only recognised at the very start of the document.
# Use with .match(); group 1 is the YAML body including its final newline.
YAML_RE = re.compile(r"---\r?\n((?!---).*?\r?\n)?---(?=\r?\n|\Z)", re.DOTALL)

# [text](url), ![alt](url) and [[wiki]] links, one line at a time
LINK_RE = re.compile(r"((!?)\[.*\]\(.*\))|(\[{2}.*\]{2})")
