"""Main formatter driver for markdown documents."""

import logging
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from ..core.model import EMPHASIS, STRONG
from ..core.ports import Transform
from .emphasis import make_emphasis_or_bold_consistent
from .fm import ensure_front_matter, order_front_matter_keys
from .footnotes import move_footnotes_to_end
from .protect import ignore_code_blocks_yaml_and_links
from .text import (
    normalize_eol,
    normalize_text,
    space_after_heading_hashes,
    strip_trailing_whitespace,
)

logger = logging.getLogger(__name__)


@dataclass
class FormatOptions:
    """Options for document formatting."""

    # Front matter options
    ensure_front_matter: bool = False
    order_keys: bool = False
    key_order: list[str] | None = None
    sort_keys: bool = True

    # Prose options (None disables the rule)
    emphasis_style: str | None = "consistent"
    strong_style: str | None = "consistent"
    heading_space: bool = True
    move_footnotes: bool = False

    # Text hygiene options
    eol: str | None = None
    strip_trailing: bool = True
    ensure_final_eol: bool = True


@dataclass
class FormatResult:
    """Result of formatting a document."""

    changed: bool
    changes: list[str]  # Rule names that altered the text, in pipeline order
    original_text: str
    formatted_text: str
    path: Path | None = None


@dataclass
class _Rule:
    name: str
    apply: Transform


@dataclass
class _Pipeline:
    rules: list[_Rule] = field(default_factory=list)
    changes: list[str] = field(default_factory=list)

    def add(self, name: str, apply: Transform) -> None:
        self.rules.append(_Rule(name, apply))

    def run(self, text: str) -> str:
        for rule in self.rules:
            result = rule.apply(text)
            if result != text:
                logger.debug("Rule %s changed the text", rule.name)
                self.changes.append(rule.name)
                text = result
        return text


def _front_matter_rules(options: FormatOptions) -> _Pipeline:
    pipeline = _Pipeline()
    if options.ensure_front_matter:
        pipeline.add("front-matter", ensure_front_matter)
    if options.order_keys:
        pipeline.add(
            "front-matter-keys",
            partial(
                order_front_matter_keys,
                key_order=options.key_order,
                sort_keys=options.sort_keys,
            ),
        )
    return pipeline


def _prose_rules(options: FormatOptions) -> _Pipeline:
    pipeline = _Pipeline()
    if options.strong_style:
        pipeline.add(
            "strong",
            partial(make_emphasis_or_bold_consistent, style=options.strong_style, kind=STRONG),
        )
    if options.emphasis_style:
        pipeline.add(
            "emphasis",
            partial(make_emphasis_or_bold_consistent, style=options.emphasis_style, kind=EMPHASIS),
        )
    if options.heading_space:
        pipeline.add("headings", space_after_heading_hashes)
    if options.strip_trailing:
        # Inside the protected pass so code keeps its trailing whitespace
        pipeline.add("whitespace", strip_trailing_whitespace)
    return pipeline


def _structure_rules(options: FormatOptions) -> _Pipeline:
    pipeline = _Pipeline()
    if options.move_footnotes:
        # Relocating definitions would reorder sentinels, so this runs unmasked
        pipeline.add("footnotes", move_footnotes_to_end)
    return pipeline


def format_note(
    raw_text: str,
    options: FormatOptions | None = None,
) -> FormatResult:
    """Format a document according to options.

    Args:
        raw_text: The full document content
        options: Formatting options

    Returns:
        FormatResult with formatted text and change information

    Raises:
        yaml.YAMLError: If a front matter rule meets malformed YAML
    """
    if options is None:
        options = FormatOptions()

    original = raw_text
    result = raw_text
    changes: list[str] = []

    # Step 1: Line endings
    if options.eol:
        normalized = normalize_eol(result, options.eol)
        if normalized != result:
            changes.append("eol")
            result = normalized

    # Step 2: Front matter
    front_matter = _front_matter_rules(options)
    result = front_matter.run(result)
    changes.extend(front_matter.changes)

    # Step 3: Prose rules, with code, front matter and links masked
    prose = _prose_rules(options)
    if prose.rules:
        result = ignore_code_blocks_yaml_and_links(result, prose.run)
        changes.extend(prose.changes)

    # Step 4: Rules that move whole blocks
    structure = _structure_rules(options)
    result = structure.run(result)
    changes.extend(structure.changes)

    # Step 5: Final newline, and line endings of any re-encoded front matter
    if options.ensure_final_eol or options.eol:
        finished = normalize_text(
            result, eol=options.eol, ensure_final_eol=options.ensure_final_eol
        )
        if finished != result:
            changes.append("final-eol")
            result = finished

    return FormatResult(
        changed=result != original,
        changes=changes,
        original_text=original,
        formatted_text=result,
    )


def format_file(
    file_path: Path,
    options: FormatOptions | None = None,
    dry_run: bool = True,
) -> FormatResult:
    """Format a markdown file.

    Args:
        file_path: Path to the markdown file
        options: Formatting options
        dry_run: If True, don't write changes

    Returns:
        FormatResult
    """
    raw_text = file_path.read_text(encoding='utf-8')

    result = format_note(raw_text, options)
    result.path = file_path

    # Write if not dry run and changed
    if not dry_run and result.changed:
        # Atomic write using temp file
        tmp_path = file_path.with_suffix(file_path.suffix + '.tmp')
        try:
            tmp_path.write_text(result.formatted_text, encoding='utf-8')
            tmp_path.replace(file_path)
        except Exception:
            # Clean up temp file on error
            if tmp_path.exists():
                tmp_path.unlink()
            raise
        logger.info("Formatted %s (%s)", file_path, ", ".join(result.changes))

    return result
