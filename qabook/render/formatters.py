from __future__ import annotations

"""Formatters projecting a validated Collection into output documents."""

import logging
from typing import Callable

from qabook.collection.errors import UnsupportedFormatError
from qabook.collection.types import Collection, Entry
from qabook.loaders.markdown import is_tags_line
from qabook.render.html_page import render_html
from qabook.render.options import RenderOptions

logger = logging.getLogger(__name__)

_ANSWER_INDENT = "    "


def render_plain(collection: Collection, options: RenderOptions | None = None) -> str:
    """Render a printable study sheet with numbered questions."""
    options = options or RenderOptions()
    blocks: list[str] = []
    title = options.resolve_title(collection.title)
    if title:
        rule = "=" * len(title)
        blocks.append(f"{rule}\n{title}\n{rule}")

    number = 0
    for section in collection.sections:
        blocks.append(f"{section.name}\n{'-' * len(section.name)}")
        if section.intro:
            blocks.append(section.intro)
        for entry in section.entries:
            number += 1
            blocks.append(_plain_entry(number, entry, options))
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def _plain_entry(number: int, entry: Entry, options: RenderOptions) -> str:
    """Format a single entry as a question line followed by an indented answer."""
    lines = [f"Q{number}. {entry.question}"]
    for line in entry.answer.split("\n"):
        lines.append(f"{_ANSWER_INDENT}{line}" if line.strip() else "")
    if options.include_tags and entry.tags:
        lines.append("")
        lines.append(f"{_ANSWER_INDENT}Tags: {', '.join(entry.tags)}")
    return "\n".join(lines)


def render_markdown(collection: Collection, options: RenderOptions | None = None) -> str:
    """Render heading markup that the Markdown loader reads back unchanged."""
    options = options or RenderOptions()
    section_marker = "#" * options.section_level
    question_marker = "#" * options.question_level
    blocks: list[str] = []
    title = options.resolve_title(collection.title)
    if title and options.section_level > 1:
        blocks.append(f"{'#' * (options.section_level - 1)} {title}")

    for section in collection.sections:
        blocks.append(f"{section_marker} {section.name}")
        if section.intro:
            blocks.append(section.intro)
        for entry in section.entries:
            blocks.append(_markdown_entry(entry, question_marker, options))
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def _markdown_entry(entry: Entry, marker: str, options: RenderOptions) -> str:
    parts = [f"{marker} {entry.question} {{#{entry.id}}}"]
    tags = ", ".join(entry.tags) if options.include_tags else ""
    first_line = entry.answer.lstrip("\n").split("\n", 1)[0]
    # the loader consumes only the first tags line
    if tags or is_tags_line(first_line):
        parts.append(f"Tags: {tags}".rstrip())
    parts.append(entry.answer)
    return "\n\n".join(parts)


_RENDERERS: dict[str, Callable[[Collection, RenderOptions | None], str]] = {
    "plain": render_plain,
    "html": render_html,
    "markdown": render_markdown,
}


def supported_formats() -> list[str]:
    """Return the recognized format selectors."""
    return list(_RENDERERS)


def resolve_format(fmt: str) -> str:
    """Normalize a format selector or raise UnsupportedFormatError."""
    normalized = (fmt or "").strip().lower()
    if normalized not in _RENDERERS:
        raise UnsupportedFormatError(fmt, supported_formats())
    return normalized


def render_collection(
    collection: Collection,
    fmt: str,
    options: RenderOptions | None = None,
) -> str:
    """Render a collection into a complete output document."""
    normalized = resolve_format(fmt)
    output = _RENDERERS[normalized](collection, options or RenderOptions())
    logger.info(
        "collection_rendered",
        extra={
            "format": normalized,
            "sections": len(collection.sections),
            "entries": collection.entry_count,
            "output_chars": len(output),
        },
    )
    return output
