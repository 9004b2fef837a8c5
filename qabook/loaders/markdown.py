from __future__ import annotations

"""Markdown loader turning heading-based Q&A documents into a Collection."""

import hashlib
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from qabook.collection.errors import MalformedDocumentError
from qabook.collection.types import (
    Collection,
    Entry,
    Section,
    SourceLocation,
    is_closing_fence,
    match_fence,
)
from qabook.loaders.text import SourceText, load_text_bytes, load_text_file, normalize_text, slugify

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})(?:[ \t]+(?P<text>.*?))?(?:[ \t]+#+)?[ \t]*$")
_EXPLICIT_ID_RE = re.compile(r"\s*\{#(?P<id>[^}\s]+)\}$")
_TAGS_RE = re.compile(r"^tags\s*:\s*(?P<tags>.*)$", re.IGNORECASE)


@dataclass
class _EntryDraft:
    question: str
    entry_id: str
    location: SourceLocation
    lines: list[str] = field(default_factory=list)


@dataclass
class _SectionDraft:
    name: str
    location: SourceLocation
    intro: list[str] = field(default_factory=list)
    entries: list[Entry] = field(default_factory=list)


def check_levels(section_level: int, question_level: int, source: str = "<config>") -> None:
    """Reject heading level pairs the parser cannot work with."""
    if not 1 <= section_level <= 6 or not 1 <= question_level <= 6:
        raise MalformedDocumentError("heading levels must be between 1 and 6", source)
    if question_level <= section_level:
        raise MalformedDocumentError(
            "question heading level must be deeper than the section level", source
        )


def parse_markdown(
    text: str,
    source: str,
    section_level: int = 1,
    question_level: int = 2,
) -> Collection:
    """Parse one heading-based document into a Collection."""
    check_levels(section_level, question_level, source)
    parser = _DocumentParser(source, section_level, question_level)
    collection = parser.parse(text)
    logger.debug(
        "document_parsed",
        extra={
            "source": source,
            "sections": len(collection.sections),
            "entries": collection.entry_count,
        },
    )
    return collection


def load_markdown_file(
    path: Path,
    section_level: int = 1,
    question_level: int = 2,
    encoding: str = "utf-8",
) -> Collection:
    """Load a Markdown file from disk into a Collection."""
    source_text = load_text_file(path, encoding=encoding)
    return _parse_source(source_text, section_level, question_level)


def load_markdown_bytes(
    data: bytes,
    source: str,
    section_level: int = 1,
    question_level: int = 2,
    encoding: str = "utf-8",
) -> Collection:
    """Load Markdown bytes into a Collection."""
    source_text = load_text_bytes(data, source=source, encoding=encoding)
    return _parse_source(source_text, section_level, question_level)


def load_documents(
    paths: Iterable[Path],
    section_level: int = 1,
    question_level: int = 2,
    encoding: str = "utf-8",
) -> Collection:
    """Load several documents in order and concatenate their sections."""
    check_levels(section_level, question_level)
    collections = [
        load_markdown_file(
            Path(path),
            section_level=section_level,
            question_level=question_level,
            encoding=encoding,
        )
        for path in paths
    ]
    collection = merge_collections(collections)
    logger.info(
        "documents_loaded",
        extra={
            "documents": len(collections),
            "sections": len(collection.sections),
            "entries": collection.entry_count,
        },
    )
    return collection


def merge_collections(collections: Iterable[Collection]) -> Collection:
    """Concatenate collections, keeping sections separate and in order."""
    sections: list[Section] = []
    sources: list[str] = []
    title: str | None = None
    for collection in collections:
        sections.extend(collection.sections)
        sources.extend(collection.sources)
        if title is None:
            title = collection.title
    return Collection(sections=tuple(sections), title=title, sources=tuple(sources))


def _parse_source(source_text: SourceText, section_level: int, question_level: int) -> Collection:
    return parse_markdown(
        source_text.content,
        source=source_text.source,
        section_level=section_level,
        question_level=question_level,
    )


class _DocumentParser:
    """Line-oriented parser for a single document."""

    def __init__(self, source: str, section_level: int, question_level: int) -> None:
        self.source = source
        self.section_level = section_level
        self.question_level = question_level
        self.title: str | None = None
        self.sections: list[Section] = []
        self.section: _SectionDraft | None = None
        self.entry: _EntryDraft | None = None

    def parse(self, text: str) -> Collection:
        fence: str | None = None
        fence_line = 0
        for lineno, line in enumerate(text.split("\n"), start=1):
            if fence is not None:
                self._append(line, lineno)
                if is_closing_fence(line, fence):
                    fence = None
                continue
            match = match_fence(line)
            if match:
                self._append(line, lineno)
                fence = match.group("fence")
                fence_line = lineno
                continue
            heading = _HEADING_RE.match(line)
            level = len(heading.group("hashes")) if heading else 0
            if heading and (level <= self.section_level or level == self.question_level):
                self._heading(level, heading.group("text") or "", lineno)
                continue
            self._append(line, lineno)
        if fence is not None:
            raise MalformedDocumentError("code fence is never closed", self.source, fence_line)
        self._close_section()
        return Collection(sections=tuple(self.sections), title=self.title, sources=(self.source,))

    def _heading(self, level: int, text: str, lineno: int) -> None:
        location = SourceLocation(self.source, lineno)
        if level < self.section_level:
            self._close_section()
            if self.title is None:
                self.title = normalize_text(text) or None
            return
        if level == self.section_level:
            self._close_section()
            name = normalize_text(text)
            if not name:
                raise MalformedDocumentError("section heading has no text", self.source, lineno)
            self.section = _SectionDraft(name=name, location=location)
            return
        if self.section is None:
            raise MalformedDocumentError(
                "question heading appears before any section heading",
                self.source,
                lineno,
            )
        self._close_entry()
        question, entry_id = _split_question(text)
        self.entry = _EntryDraft(question=question, entry_id=entry_id, location=location)

    def _append(self, line: str, lineno: int) -> None:
        if self.entry is not None:
            self.entry.lines.append(line)
        elif self.section is not None:
            self.section.intro.append(line)
        elif line.strip():
            raise MalformedDocumentError(
                "text appears before any section heading", self.source, lineno
            )

    def _close_entry(self) -> None:
        if self.entry is None or self.section is None:
            self.entry = None
            return
        lines = _trim_blank_lines(self.entry.lines)
        tags: tuple[str, ...] = ()
        if lines:
            tag_match = _TAGS_RE.match(lines[0].strip())
            if tag_match:
                tags = _parse_tags(tag_match.group("tags"))
                lines = _trim_blank_lines(lines[1:])
        self.section.entries.append(
            Entry(
                id=self.entry.entry_id,
                section=self.section.name,
                question=self.entry.question,
                answer="\n".join(lines),
                tags=tags,
                location=self.entry.location,
            )
        )
        self.entry = None

    def _close_section(self) -> None:
        self._close_entry()
        if self.section is None:
            return
        self.sections.append(
            Section(
                name=self.section.name,
                entries=tuple(self.section.entries),
                location=self.section.location,
                intro="\n".join(_trim_blank_lines(self.section.intro)),
            )
        )
        self.section = None


def _split_question(text: str) -> tuple[str, str]:
    """Separate an explicit ``{#id}`` suffix from the question text."""
    match = _EXPLICIT_ID_RE.search(text)
    if match:
        return normalize_text(text[: match.start()]), match.group("id")
    question = normalize_text(text)
    return question, make_entry_id(question)


def make_entry_id(question: str) -> str:
    """Derive an entry id from question text."""
    slug = slugify(question)
    if slug or not question:
        return slug
    digest = hashlib.sha1(question.encode("utf-8")).hexdigest()
    return f"q-{digest[:10]}"


def is_tags_line(line: str) -> bool:
    """Return True if the line would be read as an entry tag list."""
    return bool(_TAGS_RE.match(line.strip()))


def _parse_tags(raw: str) -> tuple[str, ...]:
    tags: list[str] = []
    for value in raw.split(","):
        tag = value.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


def _trim_blank_lines(lines: list[str]) -> list[str]:
    cleaned = [line.rstrip() for line in lines]
    start = 0
    end = len(cleaned)
    while start < end and not cleaned[start]:
        start += 1
    while end > start and not cleaned[end - 1]:
        end -= 1
    return cleaned[start:end]
