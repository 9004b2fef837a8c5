from __future__ import annotations

"""Core data types for question/answer collections."""

import re
from dataclasses import dataclass, field
from typing import Iterator

_FENCE_RE = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")


@dataclass(frozen=True)
class SourceLocation:
    """Position of a heading inside a source document."""
    source: str
    line: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return self.source
        return f"{self.source}:{self.line}"


@dataclass(frozen=True)
class CodeSample:
    """Fenced code block embedded in an answer."""
    language: str
    code: str


@dataclass(frozen=True)
class Entry:
    """One question/answer record."""
    id: str
    section: str
    question: str
    answer: str
    tags: tuple[str, ...] = ()
    location: SourceLocation = field(default_factory=lambda: SourceLocation("<memory>"))

    @property
    def code_samples(self) -> list[CodeSample]:
        return extract_code_samples(self.answer)


@dataclass(frozen=True)
class Section:
    """Named ordered group of entries."""
    name: str
    entries: tuple[Entry, ...] = ()
    location: SourceLocation = field(default_factory=lambda: SourceLocation("<memory>"))
    intro: str = ""


@dataclass(frozen=True)
class Collection:
    """Ordered sections loaded for a single run."""
    sections: tuple[Section, ...] = ()
    title: str | None = None
    sources: tuple[str, ...] = ()

    def entries(self) -> Iterator[Entry]:
        """Iterate all entries in document order."""
        for section in self.sections:
            yield from section.entries

    @property
    def entry_count(self) -> int:
        return sum(len(section.entries) for section in self.sections)

    def find(self, entry_id: str) -> Entry | None:
        """Return the first entry with the given id."""
        for entry in self.entries():
            if entry.id == entry_id:
                return entry
        return None


def extract_code_samples(text: str) -> list[CodeSample]:
    """Extract fenced code blocks from answer text in order."""
    samples: list[CodeSample] = []
    fence: str | None = None
    language = ""
    buffer: list[str] = []
    for line in text.splitlines():
        match = match_fence(line)
        if fence is None:
            if match:
                fence = match.group("fence")
                language = match.group("info").strip().split(" ", 1)[0]
                buffer = []
            continue
        if match and _closes_fence(match, fence):
            samples.append(CodeSample(language=language, code="\n".join(buffer)))
            fence = None
            continue
        buffer.append(line)
    return samples


def _closes_fence(match: re.Match[str], fence: str) -> bool:
    """Return True when a fence line closes the currently open block."""
    candidate = match.group("fence")
    return (
        candidate[0] == fence[0]
        and len(candidate) >= len(fence)
        and not match.group("info").strip()
    )


def match_fence(line: str) -> re.Match[str] | None:
    """Match an opening or closing code fence line.

    A backtick fence whose info string holds a backtick is an inline code
    span, not a fence.
    """
    match = _FENCE_RE.match(line)
    if match and match.group("fence")[0] == "`" and "`" in match.group("info"):
        return None
    return match


def is_closing_fence(line: str, fence: str) -> bool:
    """Return True if the line closes a block opened with ``fence``."""
    match = _FENCE_RE.match(line)
    return bool(match) and _closes_fence(match, fence)
