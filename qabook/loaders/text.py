from __future__ import annotations

"""Plain text source reading and normalization helpers."""

import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path

from qabook.collection.errors import UnreadableSourceError

_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_RE = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class SourceText:
    """Decoded document content with its source label."""
    source: str
    content: str


def load_text_file(path: Path, encoding: str = "utf-8") -> SourceText:
    """Load a text file from disk into a SourceText."""
    source = str(path)
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        reason = exc.strerror or type(exc).__name__
        raise UnreadableSourceError(f"cannot read file ({reason})", source) from exc
    return load_text_bytes(data, source=source, encoding=encoding)


def load_text_bytes(data: bytes, source: str, encoding: str = "utf-8") -> SourceText:
    """Decode text bytes into a SourceText."""
    try:
        content = data.decode(encoding)
    except LookupError as exc:
        raise UnreadableSourceError(f"unknown encoding {encoding!r}", source) from exc
    except UnicodeDecodeError as exc:
        raise UnreadableSourceError(
            f"cannot decode as {encoding} at byte {exc.start}", source
        ) from exc
    if content.startswith("\ufeff"):
        content = content[1:]
    return SourceText(source=source, content=content.replace("\r\n", "\n").replace("\r", "\n"))


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def slugify(text: str) -> str:
    """Build a stable ASCII identifier from heading text."""
    ascii_text = (
        unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    )
    return _SLUG_RE.sub("-", ascii_text.lower()).strip("-")
