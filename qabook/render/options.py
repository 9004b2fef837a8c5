from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderOptions:
    """Presentation switches shared by every output format."""
    title: str | None = None
    toc: bool = False
    include_tags: bool = True
    section_level: int = 1
    question_level: int = 2

    def resolve_title(self, collection_title: str | None) -> str | None:
        title = self.title if self.title is not None else collection_title
        if title is None:
            return None
        title = title.strip()
        return title or None
