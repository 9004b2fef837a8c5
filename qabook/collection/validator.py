from __future__ import annotations

"""Structural validation for loaded collections."""

import logging

from qabook.collection.errors import DuplicateIdError, EmptyFieldError
from qabook.collection.types import Collection, SourceLocation

logger = logging.getLogger(__name__)


def validate_collection(collection: Collection) -> Collection:
    """Return the collection unchanged or raise on the first violation.

    Sections and entries are checked in document order. Within an entry the
    question is checked before the answer, then the id for blankness and
    finally for uniqueness against every earlier entry.
    """
    seen: dict[str, SourceLocation] = {}
    for section in collection.sections:
        if not section.name.strip():
            raise EmptyFieldError("section", section.location)
        for entry in section.entries:
            entry_id = entry.id.strip()
            if not entry.question.strip():
                raise EmptyFieldError("question", entry.location, entry_id or None)
            if not entry.answer.strip():
                raise EmptyFieldError("answer", entry.location, entry_id or None)
            if not entry_id:
                raise EmptyFieldError("id", entry.location)
            first = seen.get(entry_id)
            if first is not None:
                raise DuplicateIdError(entry_id, first=first, duplicate=entry.location)
            seen[entry_id] = entry.location
    logger.info(
        "collection_validated",
        extra={"sections": len(collection.sections), "entries": len(seen)},
    )
    return collection
