from __future__ import annotations

"""Error taxonomy for loading, validating and rendering collections."""

from qabook.collection.types import SourceLocation


class QABookError(RuntimeError):
    """Base error for a failed pipeline run."""
    kind = "QABook"


class MalformedDocumentError(QABookError):
    """Raised when heading markup cannot be parsed."""
    kind = "MalformedDocument"

    def __init__(self, message: str, source: str, line: int | None = None) -> None:
        self.source = source
        self.line = line
        self.location = SourceLocation(source, line)
        super().__init__(f"{self.location}: {message}")


class UnreadableSourceError(QABookError):
    """Raised when a source document cannot be read or decoded."""
    kind = "UnreadableSource"

    def __init__(self, message: str, source: str) -> None:
        self.source = source
        super().__init__(f"{source}: {message}")


class DuplicateIdError(QABookError):
    """Raised when two entries share an id."""
    kind = "DuplicateId"

    def __init__(
        self,
        entry_id: str,
        first: SourceLocation,
        duplicate: SourceLocation,
    ) -> None:
        self.entry_id = entry_id
        self.first = first
        self.duplicate = duplicate
        super().__init__(
            f"entry id {entry_id!r} defined at {first} is repeated at {duplicate}"
        )


class EmptyFieldError(QABookError):
    """Raised when a required field is blank."""
    kind = "EmptyField"

    def __init__(
        self,
        field: str,
        location: SourceLocation,
        entry_id: str | None = None,
    ) -> None:
        self.field = field
        self.location = location
        self.entry_id = entry_id
        if field == "section":
            subject = "section"
        elif entry_id:
            subject = f"entry {entry_id!r}"
        else:
            subject = "entry"
        super().__init__(f"{location}: {subject} has an empty {field}")


class UnsupportedFormatError(QABookError):
    """Raised when the render format selector is not recognized."""
    kind = "UnsupportedFormat"

    def __init__(self, fmt: str, supported: list[str]) -> None:
        self.fmt = fmt
        self.supported = list(supported)
        super().__init__(
            f"format {fmt!r} is not supported (choose from: {', '.join(self.supported)})"
        )


class OutputError(QABookError):
    """Raised when rendered output cannot be written."""
    kind = "Output"
