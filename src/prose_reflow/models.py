from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator


class DocumentReadOnlyError(RuntimeError):
    """Raised when a protected document is edited."""


class Document:
    """Mutable text buffer the reflow engine edits in place."""

    def __init__(self, text: str = "", *, read_only: bool = False) -> None:
        self.text = text
        self.read_only = read_only

    def __len__(self) -> int:
        return len(self.text)

    def __repr__(self) -> str:
        return f"Document(len={len(self.text)}, read_only={self.read_only})"

    def replace(self, begin: int, end: int, new_text: str) -> None:
        """Replace the range [begin, end) with new_text."""
        if self.read_only:
            raise DocumentReadOnlyError("Document is read-only.")
        if not 0 <= begin <= end <= len(self.text):
            raise IndexError(
                f"Invalid range [{begin}, {end}) for document of length {len(self.text)}"
            )
        self.text = self.text[:begin] + new_text + self.text[end:]

    @contextmanager
    def writable(self) -> Iterator["Document"]:
        """Temporarily lift read-only protection."""
        previous = self.read_only
        self.read_only = False
        try:
            yield self
        finally:
            self.read_only = previous


@dataclass(slots=True, frozen=True)
class Paragraph:
    """A [begin, end) span bounded by blank-line separators."""

    begin: int
    end: int

    def text_of(self, text: str) -> str:
        return text[self.begin : self.end]


@dataclass(slots=True, frozen=True)
class Line:
    """A [begin, end) span of one line, excluding its newline."""

    begin: int
    end: int

    def text_of(self, text: str) -> str:
        return text[self.begin : self.end]


@dataclass(slots=True)
class ParagraphVerdict:
    """Classification outcome for a single paragraph."""

    begin: int
    end: int
    prose: bool
    reason: str
    forbidden_by: str | None = None
    marker_count: int = 0
