from __future__ import annotations

from typing import Iterator

from .models import Line, Paragraph


def next_paragraph(text: str, start: int = 0) -> Paragraph | None:
    """Return the first paragraph at or after the line containing start."""
    length = len(text)
    if start >= length:
        return None
    pos = text.rfind("\n", 0, max(0, start)) + 1
    begin: int | None = None
    end = pos

    while pos < length:
        newline = text.find("\n", pos)
        eol = length if newline == -1 else newline
        blank = not text[pos:eol].strip()
        if blank and begin is not None:
            return Paragraph(begin, end)
        if not blank:
            if begin is None:
                begin = pos
            end = eol
        pos = eol + 1

    if begin is None:
        return None
    return Paragraph(begin, end)


def iter_paragraphs(text: str, start: int = 0) -> Iterator[Paragraph]:
    """Yield paragraphs in document order from start to the end of text."""
    paragraph = next_paragraph(text, start)
    while paragraph is not None:
        yield paragraph
        paragraph = next_paragraph(text, paragraph.end + 1)


def iter_lines(text: str, paragraph: Paragraph) -> Iterator[Line]:
    """Yield the lines of a paragraph as spans into text."""
    pos = paragraph.begin
    while pos <= paragraph.end:
        newline = text.find("\n", pos, paragraph.end)
        eol = paragraph.end if newline == -1 else newline
        yield Line(pos, eol)
        pos = eol + 1
