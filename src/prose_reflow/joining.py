from __future__ import annotations

import re

# A hard break between two non-space characters, with any non-newline
# whitespace hugging it. Same whitespace set as str.strip() in paragraphs.py.
LINE_BREAK_PATTERN = re.compile(r"(\S)[^\S\n]*\n[^\S\n]*(?=\S)")


def has_line_breaks(text: str) -> bool:
    return LINE_BREAK_PATTERN.search(text) is not None


def join_lines(text: str) -> str:
    """Replace each internal hard break with a single space."""
    joined = text
    while True:
        updated = LINE_BREAK_PATTERN.sub(r"\1 ", joined)
        if updated == joined:
            return joined
        joined = updated
