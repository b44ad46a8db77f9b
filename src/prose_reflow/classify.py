from __future__ import annotations

import re
from typing import Pattern

# Bullet glyphs, numbers and single letters used as list-item prefixes:
# "• x", "* x", "- x", "1. x", "2) x", "(3) x", "a. x", "b) x", "(c) x".
BULLET_PATTERN = re.compile(
    r"^[ \t]*(?:[•*+-]|[0-9]+[.)]|[A-Za-z][.)]|\((?:[0-9]+|[A-Za-z])\))[ \t]+",
    re.MULTILINE,
)

OPENING_QUOTES = "\"'“‘"
SENTENCE_ENDINGS = (".", ":", ")", '"', "”")


def count_markers(text: str, pattern: Pattern[str] = BULLET_PATTERN) -> int:
    """Count marker occurrences, resuming each search one past the last match start."""
    count = 0
    pos = 0
    while pos <= len(text):
        match = pattern.search(text, pos)
        if match is None:
            break
        count += 1
        pos = match.start() + 1
    return count


def matches_sentence(candidate: str) -> bool:
    """Upper-case start (after an optional opening quote) and terminal punctuation."""
    body = candidate[1:] if candidate[:1] in OPENING_QUOTES else candidate
    if not body or not body[0].isupper():
        return False
    return candidate.endswith(SENTENCE_ENDINGS)


def strip_marker(text: str, pattern: Pattern[str] = BULLET_PATTERN) -> tuple[str, int]:
    """Return the candidate sentence text and the number of markers found.

    Markers are counted over the whole paragraph, so a lead-in line followed
    by list items still counts as a list. Text with several markers is
    returned trimmed but otherwise unchanged; a single leading marker is
    stripped.
    """
    trimmed = text.strip()
    markers = count_markers(trimmed, pattern)
    if markers > 1:
        return trimmed, markers
    match = pattern.match(trimmed)
    if match is None:
        return trimmed, markers
    return trimmed[match.end() :].strip(), markers


def looks_like_prose(paragraph_text: str, bullet_pattern: Pattern[str] = BULLET_PATTERN) -> bool:
    """Decide whether a paragraph reads as a single flowable piece of prose."""
    candidate, markers = strip_marker(paragraph_text, bullet_pattern)
    if markers > 1:
        return False
    return matches_sentence(candidate)
