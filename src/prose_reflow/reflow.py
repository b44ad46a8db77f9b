from __future__ import annotations

import logging
from typing import Callable, List, Optional, Pattern, Sequence, Union

from .classify import BULLET_PATTERN, matches_sentence, strip_marker
from .joining import has_line_breaks, join_lines
from .models import Document, Paragraph, ParagraphVerdict
from .paragraphs import iter_paragraphs, next_paragraph
from .rules import PatternLike, RuleSet, as_ruleset, find_forbidden

logger = logging.getLogger(__name__)

RulesetLike = Optional[Union[RuleSet, Sequence[PatternLike]]]
FaultHandler = Callable[["TransformFault"], None]


class TransformFault(RuntimeError):
    """Raised internally when a paragraph cannot be scanned, classified or joined."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.offset = offset


def classify_paragraph(
    text: str,
    paragraph: Paragraph,
    ruleset: RuleSet,
    bullet_pattern: Pattern[str] = BULLET_PATTERN,
) -> ParagraphVerdict:
    """Run the forbidden filter, then the structure classifier, on one paragraph."""
    paragraph_text = paragraph.text_of(text)
    forbidden_by = find_forbidden(paragraph_text, ruleset)
    if forbidden_by is not None:
        return ParagraphVerdict(
            begin=paragraph.begin,
            end=paragraph.end,
            prose=False,
            reason="forbidden",
            forbidden_by=forbidden_by,
        )
    candidate, markers = strip_marker(paragraph_text, bullet_pattern)
    if markers > 1:
        return ParagraphVerdict(
            begin=paragraph.begin,
            end=paragraph.end,
            prose=False,
            reason="list",
            marker_count=markers,
        )
    prose = matches_sentence(candidate)
    return ParagraphVerdict(
        begin=paragraph.begin,
        end=paragraph.end,
        prose=prose,
        reason="prose" if prose else "not-a-sentence",
        marker_count=markers,
    )


def analyze(
    text: str,
    ruleset: RulesetLike,
    *,
    bullet_pattern: Pattern[str] = BULLET_PATTERN,
) -> List[ParagraphVerdict]:
    """Classify every paragraph of text without modifying it."""
    rules = as_ruleset(ruleset)
    return [
        classify_paragraph(text, paragraph, rules, bullet_pattern)
        for paragraph in iter_paragraphs(text)
    ]


def reflow(
    document: Document,
    ruleset: RulesetLike,
    *,
    bullet_pattern: Pattern[str] = BULLET_PATTERN,
    on_fault: FaultHandler | None = None,
) -> None:
    """Join hard-wrapped lines of every prose paragraph of document in place.

    Paragraphs are handled one at a time in document order. Each join is a
    single replace over that paragraph's span, so a fault never leaves a
    paragraph half-joined. A fault stops the scan: paragraphs already
    joined stay joined, the rest is left as it was, and the fault is logged
    and handed to on_fault instead of propagating.
    """
    # Compile up front so a malformed ruleset reaches the caller.
    rules = as_ruleset(ruleset)
    pos: int | None = 0
    scanned = 0
    while pos is not None:
        try:
            pos = _reflow_next(document, pos, rules, bullet_pattern)
        except TransformFault as fault:
            logger.error("%s", fault)
            if on_fault is not None:
                on_fault(fault)
            return
        if pos is not None:
            scanned += 1
    logger.debug("Scanned %d paragraph(s) under ruleset '%s'", scanned, rules.name)


def _reflow_next(
    document: Document,
    pos: int,
    rules: RuleSet,
    bullet_pattern: Pattern[str],
) -> int | None:
    """Handle the paragraph at or after pos and return where scanning resumes."""
    try:
        paragraph = next_paragraph(document.text, pos)
        if paragraph is None:
            return None
        verdict = classify_paragraph(document.text, paragraph, rules, bullet_pattern)
        if not verdict.prose:
            logger.debug(
                "Skipping paragraph at %d (%s%s)",
                paragraph.begin,
                verdict.reason,
                f": {verdict.forbidden_by}" if verdict.forbidden_by else "",
            )
            return paragraph.end + 1
        original = paragraph.text_of(document.text)
        if not has_line_breaks(original):
            return paragraph.end + 1
        updated = join_lines(original)
        document.replace(paragraph.begin, paragraph.end, updated)
        return paragraph.begin + len(updated) + 1
    except Exception as exc:
        raise TransformFault(
            f"Reflow stopped at offset {pos} under ruleset '{rules.name}': {exc}",
            offset=pos,
        ) from exc


def reflow_text(
    text: str,
    ruleset: RulesetLike,
    *,
    bullet_pattern: Pattern[str] = BULLET_PATTERN,
    on_fault: FaultHandler | None = None,
) -> str:
    """Return text with its prose paragraphs joined."""
    document = Document(text)
    reflow(document, ruleset, bullet_pattern=bullet_pattern, on_fault=on_fault)
    return document.text
