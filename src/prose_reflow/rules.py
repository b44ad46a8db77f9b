from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Pattern, Sequence, Union

from .classify import BULLET_PATTERN
from .models import Paragraph
from .paragraphs import iter_lines

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .config import ReflowConfig

__all__ = [
    "RuleSet",
    "MalformedRulesetError",
    "PROFILES",
    "compile_ruleset",
    "as_ruleset",
    "get_ruleset",
    "build_ruleset_from_config",
    "build_bullet_pattern_from_config",
    "find_forbidden",
    "is_forbidden",
]

PatternLike = Union[str, Pattern[str]]

# Rules of dashes, equals signs and the like: "----", "=====", "+-+-+".
SEPARATOR_LINE = r"^[ \t]*[-+*=—]{2,}"
# Comment lines and parenthesized expressions that are not prose asides.
CODE_LINE = r"^[ \t]*(?:;|#|//|/\*|\((?![A-ZÀ-ÖØ-Þ“‘]))"
DEEP_INDENT_LINE = r"^[ \t]{8,}"

HELPFUL_SECTION_LABELS = (
    "Signature",
    "Documentation",
    "Key Bindings",
    "References",
    "Find all references",
    "Debugging",
    "Source Code",
    "Symbol Properties",
    "Aliases",
    "Value",
    "Keymap",
)
SECTION_LABEL_LINE = (
    r"^(?:" + "|".join(re.escape(label) for label in HELPFUL_SECTION_LABELS) + r")[ \t\r]*$"
)


class MalformedRulesetError(ValueError):
    """Raised when a forbidden pattern is not a valid regular expression."""


@dataclass(slots=True, frozen=True)
class RuleSet:
    """Named, ordered collection of forbidden-line patterns."""

    name: str
    patterns: tuple[Pattern[str], ...] = ()

    @property
    def sources(self) -> list[str]:
        return [pattern.pattern for pattern in self.patterns]

    def extended(self, extra: Iterable[PatternLike], name: str | None = None) -> "RuleSet":
        """Return a new RuleSet with extra patterns appended."""
        added = compile_ruleset(extra).patterns
        return RuleSet(name=name or self.name, patterns=self.patterns + added)


def compile_ruleset(patterns: Iterable[PatternLike], name: str = "custom") -> RuleSet:
    """Compile pattern sources into a RuleSet, failing on the first bad one."""
    compiled: list[Pattern[str]] = []
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            compiled.append(pattern)
            continue
        try:
            compiled.append(re.compile(pattern))
        except (re.error, TypeError) as exc:
            raise MalformedRulesetError(
                f"Invalid forbidden pattern {pattern!r} in ruleset '{name}': {exc}"
            ) from exc
    return RuleSet(name=name, patterns=tuple(compiled))


def as_ruleset(ruleset: RuleSet | Sequence[PatternLike] | None) -> RuleSet:
    """Accept a RuleSet or a plain pattern sequence."""
    if ruleset is None:
        return PROFILES["none"]
    if isinstance(ruleset, RuleSet):
        return ruleset
    if isinstance(ruleset, (str, re.Pattern)):
        return compile_ruleset([ruleset])
    return compile_ruleset(ruleset)


PROFILES: dict[str, RuleSet] = {
    "info": compile_ruleset([SEPARATOR_LINE, CODE_LINE, DEEP_INDENT_LINE], name="info"),
    "helpful": compile_ruleset([SECTION_LABEL_LINE, CODE_LINE], name="helpful"),
    "none": RuleSet(name="none"),
}


def get_ruleset(name: str) -> RuleSet:
    """Look up a built-in profile by name."""
    normalized = name.lower().strip()
    if normalized in PROFILES:
        return PROFILES[normalized]
    raise ValueError(f"Unknown profile '{name}'.")


def build_ruleset_from_config(config: "ReflowConfig") -> RuleSet:
    """Resolve the active ruleset from ReflowConfig."""
    normalized = config.profile.lower().strip()
    custom = {key.lower().strip(): value for key, value in config.profiles.items()}
    if normalized in custom:
        ruleset = compile_ruleset(custom[normalized], name=normalized)
    else:
        ruleset = get_ruleset(normalized)
    if config.extra_patterns:
        ruleset = ruleset.extended(config.extra_patterns)
    return ruleset


def find_forbidden(paragraph_text: str, ruleset: RuleSet) -> str | None:
    """Return the first pattern matching any line of the paragraph."""
    whole = Paragraph(0, len(paragraph_text))
    for line in iter_lines(paragraph_text, whole):
        line_text = line.text_of(paragraph_text)
        for pattern in ruleset.patterns:
            if pattern.search(line_text):
                return pattern.pattern
    return None


def is_forbidden(paragraph_text: str, ruleset: RuleSet) -> bool:
    """Return True if any line of the paragraph matches any forbidden pattern."""
    return find_forbidden(paragraph_text, ruleset) is not None


def build_bullet_pattern_from_config(config: "ReflowConfig") -> Pattern[str]:
    """Compile the configured list-marker pattern, or fall back to the default."""
    if not config.bullet_pattern:
        return BULLET_PATTERN
    try:
        return re.compile(config.bullet_pattern, re.MULTILINE)
    except re.error as exc:
        raise MalformedRulesetError(
            f"Invalid bullet pattern {config.bullet_pattern!r}: {exc}"
        ) from exc
