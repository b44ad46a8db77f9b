"""
prose_reflow package exports the reflow engine for library consumers.
"""

from __future__ import annotations

from .classify import BULLET_PATTERN, looks_like_prose
from .config import ReflowConfig, config_from_dict, config_from_yaml, load_config
from .models import Document, DocumentReadOnlyError, Paragraph
from .reflow import TransformFault, analyze, reflow, reflow_text
from .rules import (
    PROFILES,
    MalformedRulesetError,
    RuleSet,
    compile_ruleset,
    get_ruleset,
    is_forbidden,
)

__all__ = [
    "BULLET_PATTERN",
    "Document",
    "DocumentReadOnlyError",
    "MalformedRulesetError",
    "PROFILES",
    "Paragraph",
    "ReflowConfig",
    "RuleSet",
    "TransformFault",
    "analyze",
    "compile_ruleset",
    "config_from_dict",
    "config_from_yaml",
    "get_ruleset",
    "is_forbidden",
    "load_config",
    "looks_like_prose",
    "reflow",
    "reflow_text",
]

__version__ = "0.1.0"
