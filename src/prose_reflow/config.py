from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping

import yaml


@dataclass(slots=True)
class ReflowConfig:
    """Configuration options for reflow runs."""

    profile: str = "info"
    extra_patterns: List[str] = field(default_factory=list)
    profiles: Dict[str, List[str]] = field(default_factory=dict)
    bullet_pattern: str | None = None
    encoding: str = "utf-8"
    log_level: str = "WARNING"

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(ReflowConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    if "extra_patterns" in kwargs:
        kwargs["extra_patterns"] = _as_pattern_list(kwargs["extra_patterns"], "extra_patterns")
    if "profiles" in kwargs:
        profiles = kwargs["profiles"] or {}
        if not isinstance(profiles, Mapping):
            raise ValueError("'profiles' must map profile names to pattern lists.")
        kwargs["profiles"] = {
            str(name): _as_pattern_list(patterns, f"profiles.{name}")
            for name, patterns in profiles.items()
        }
    return kwargs


def _as_pattern_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"'{key}' must be a list of regular expressions.")
    return [str(item) for item in value]


def config_from_dict(data: Mapping[str, Any] | None) -> ReflowConfig:
    """Build a ReflowConfig from a dictionary-like input."""
    if data is None:
        return ReflowConfig()
    return ReflowConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> ReflowConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> ReflowConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return ReflowConfig()
    return config_from_yaml(path)
