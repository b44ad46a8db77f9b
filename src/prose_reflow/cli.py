from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Pattern, Tuple, TypedDict

import typer
import yaml

from .config import ReflowConfig, load_config
from .models import Document, ParagraphVerdict
from .reflow import TransformFault, analyze, reflow
from .rules import (
    PROFILES,
    MalformedRulesetError,
    RuleSet,
    build_bullet_pattern_from_config,
    build_ruleset_from_config,
)

app = typer.Typer(help="Prose reflow CLI.", no_args_is_help=True)

# File types the CLI expands when given a directory.
SUPPORTED_INPUT_EXTENSIONS = {".txt", ".text", ".info"}


class VerdictPayload(TypedDict):
    begin: int
    end: int
    prose: bool
    reason: str
    forbidden_by: str | None
    marker_count: int


class DocumentReport(TypedDict):
    doc_id: str
    paragraphs: int
    prose: int
    verdicts: List[VerdictPayload]


@app.command()
def run(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=True, file_okay=True
    ),
    output_path: Path | None = typer.Option(
        None, help="Output file (single input) or directory (directory input)."
    ),
    in_place: bool = typer.Option(
        False, "--in-place", help="Rewrite the input files instead of writing elsewhere."
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Profile to apply (e.g., 'info', 'helpful', 'none')."
    ),
    pattern: List[str] = typer.Option(
        None, "--pattern", help="Extra forbidden-line regular expression.", show_default=False
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
) -> None:
    """Join hard-wrapped prose paragraphs in a file or directory."""
    if output_path is None and not in_place and input_path.is_dir():
        raise typer.BadParameter(
            "Directory input requires --output-path or --in-place.",
            param_hint="--output-path",
        )
    cfg = _load_run_config(config, profile, pattern, log_level)
    ruleset, bullet_pattern = _resolve_rules(cfg)
    documents = _load_documents(input_path, cfg.encoding)

    for doc_id, (source, document) in documents.items():
        reflow(
            document,
            ruleset,
            bullet_pattern=bullet_pattern,
            on_fault=lambda fault, name=doc_id: _echo_fault(name, fault),
        )
        if in_place:
            source.write_text(document.text, encoding=cfg.encoding)
        elif output_path is None:
            typer.echo(document.text, nl=False)
        else:
            dest = output_path / doc_id if input_path.is_dir() else output_path
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text(document.text, encoding=cfg.encoding)


@app.command()
def check(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=True, file_okay=True
    ),
    profile: str | None = typer.Option(None, "--profile", "-p"),
    pattern: List[str] = typer.Option(
        None, "--pattern", help="Extra forbidden-line regular expression.", show_default=False
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
) -> None:
    """Report how each paragraph would be classified, as JSON."""
    cfg = _load_run_config(config, profile, pattern, log_level)
    ruleset, bullet_pattern = _resolve_rules(cfg)
    documents = _load_documents(input_path, cfg.encoding)
    reports: List[DocumentReport] = []
    for doc_id, (_, document) in sorted(documents.items()):
        verdicts = analyze(document.text, ruleset, bullet_pattern=bullet_pattern)
        reports.append(
            {
                "doc_id": doc_id,
                "paragraphs": len(verdicts),
                "prose": sum(1 for v in verdicts if v.prose),
                "verdicts": [_verdict_dict(v) for v in verdicts],
            }
        )
    typer.echo(json.dumps({"ruleset": ruleset.name, "documents": reports}, indent=2))


@app.command("profiles")
def list_profiles() -> None:
    """Print the built-in profiles and their forbidden patterns as YAML."""
    payload = {name: ruleset.sources for name, ruleset in PROFILES.items()}
    typer.echo(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True))


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = ReflowConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _load_run_config(
    config: Path | None,
    profile: str | None,
    patterns: List[str] | None,
    log_level: str | None,
) -> ReflowConfig:
    """Load configuration and apply CLI overrides on top of it."""
    try:
        cfg = load_config(config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    if profile:
        cfg.profile = profile
    if patterns:
        cfg.extra_patterns = [*cfg.extra_patterns, *patterns]
    if log_level:
        cfg.log_level = log_level
    _configure_logging(cfg.log_level)
    return cfg


def _configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=numeric_level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("prose_reflow").setLevel(numeric_level)


def _resolve_rules(cfg: ReflowConfig) -> Tuple[RuleSet, Pattern[str]]:
    """Build the active ruleset and bullet pattern, surfacing bad input as CLI errors."""
    try:
        return build_ruleset_from_config(cfg), build_bullet_pattern_from_config(cfg)
    except MalformedRulesetError as exc:
        raise typer.BadParameter(str(exc), param_hint="--pattern") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--profile") from exc


def _load_documents(input_path: Path, encoding: str) -> Dict[str, Tuple[Path, Document]]:
    """Expand the input path into doc_id -> (source path, Document)."""
    if input_path.is_file():
        return {input_path.name: (input_path, _document_from_file(input_path, encoding))}

    files = sorted(
        p
        for p in input_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
    # Relative paths as doc IDs so output mirrors the input tree.
    return {
        str(file.relative_to(input_path)): (file, _document_from_file(file, encoding))
        for file in files
    }


def _document_from_file(path: Path, encoding: str) -> Document:
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read {path}: {exc}") from exc
    return Document(text)


def _echo_fault(doc_id: str, fault: TransformFault) -> None:
    typer.echo(f"[warning] {doc_id}: {fault}", err=True)


def _verdict_dict(verdict: ParagraphVerdict) -> VerdictPayload:
    return {
        "begin": verdict.begin,
        "end": verdict.end,
        "prose": verdict.prose,
        "reason": verdict.reason,
        "forbidden_by": verdict.forbidden_by,
        "marker_count": verdict.marker_count,
    }


if __name__ == "__main__":
    main()
