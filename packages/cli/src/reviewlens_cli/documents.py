"""Shared plumbing for commands: config resolution and report loading.

Library errors are translated into click usage errors here so every command
reports a missing file or a bad config value the same way.
"""

from __future__ import annotations

import click

from reviewlens_core.config import load_config, validate_config
from reviewlens_core.models import Category, ParsedReviewDocument, Severity
from reviewlens_core.parser import parse_review_file

SEVERITY_CHOICES = [s.value for s in Severity]
CATEGORY_CHOICES = [c.value for c in Category]

SEVERITY_STYLE = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
    Severity.INFO: "dim",
}


def resolve_config(ctx: click.Context, cli_overrides: dict | None = None) -> dict:
    config_path = (ctx.obj or {}).get("config_path", ".reviewlens.yml")
    config = load_config(config_path, cli_overrides=cli_overrides)
    try:
        validate_config(config)
    except ValueError as e:
        raise click.UsageError(f"{config_path}: {e}")
    return config


def load_document(file_path: str, dedupe: bool = False) -> ParsedReviewDocument:
    try:
        return parse_review_file(file_path, dedupe=dedupe)
    except FileNotFoundError as e:
        raise click.UsageError(str(e))


def severity_or_none(value: str | None) -> Severity | None:
    return Severity(value.lower()) if value else None


def categories_from(values) -> list[Category]:
    return [Category(str(v).lower()) for v in values or ()]
