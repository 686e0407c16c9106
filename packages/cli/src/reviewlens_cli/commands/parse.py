"""parse command — list the issues recovered from a review report."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reviewlens_cli.documents import (
    CATEGORY_CHOICES,
    SEVERITY_CHOICES,
    SEVERITY_STYLE,
    categories_from,
    load_document,
    resolve_config,
    severity_or_none,
)
from reviewlens_core.models import ParsedIssue, ParsedReviewDocument
from reviewlens_core.report import exceeds_threshold, filter_issues, summarize

console = Console()


def _location(issue: ParsedIssue) -> str:
    if issue.file:
        location = f"{issue.file}:{issue.line}"
    else:
        location = f"line {issue.line}"
    if issue.column is not None:
        location += f":{issue.column}"
    return location


def _print_document(document: ParsedReviewDocument, issues: list[ParsedIssue]) -> None:
    console.print(f"\n[bold]{escape(document.title)}[/bold]")
    console.print(
        f"  [dim]{escape(document.repository)} @ {escape(document.branch)} · "
        f"{escape(document.provider)} / {escape(document.model)} · {escape(document.timestamp)}[/dim]"
    )
    if document.summary:
        console.print(f"\n{escape(document.summary)}")

    if not issues:
        console.print("\n[green]No issues to show.[/green]")
        return

    table = Table(title=f"Issues ({len(issues)} of {len(document.issues)})", show_header=True, header_style="bold cyan")
    table.add_column("Severity", width=9)
    table.add_column("Category", width=13)
    table.add_column("Location")
    table.add_column("Title")
    table.add_column("Suggestion")

    for issue in issues:
        style = SEVERITY_STYLE[issue.severity]
        table.add_row(
            f"[{style}]{issue.severity.value}[/{style}]",
            issue.category.value,
            escape(_location(issue)),
            escape(issue.title),
            escape(issue.suggestion),
        )
    console.print(table)
    console.print(f"[dim]{summarize(document)}[/dim]")


@click.command("parse")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the parsed document as JSON.")
@click.option(
    "--min-severity",
    type=click.Choice(SEVERITY_CHOICES, case_sensitive=False),
    default=None,
    help="Hide issues below this severity. Overrides config file.",
)
@click.option(
    "--category",
    "categories",
    multiple=True,
    type=click.Choice(CATEGORY_CHOICES, case_sensitive=False),
    help="Only show this category (repeatable). Overrides config file.",
)
@click.option(
    "--dedupe/--no-dedupe",
    default=None,
    help="Collapse issues reported twice for the same file, line and title.",
)
@click.option(
    "--fail-on",
    type=click.Choice(SEVERITY_CHOICES, case_sensitive=False),
    default=None,
    help="Exit with status 1 if any issue is at least this severe.",
)
@click.pass_context
def parse_cmd(
    ctx,
    file_path: str,
    as_json: bool,
    min_severity: str | None,
    categories: tuple[str, ...],
    dedupe: bool | None,
    fail_on: str | None,
):
    """Parse an AI review report and list its issues.

    Issues are shown most severe first. The threshold given by --fail-on is
    checked against all issues, not only the ones left after filtering, so
    CI gates are unaffected by display options.
    """
    config = resolve_config(
        ctx,
        cli_overrides={
            "min_severity": min_severity,
            "categories": list(categories) or None,
            "dedupe": dedupe,
            "fail_on": fail_on,
        },
    )

    document = load_document(file_path, dedupe=bool(config["dedupe"]))
    issues = filter_issues(
        document.issues,
        min_severity=severity_or_none(config["min_severity"]),
        categories=categories_from(config["categories"]),
    )

    if as_json:
        payload = document.to_dict()
        payload["issues"] = [issue.to_dict() for issue in issues]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        _print_document(document, issues)

    threshold = severity_or_none(config["fail_on"])
    if threshold is not None and exceeds_threshold(document.issues, threshold):
        if not as_json:
            console.print(f"[red]Found issues at or above '{threshold.value}'.[/red]")
        ctx.exit(1)
