"""stats command — severity and category breakdown of a review report."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reviewlens_cli.documents import SEVERITY_STYLE, load_document, resolve_config
from reviewlens_core.report import count_by_category, count_by_severity, group_by_file, summarize

console = Console()


@click.command("stats")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.option("--top", default=10, show_default=True, help="Number of files to show in the most-flagged table.")
@click.pass_context
def stats_cmd(ctx, file_path: str, top: int):
    """Show how the issues of a report break down by severity and category.

    Useful for a quick read on where a review concentrates before going
    through individual findings.
    """
    config = resolve_config(ctx)
    document = load_document(file_path, dedupe=bool(config["dedupe"]))
    total = len(document.issues)

    console.print(f"\n[bold]Review stats for [cyan]{escape(document.title)}[/cyan][/bold]")
    console.print(f"  {summarize(document)}")
    if not total:
        return

    # --- Severity breakdown ---
    sev_table = Table(title="Severity Breakdown", show_header=True)
    sev_table.add_column("Severity", style="bold")
    sev_table.add_column("Count", justify="right")
    sev_table.add_column("% of total", justify="right")
    for severity, count in count_by_severity(document.issues).items():
        style = SEVERITY_STYLE[severity]
        sev_table.add_row(f"[{style}]{severity.value}[/{style}]", str(count), f"{count / total * 100:.1f}%")
    console.print(sev_table)

    # --- Category breakdown ---
    cat_table = Table(title="Category Breakdown", show_header=True)
    cat_table.add_column("Category", style="bold")
    cat_table.add_column("Count", justify="right")
    for category, count in count_by_category(document.issues).items():
        if count:
            cat_table.add_row(category.value, str(count))
    console.print(cat_table)

    # --- Most flagged files ---
    files = {path: issues for path, issues in group_by_file(document.issues).items() if path is not None}
    if files:
        file_table = Table(title=f"Top {top} Most Flagged Files", show_header=True)
        file_table.add_column("File")
        file_table.add_column("Issues", justify="right")
        ranked = sorted(files.items(), key=lambda item: len(item[1]), reverse=True)
        for path, issues in ranked[:top]:
            file_table.add_row(escape(path), str(len(issues)))
        console.print(file_table)
